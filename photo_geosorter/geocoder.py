"""
Geocoding module for reverse geocoding GPS coordinates.

This module resolves a coordinate pair to the administrative place
(country, state, state district, county) reported by a Nominatim
reverse-geocoding endpoint.
"""

import logging
from typing import NamedTuple, Optional, Dict, Any

import requests
from geopy.extra.rate_limiter import RateLimiter

from . import __version__
from .exceptions import GeocodingError

DEFAULT_ENDPOINT = "https://nominatim.openstreetmap.org/reverse"
DEFAULT_ZOOM = 10
DEFAULT_USER_AGENT = f"photo-geosorter/{__version__}"
DEFAULT_TIMEOUT = 10.0
# Nominatim's public usage policy allows one request per second
DEFAULT_MIN_DELAY = 1.0

UNKNOWN = "Unknown"
ADDRESS_FIELDS = ("country", "state", "state_district", "county")


class Place(NamedTuple):
    """Administrative address used to build a destination directory."""

    country: str = UNKNOWN
    state: str = UNKNOWN
    state_district: str = UNKNOWN
    county: str = UNKNOWN

    @classmethod
    def from_address(cls, address: Dict[str, Any]) -> "Place":
        """
        Build a place from a Nominatim ``address`` object.

        Missing, null and empty fields become ``Unknown``; any other value
        is kept as its string representation.
        """
        values = {}
        for field in ADDRESS_FIELDS:
            value = address.get(field)
            if value is None or value == "":
                values[field] = UNKNOWN
            else:
                values[field] = str(value)
        return cls(**values)

    def as_path(self) -> str:
        """Return the unsanitized ``country/state/state_district/county`` string."""
        return "/".join(self)


class Geocoder:
    """
    Handles reverse geocoding of GPS coordinates to places.

    Requests are sequential, spaced by at least ``min_delay`` seconds, and
    never retried. Successful lookups are cached per coordinate.
    """

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT,
                 endpoint: str = DEFAULT_ENDPOINT,
                 zoom: int = DEFAULT_ZOOM,
                 timeout: Optional[float] = DEFAULT_TIMEOUT,
                 min_delay: float = DEFAULT_MIN_DELAY,
                 session: Optional[requests.Session] = None):
        """
        Initialize the geocoder.

        Args:
            user_agent: User agent string identifying this tool to the service
            endpoint: URL of the reverse-geocoding endpoint
            zoom: Administrative detail level requested from the service
            timeout: Per-request timeout in seconds, None to wait forever
            min_delay: Minimum number of seconds between two requests
            session: Optional requests session to use
        """
        self.logger = logging.getLogger(__name__)
        self.endpoint = endpoint
        self.zoom = zoom
        self.timeout = timeout

        self.user_agent = user_agent
        self.session = session or requests.Session()

        self._reverse = RateLimiter(
            self._request_place,
            min_delay_seconds=min_delay,
            max_retries=0,
            error_wait_seconds=min_delay,
            swallow_exceptions=False,
        )

        self._geocoding_cache: Dict[str, Place] = {}
        self._cache_hits = 0
        self._cache_misses = 0

    def build_url(self, latitude: float, longitude: float) -> str:
        """
        Build the reverse-geocoding request URL.

        Args:
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees

        Returns:
            Request URL with six fractional digits per coordinate
        """
        return f"{self.endpoint}?format=json&lat={latitude:f}&lon={longitude:f}&zoom={self.zoom}"

    def reverse_geocode(self, latitude: float, longitude: float) -> Place:
        """
        Reverse geocode GPS coordinates to a place.

        Args:
            latitude: Latitude coordinate
            longitude: Longitude coordinate

        Returns:
            Place whose four fields are always set

        Raises:
            GeocodingError: transport failure, non-200 status, malformed
                JSON, or a response without an address object
        """
        cache_key = f"{latitude:.6f},{longitude:.6f}"
        if cache_key in self._geocoding_cache:
            self._cache_hits += 1
            self.logger.debug(f"Cache hit for coordinates ({latitude}, {longitude})")
            return self._geocoding_cache[cache_key]

        self._cache_misses += 1
        place = self._reverse(latitude, longitude)
        self._geocoding_cache[cache_key] = place
        return place

    def _request_place(self, latitude: float, longitude: float) -> Place:
        """Issue one request and parse the response into a place."""
        url = self.build_url(latitude, longitude)
        self.logger.debug(f"GET {url}")

        try:
            response = self.session.get(
                url, headers={'User-Agent': self.user_agent}, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise GeocodingError(str(e)) from e

        try:
            if response.status_code != 200:
                raise GeocodingError(f"API error: {response.status_code}")

            try:
                data = response.json()
            except ValueError as e:
                raise GeocodingError(f"invalid JSON response: {e}") from e
        finally:
            response.close()

        return self.parse_response(data)

    @staticmethod
    def parse_response(data: Any) -> Place:
        """
        Turn a decoded Nominatim response into a place.

        Args:
            data: Decoded JSON body

        Returns:
            Place built from the ``address`` object

        Raises:
            GeocodingError: if there is no ``address`` object
        """
        address = data.get("address") if isinstance(data, dict) else None
        if not isinstance(address, dict):
            raise GeocodingError("invalid address data")
        return Place.from_address(address)

    def get_cache_stats(self) -> Dict[str, float]:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache hit/miss statistics
        """
        total_requests = self._cache_hits + self._cache_misses
        hit_rate = (self._cache_hits / total_requests * 100) if total_requests > 0 else 0

        return {
            'cache_hits': self._cache_hits,
            'cache_misses': self._cache_misses,
            'total_requests': total_requests,
            'hit_rate_percent': round(hit_rate, 2),
            'cache_size': len(self._geocoding_cache)
        }
