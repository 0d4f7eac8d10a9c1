"""
Metadata extraction module for photographs.

This module reads GPS coordinates from the EXIF block of JPEG and PNG
files. Pillow is tried first; piexif is used as a fallback for JPEG files
whose EXIF Pillow cannot decode.
"""

import logging
import math
from typing import Optional, Tuple, Dict, Any

import piexif
from PIL import Image
from PIL.ExifTags import GPSTAGS

# EXIF pointer to the GPS IFD
GPS_IFD_TAG = 0x8825


class MetadataExtractor:
    """
    Extracts GPS coordinates from image files.

    Every failure (unreadable file, no EXIF, EXIF without GPS) is
    reported to the caller as None; the cause is only logged.
    """

    def __init__(self):
        """Initialize the metadata extractor."""
        self.logger = logging.getLogger(__name__)

    def extract_gps_coordinates(self, file_path: str) -> Optional[Tuple[float, float]]:
        """
        Extract GPS coordinates from an image file.

        Args:
            file_path: Path to the image file

        Returns:
            Tuple of (latitude, longitude) in decimal degrees if GPS data
            is found, None otherwise
        """
        coordinates = self._extract_gps_with_pillow(file_path)
        if coordinates:
            return coordinates

        coordinates = self._extract_gps_with_piexif(file_path)
        if coordinates:
            return coordinates

        self.logger.debug(f"No GPS data found in image: {file_path}")
        return None

    def _extract_gps_with_pillow(self, file_path: str) -> Optional[Tuple[float, float]]:
        """
        Read the GPS IFD through Pillow.

        Args:
            file_path: Path to the image file

        Returns:
            Tuple of (latitude, longitude) if GPS data is found, None otherwise
        """
        try:
            with Image.open(file_path) as img:
                gps_ifd = img.getexif().get_ifd(GPS_IFD_TAG)
        except Exception as e:
            self.logger.debug(f"Pillow extraction failed for {file_path}: {e}")
            return None

        if not gps_ifd:
            return None

        gps_info = {GPSTAGS.get(tag_id, tag_id): value for tag_id, value in gps_ifd.items()}
        return self._convert_gps_to_decimal(gps_info)

    def _extract_gps_with_piexif(self, file_path: str) -> Optional[Tuple[float, float]]:
        """
        Read the GPS IFD through piexif.

        piexif parses the EXIF segment without decoding the image, so it
        still works on JPEG files whose pixel data Pillow rejects.

        Args:
            file_path: Path to the image file

        Returns:
            Tuple of (latitude, longitude) if GPS data is found, None otherwise
        """
        try:
            exif = piexif.load(file_path)
        except Exception as e:
            self.logger.debug(f"piexif extraction failed for {file_path}: {e}")
            return None

        gps_ifd = exif.get("GPS") or {}
        if not gps_ifd:
            return None

        gps_tags = piexif.TAGS["GPS"]
        gps_info = {gps_tags.get(tag_id, {}).get("name", tag_id): value for tag_id, value in gps_ifd.items()}
        return self._convert_gps_to_decimal(gps_info)

    def _convert_gps_to_decimal(self, gps_info: Dict[str, Any]) -> Optional[Tuple[float, float]]:
        """
        Convert GPS coordinates from degrees/minutes/seconds to decimal format.

        Args:
            gps_info: Dictionary of GPS tag names to values

        Returns:
            Tuple of (latitude, longitude) in decimal format, None if conversion fails
        """
        try:
            lat = self._convert_dms_to_decimal(gps_info, 'GPSLatitude', 'GPSLatitudeRef')
            lon = self._convert_dms_to_decimal(gps_info, 'GPSLongitude', 'GPSLongitudeRef')
        except (TypeError, ValueError, ZeroDivisionError) as e:
            self.logger.debug(f"Error converting GPS coordinates: {e}")
            return None

        if lat is None or lon is None:
            return None
        return (lat, lon)

    def _convert_dms_to_decimal(self, gps_info: Dict[str, Any],
                                coord_key: str, ref_key: str) -> Optional[float]:
        """
        Convert degrees/minutes/seconds to a signed decimal coordinate.

        Args:
            gps_info: GPS information dictionary
            coord_key: Key for the coordinate value
            ref_key: Key for the coordinate reference (N/S, E/W)

        Returns:
            Decimal coordinate value, None if the coordinate is missing
        """
        coord = gps_info.get(coord_key)
        if not isinstance(coord, (list, tuple)) or len(coord) < 3:
            return None

        degrees = _to_float(coord[0])
        minutes = _to_float(coord[1])
        seconds = _to_float(coord[2])

        decimal = degrees + (minutes / 60.0) + (seconds / 3600.0)
        if math.isnan(decimal):
            return None

        ref = gps_info.get(ref_key, 'N')
        if isinstance(ref, bytes):
            ref = ref.decode('ascii', 'ignore')
        if str(ref).strip('\x00 ').upper() in ('S', 'W'):
            decimal = -decimal

        return decimal


def _to_float(value: Any) -> float:
    """Turn an EXIF rational (Pillow IFDRational or a numerator/denominator pair) into a float."""
    if isinstance(value, tuple) and len(value) == 2:
        numerator, denominator = value
        return float(numerator) / float(denominator)
    return float(value)
