"""
Exceptions raised by the photo geosorter.

Per-file errors are caught by the driver and reported on stdout; only
DirectoryScanError is fatal for a run.
"""


class PhotoGeosorterError(Exception):
    """Base exception for photo geosorter operations."""
    pass


class GeocodingError(PhotoGeosorterError):
    """Raised when coordinates cannot be resolved to a place."""
    pass


class FileOrganizationError(PhotoGeosorterError):
    """Raised when a file cannot be moved into the sorted tree."""
    pass


class DirectoryScanError(PhotoGeosorterError):
    """Raised when the input directory cannot be listed."""
    pass
