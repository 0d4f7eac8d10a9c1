"""
Photo Geosorter Package

A Python package for sorting photographs by where they were taken.
Reads GPS coordinates from image EXIF metadata, reverse geocodes them,
and moves images into country/state/state_district/county folders.
"""

__version__ = "1.0.0"
__author__ = "Photo Geosorter Team"

from .metadata_extractor import MetadataExtractor
from .geocoder import Geocoder, Place
from .file_organizer import FileOrganizer, sanitize_name
from .logger import Logger

__all__ = [
    "MetadataExtractor",
    "Geocoder",
    "Place",
    "FileOrganizer",
    "sanitize_name",
    "Logger"
]
