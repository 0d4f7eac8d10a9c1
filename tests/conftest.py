"""Pytest configuration and shared fixtures for photo_geosorter tests."""

import logging
from pathlib import Path
from typing import Optional, Tuple
from unittest.mock import Mock

import pytest
import requests
from PIL import Image

from photo_geosorter.metadata_extractor import GPS_IFD_TAG


# =============================================================================
# Test Configuration
# =============================================================================

@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo the root logger changes made by Logger between tests."""
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)


# =============================================================================
# Image fixtures
# =============================================================================

def _to_dms(value: float) -> Tuple[float, float, float]:
    """Split an absolute decimal coordinate into degrees, minutes, seconds."""
    value = abs(value)
    degrees = int(value)
    minutes_full = (value - degrees) * 60
    minutes = int(minutes_full)
    seconds = round((minutes_full - minutes) * 60, 4)
    return (float(degrees), float(minutes), float(seconds))


def write_image(path: Path, gps: Optional[Tuple[float, float]] = None) -> Path:
    """
    Write a tiny image with EXIF metadata.

    The format follows the file extension. A camera make is always present
    so the file carries EXIF even without GPS.
    """
    image = Image.new("RGB", (8, 8), color=(200, 120, 40))
    exif = Image.Exif()
    exif[0x010F] = "TestCam"  # Make
    if gps is not None:
        latitude, longitude = gps
        exif[GPS_IFD_TAG] = {
            1: "N" if latitude >= 0 else "S",
            2: _to_dms(latitude),
            3: "E" if longitude >= 0 else "W",
            4: _to_dms(longitude),
        }
    image_format = "PNG" if path.suffix.lower() == ".png" else "JPEG"
    image.save(path, format=image_format, exif=exif)
    return path


@pytest.fixture
def images_dir(tmp_path, monkeypatch):
    """An ``images`` directory inside a temporary working directory."""
    monkeypatch.chdir(tmp_path)
    directory = tmp_path / "images"
    directory.mkdir()
    return directory


@pytest.fixture
def make_image():
    """Factory writing EXIF images, see write_image."""
    return write_image


# =============================================================================
# HTTP fixtures
# =============================================================================

def make_response(status_code: int = 200, payload=None, invalid_json: bool = False) -> Mock:
    """Build a stand-in for requests.Response."""
    response = Mock()
    response.status_code = status_code
    if invalid_json:
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def fake_response():
    """Factory for fake HTTP responses, see make_response."""
    return make_response


@pytest.fixture
def session():
    """A real requests session whose ``get`` never touches the network."""
    http_session = requests.Session()
    http_session.get = Mock(return_value=make_response(payload={"address": {}}))
    return http_session


# =============================================================================
# Canned Nominatim payloads
# =============================================================================

@pytest.fixture
def san_francisco_payload():
    """Reverse lookup answer for downtown San Francisco."""
    return {
        "place_id": 297452150,
        "display_name": "San Francisco, California, United States",
        "address": {
            "country": "United States",
            "state": "California",
            "county": "San Francisco County",
            "country_code": "us",
        },
    }


@pytest.fixture
def ocean_payload():
    """Reverse lookup answer for a point far from any land."""
    return {"address": {}}
