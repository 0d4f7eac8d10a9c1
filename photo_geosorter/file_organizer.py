"""
File organization module for photographs.

This module lists candidate images in the input directory and moves
them into the country/state/state_district/county tree.
"""

import os
import shutil
import logging
from pathlib import Path
from typing import List, Union

from .exceptions import DirectoryScanError, FileOrganizationError
from .geocoder import Place

DEFAULT_SOURCE = "images"
DEFAULT_DESTINATION = "sorted_images"

# Extensions considered images; nothing else is touched
IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png')


def sanitize_name(name: str) -> str:
    """
    Turn a place name into a directory name.

    Only ASCII spaces are replaced (by underscores); every other character
    is kept as is.
    """
    return name.replace(' ', '_')


def is_candidate_image(file_name: str, case_sensitive: bool = False) -> bool:
    """
    Check whether a file name carries one of the image extensions.

    Args:
        file_name: Base name of the file
        case_sensitive: If True, ``photo.JPG`` is not a candidate

    Returns:
        True if the file should be processed
    """
    if not case_sensitive:
        file_name = file_name.lower()
    return file_name.endswith(IMAGE_EXTENSIONS)


class FileOrganizer:
    """
    Handles listing of the input directory and moving images into the
    location tree.
    """

    def __init__(self, destination_root: Union[str, Path] = DEFAULT_DESTINATION,
                 case_sensitive: bool = False):
        """
        Initialize the file organizer.

        Args:
            destination_root: Root directory of the sorted tree, relative
                to the working directory unless absolute
            case_sensitive: Match image extensions case-sensitively
        """
        self.logger = logging.getLogger(__name__)
        self.destination_root = Path(destination_root)
        self.case_sensitive = case_sensitive

    def scan_directory(self, source_dir: Union[str, Path]) -> List[Path]:
        """
        List candidate images in a directory, without recursing.

        Args:
            source_dir: Directory to scan

        Returns:
            Paths of candidate images, ordered by name

        Raises:
            DirectoryScanError: if the directory cannot be listed
        """
        try:
            with os.scandir(source_dir) as entries:
                images = [
                    Path(entry.path)
                    for entry in entries
                    if not entry.is_dir(follow_symlinks=False)
                    and is_candidate_image(entry.name, self.case_sensitive)
                ]
        except OSError as e:
            raise DirectoryScanError(f"cannot read directory {source_dir}: {e}") from e

        images.sort(key=lambda path: path.name)
        self.logger.info(f"Found {len(images)} candidate images in {source_dir}")
        return images

    def destination_for(self, place: Place) -> Path:
        """
        Build the destination directory for a place.

        Args:
            place: Place returned by the geocoder

        Returns:
            ``<root>/<country>/<state>/<state_district>/<county>`` with
            each segment sanitized; leading separators are dropped so the
            result always stays under the root
        """
        separators = os.sep + (os.altsep or "") + "/"
        segments = [sanitize_name(part).lstrip(separators) for part in place]
        return self.destination_root.joinpath(*segments)

    def move_file(self, source_path: Union[str, Path], place: Place) -> Path:
        """
        Move a file into the directory of its place.

        The base name is kept; an existing file of the same name at the
        destination is replaced.

        Args:
            source_path: Source file path
            place: Place returned by the geocoder

        Returns:
            New path of the file

        Raises:
            FileOrganizationError: if the directory cannot be created or
                the file cannot be moved
        """
        source_file = Path(source_path)
        location_dir = self.destination_for(place)
        dest_file = location_dir / source_file.name

        try:
            location_dir.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source_file), str(dest_file))
        except OSError as e:
            raise FileOrganizationError(str(e)) from e

        self.logger.info(f"Moved: {source_file} -> {dest_file}")
        return dest_file
