"""
Main entry point for the photo geosorter.

This module orchestrates the sorting run: listing the input directory,
GPS extraction, reverse geocoding and moving each image, with one
progress line per image on standard output.
"""

import argparse
import sys
from pathlib import Path
from typing import Dict, Optional, List, Union

from tqdm import tqdm

from . import __version__
from .exceptions import DirectoryScanError, GeocodingError, FileOrganizationError
from .file_organizer import FileOrganizer, DEFAULT_SOURCE, DEFAULT_DESTINATION
from .geocoder import (
    Geocoder, DEFAULT_ENDPOINT, DEFAULT_MIN_DELAY, DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT, DEFAULT_ZOOM,
)
from .logger import Logger
from .metadata_extractor import MetadataExtractor

# Per-file outcomes
MOVED = "moved"
NO_GPS = "no_gps"
GEOCODING_FAILED = "geocoding_failed"
MOVE_FAILED = "move_failed"
PLANNED = "planned"


class PhotoSorter:
    """
    Main application class that runs the sorting pipeline.

    Files are handled one at a time; a failure on one file is reported and
    the run goes on with the next.
    """

    def __init__(self, metadata_extractor: Optional[MetadataExtractor] = None,
                 geocoder: Optional[Geocoder] = None,
                 file_organizer: Optional[FileOrganizer] = None,
                 logger: Optional[Logger] = None,
                 dry_run: bool = False,
                 show_progress: bool = False):
        """
        Initialize the sorter.

        Args:
            metadata_extractor: GPS extractor, a default one if omitted
            geocoder: Reverse geocoder, a default one if omitted
            file_organizer: Mover, a default one if omitted
            logger: Logging setup used for the summary and progress bar
            dry_run: Report where files would go without moving them
            show_progress: Display a progress bar while sorting
        """
        self.logger = logger or Logger()
        self.log = self.logger.get_logger(__name__)

        self.metadata_extractor = metadata_extractor or MetadataExtractor()
        self.geocoder = geocoder or Geocoder()
        self.file_organizer = file_organizer or FileOrganizer()
        self.dry_run = dry_run
        self.show_progress = show_progress

    def _emit(self, message: str):
        """Write a progress line to stdout."""
        if self.show_progress:
            tqdm.write(message)
        else:
            print(message)

    def process_file(self, file_path: Path) -> str:
        """
        Run the pipeline for a single image.

        Args:
            file_path: Path to the image

        Returns:
            One of "moved", "planned" (dry run), "no_gps",
            "geocoding_failed", "move_failed"
        """
        name = file_path.name

        coordinates = self.metadata_extractor.extract_gps_coordinates(str(file_path))
        if not coordinates:
            self._emit(f"No GPS data found for {name}")
            return NO_GPS

        self.log.info(f"GPS found in {file_path}: ({coordinates[0]:.6f}, {coordinates[1]:.6f})")

        try:
            place = self.geocoder.reverse_geocode(*coordinates)
        except GeocodingError as e:
            self._emit(f"Error getting location for {name}: {e}")
            return GEOCODING_FAILED

        self._emit(f"Moving {name} to {place.as_path()}")

        if self.dry_run:
            self.log.info(f"Dry run, leaving {file_path} in place")
            return PLANNED

        try:
            self.file_organizer.move_file(file_path, place)
        except FileOrganizationError as e:
            self._emit(f"Error moving file: {e}")
            return MOVE_FAILED

        return MOVED

    def process_directory(self, source_dir: Union[str, Path]) -> Dict[str, int]:
        """
        Sort every candidate image of a directory.

        Args:
            source_dir: Directory holding the images

        Returns:
            Run statistics: total plus one counter per outcome

        Raises:
            DirectoryScanError: if the directory cannot be listed
        """
        images = self.file_organizer.scan_directory(source_dir)

        stats = {'total': len(images), MOVED: 0, PLANNED: 0,
                 NO_GPS: 0, GEOCODING_FAILED: 0, MOVE_FAILED: 0}

        progress_bar = self.logger.create_progress_bar(len(images)) if self.show_progress else None

        try:
            for file_path in images:
                outcome = self.process_file(file_path)
                stats[outcome] += 1
                if progress_bar:
                    progress_bar.update(1)
        finally:
            if progress_bar:
                progress_bar.close()

        self.logger.log_operation_summary(stats)

        cache_stats = self.geocoder.get_cache_stats()
        self.log.info(f"Geocoding cache: {cache_stats['cache_hits']} hits, {cache_stats['cache_misses']} misses ({cache_stats['hit_rate_percent']}% hit rate)")

        return stats


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="photo-geosorter",
        description="Moves photos into country/state/state_district/county folders "
                    "based on the GPS position in their EXIF metadata.",
        epilog="Examples:\n"
        "  %(prog)s                      # sort ./images into ./sorted_images\n"
        "  %(prog)s ~/Pictures/trip -o ~/Pictures/by_place\n"
        "  %(prog)s photos --dry-run -v",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "directory",
        nargs="?",
        default=DEFAULT_SOURCE,
        help=f"directory holding the images (default: {DEFAULT_SOURCE})",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=DEFAULT_DESTINATION,
        help=f"root of the sorted tree (default: {DEFAULT_DESTINATION})",
    )
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="print where each image would go without moving anything",
    )
    parser.add_argument(
        "--case-sensitive",
        action="store_true",
        help="only accept lower-case .jpg/.jpeg/.png extensions",
    )

    geocoding = parser.add_argument_group("geocoding")
    geocoding.add_argument(
        "--endpoint",
        default=DEFAULT_ENDPOINT,
        help=f"reverse-geocoding URL (default: {DEFAULT_ENDPOINT})",
    )
    geocoding.add_argument(
        "--zoom",
        type=int,
        default=DEFAULT_ZOOM,
        help=f"administrative detail level of the lookup (default: {DEFAULT_ZOOM})",
    )
    geocoding.add_argument(
        "--user-agent",
        default=DEFAULT_USER_AGENT,
        help=f"User-Agent sent to the service (default: {DEFAULT_USER_AGENT})",
    )
    geocoding.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"per-request timeout in seconds (default: {DEFAULT_TIMEOUT})",
    )
    geocoding.add_argument(
        "--min-delay",
        type=float,
        default=DEFAULT_MIN_DELAY,
        help=f"minimum seconds between requests (default: {DEFAULT_MIN_DELAY})",
    )

    output = parser.add_argument_group("output")
    output.add_argument(
        "--progress",
        action="store_true",
        help="show a progress bar",
    )
    verbosity = output.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="log additional information"
    )
    verbosity.add_argument(
        "--debug", action="store_true", help="log debugging information"
    )
    output.add_argument(
        "--log-file",
        help="also write log records to this file",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point for the application."""
    args = create_argument_parser().parse_args(argv)

    if args.debug:
        log_level = "DEBUG"
    elif args.verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    logger = Logger(log_level=log_level, log_file=args.log_file)

    sorter = PhotoSorter(
        geocoder=Geocoder(
            user_agent=args.user_agent,
            endpoint=args.endpoint,
            zoom=args.zoom,
            timeout=args.timeout,
            min_delay=args.min_delay,
        ),
        file_organizer=FileOrganizer(args.output, case_sensitive=args.case_sensitive),
        logger=logger,
        dry_run=args.dry_run,
        show_progress=args.progress,
    )

    try:
        sorter.process_directory(args.directory)
    except DirectoryScanError as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(130)

    sys.exit(0)


if __name__ == "__main__":
    main()
