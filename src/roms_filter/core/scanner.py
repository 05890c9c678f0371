"""Catalog sources for flat ROM collections: directories and list files."""

import logging
import time
from collections.abc import Generator
from pathlib import Path

from .exceptions import CatalogSourceError
from .models import Entry
from .parser import EntryParser

logger = logging.getLogger(__name__)


class RomListScanner:
    """Reads ROM names from a directory of archives or a list file."""

    def __init__(self, pattern: str = "*.zip"):
        """
        Initialize the scanner.

        Args:
            pattern: Glob pattern of ROM archives in a directory
        """
        self.pattern = pattern
        self.parser = EntryParser()

    def discover_names(self, directory: Path) -> Generator[str, None, None]:
        """
        Discover ROM archive names in a directory, sorted by name.

        Args:
            directory: Directory to scan (not recursive)

        Yields:
            File names of matching archives

        Raises:
            CatalogSourceError: If the directory cannot be accessed
        """
        if not directory.is_dir():
            raise CatalogSourceError(directory, "not a directory")

        try:
            paths = sorted(directory.glob(self.pattern), key=lambda p: p.name)
        except OSError as e:
            raise CatalogSourceError(directory, str(e)) from e

        for path in paths:
            if path.is_file():
                yield path.name

    def read_list_file(self, list_file: Path) -> list[str]:
        """
        Read ROM names from a file with one name per line.

        Args:
            list_file: Text file to read

        Returns:
            Names in file order, blank lines skipped

        Raises:
            CatalogSourceError: If the file cannot be read
        """
        try:
            lines = list_file.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as e:
            raise CatalogSourceError(list_file, str(e)) from e

        return [line.rstrip() for line in lines if line.strip()]

    def scan(self, source: Path) -> list[Entry]:
        """
        Read and parse every ROM name from a directory or list file.

        Args:
            source: Directory with ROM archives, or a list file

        Returns:
            Entries in source order

        Raises:
            CatalogSourceError: If the source is missing or unreadable
        """
        if not source.exists():
            raise CatalogSourceError(source, "no such file or directory")

        start_time = time.time()
        if source.is_dir():
            logger.info(f"Scanning directory: {source}")
            names = list(self.discover_names(source))
        else:
            logger.info(f"Reading ROM list: {source}")
            names = self.read_list_file(source)

        entries = self.parser.parse_many(names)
        logger.info(
            f"Read {len(entries)} ROM names from {source} in {time.time() - start_time:.2f} seconds"
        )
        return entries
