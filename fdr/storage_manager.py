"""
Storage Manager module for the seen-state file.
Keeps the identifiers of every item already shown, one per line.
"""
import logging
import os
import tempfile
from typing import List

from fdr.exceptions import StoreIOError, StoreWriteError

logger = logging.getLogger(__name__)


class SeenStore:
    """
    Persists the ordered list of identifiers shown in previous runs.
    """

    def __init__(self, file_path: str = 'seen.txt'):
        """
        Initialize the seen store.

        Args:
            file_path: Path of the plain-text state file
        """
        self.file_path = file_path
        logger.debug(f"SeenStore initialized with state file: {self.file_path}")

    def _read_lines(self) -> List[str]:
        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StoreIOError(f"Cannot read {self.file_path}: {e}") from e

        return [line for line in content.splitlines() if line.strip()]

    def load(self) -> List[str]:
        """
        Load previously seen identifiers.

        Returns:
            List of identifiers in insertion order, empty if there is no
            usable prior state
        """
        if not os.path.exists(self.file_path):
            logger.debug(f"No seen-state file found: {self.file_path}")
            return []

        try:
            record = self._read_lines()
        except StoreIOError as e:
            logger.warning(f"{e}. Starting with empty seen state.")
            return []

        logger.debug(f"Loaded {len(record)} seen identifiers from {self.file_path}")
        return record

    @staticmethod
    def contains(record: List[str], identifier: str) -> bool:
        """Check whether an identifier was already seen (exact match)."""
        return identifier in record

    @staticmethod
    def append(record: List[str], identifier: str) -> List[str]:
        """Return a copy of the record with the identifier appended."""
        return record + [identifier]

    def save(self, record: List[str]) -> None:
        """
        Overwrite the state file with the full record.

        The file is replaced atomically so an interrupted write never leaves
        a truncated state behind.

        Args:
            record: Identifiers to persist

        Raises:
            StoreWriteError: If the file could not be written
        """
        directory = os.path.dirname(os.path.abspath(self.file_path))
        tmp_path = None

        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.seen-', text=True)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write('\n'.join(record))
            os.replace(tmp_path, self.file_path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            logger.error(f"Error saving seen state to {self.file_path}: {e}")
            raise StoreWriteError(f"Cannot write {self.file_path}: {e}") from e

        logger.debug(f"Saved {len(record)} seen identifiers to {self.file_path}")
