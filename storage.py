"""
Flat-file persistence. Each store owns one JSON document holding a list of
records; it is read in full and rewritten in full on every save.
"""
import os
import json
import logging
import tempfile

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a JSON store cannot be read or written."""


class JsonStore:
    def __init__(self, path):
        self.path = path

    def load(self):
        """Returns the stored list of dicts. A missing file is an empty list."""
        if not os.path.exists(self.path):
            logger.info("Store %s does not exist yet, starting empty", self.path)
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e

        if not isinstance(records, list):
            raise StorageError(f"{self.path} must contain a JSON array")
        return records

    def save(self, records):
        """
        Rewrites the whole document. The data goes to a temp file next to the
        target and is moved into place, so the old file survives a failed write.
        """
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=directory, suffix=".tmp", delete=False
            ) as f:
                tmp_path = f.name
                json.dump(records, f, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError(f"Could not write {self.path}: {e}") from e

        logger.info("Saved %d record(s) to %s", len(records), self.path)
