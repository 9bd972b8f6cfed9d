
import logging
import os
from contextlib import contextmanager
from typing import Dict, Iterable, List, Optional, Sequence

from storage.repositories.exceptions import StorageError

# Set up logger
logger = logging.getLogger(__name__)


def quote(value: str) -> str:
    return f'"{value}"'


def format_csv(headers: Sequence[str], rows: Iterable[Sequence[str]], quoted_columns: Sequence[str] = ()) -> str:
    """
    Render rows as comma separated text.

    Only the columns named in ``quoted_columns`` are wrapped in quotes; no
    other escaping is applied.
    """
    quoted_idx = {headers.index(col) for col in quoted_columns}
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(quote(v) if i in quoted_idx else v for i, v in enumerate(row)))
    return "\n".join(lines) + "\n"


def parse_csv(content: str) -> List[Dict[str, str]]:
    """
    Parse CSV text into row mappings keyed by header.

    Lines are split on every comma with no escaping; a leading and a
    trailing quote are stripped from each field. Short rows are padded
    with empty strings and extra fields are dropped.
    """
    lines = content.strip().splitlines()
    if len(lines) < 2:
        return []
    headers = [h.strip() for h in lines[0].split(",")]
    rows = []
    for line in lines[1:]:
        values = line.split(",")
        rows.append({
            header: _strip_quotes(values[idx]) if idx < len(values) else ""
            for idx, header in enumerate(headers)
        })
    return rows


def _strip_quotes(value: str) -> str:
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


class FlatFileRepository:
    """
    Base repository for snapshot files stored under a single root directory.
    Handles path resolution and converts filesystem failures into StorageError.
    """

    def __init__(self, root: str = "."):
        self.root = root

    def path(self, *parts: str) -> str:
        return os.path.join(self.root, *parts)

    @contextmanager
    def io(self, action: str, path: str):
        """Context manager that re-raises OSError as StorageError."""
        try:
            yield
        except OSError as e:
            logger.error(f"Failed to {action} {path}: {e}")
            raise StorageError(f"Failed to {action} {path}: {e}") from e

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def ensure_directory(self, path: str) -> int:
        """Create ``path`` if needed and return how many files it already holds."""
        with self.io("create directory", path):
            if not os.path.isdir(path):
                os.makedirs(path, exist_ok=True)
                logger.info(f"Created directory: {path}")
                return 0
            count = len(os.listdir(path))
            logger.info(f"Directory {path} exists with {count} files")
            return count

    def list_files(self, directory: str, prefix: Optional[str] = None) -> List[str]:
        """Sorted file names in ``directory``, optionally filtered by prefix."""
        if not os.path.isdir(directory):
            return []
        with self.io("list", directory):
            names = sorted(os.listdir(directory))
        if prefix is not None:
            names = [n for n in names if n.startswith(prefix)]
        return names

    def read_text(self, path: str) -> str:
        with self.io("read", path):
            with open(path, "r", encoding="utf-8") as f:
                return f.read()

    def write_text(self, path: str, content: str) -> str:
        with self.io("write", path):
            directory = os.path.dirname(path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
        logger.info(f"Saved: {path}")
        return path

    def read_rows(self, path: str) -> List[Dict[str, str]]:
        return parse_csv(self.read_text(path))
