"""Flat key/value file store used for archives, templates and the output site."""

import logging
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)


class FileStore:
    """Keys are '/'-separated paths relative to the store root."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def path(self, key: str) -> Path:
        return self.root.joinpath(*key.split("/"))

    def exists(self, key: str = "") -> bool:
        return self.path(key).exists() if key else self.root.exists()

    def keys(self) -> List[str]:
        """Files directly under the root, sorted by name. Missing root means no keys."""
        if not self.root.is_dir():
            return []
        return sorted(p.name for p in self.root.iterdir() if p.is_file())

    def read(self, key: str) -> str:
        with open(self.path(key), "r", encoding="utf-8") as f:
            return f.read()

    def write(self, key: str, content: str) -> None:
        path = self.path(key)
        self.ensure_directory(key.rsplit("/", 1)[0] if "/" in key else "")
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        logger.debug("Wrote %s", path)

    def ensure_directory(self, key: str = "") -> Path:
        """Create the directory for key if needed; an existing directory is fine."""
        path = self.path(key) if key else self.root
        path.mkdir(parents=True, exist_ok=True)
        return path

    def __repr__(self) -> str:
        return f"FileStore(root={self.root!s})"
