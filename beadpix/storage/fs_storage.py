from pathlib import Path
from typing import Optional, Union

from ..settings import DATA_DIR
from .base import ArtifactStorage


class FSStorage(ArtifactStorage):
    """Artifacts as files under ``root/<job_id>/``; ``root`` defaults to DATA_DIR."""

    def __init__(self, root: Optional[Union[str, Path]] = None):
        self.root = Path(root or DATA_DIR)
        self.root.mkdir(parents=True, exist_ok=True)

    def write(self, key: str, data: bytes) -> None:
        target = self.root / key
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    def read(self, key: str) -> bytes:
        return (self.root / key).read_bytes()
