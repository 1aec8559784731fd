from __future__ import annotations

import logging
from typing import Optional

from .. import settings
from .base import ArtifactStorage, artifact_key
from .fs_storage import FSStorage

logger = logging.getLogger(__name__)

__all__ = ["ArtifactStorage", "FSStorage", "artifact_key", "get_storage"]

_backend: Optional[ArtifactStorage] = None


def _create_backend(name: str) -> ArtifactStorage:
    name = name.lower()
    if name == "s3":
        # boto3 client setup talks to the endpoint, so only build it on demand
        from .s3_storage import S3Storage

        return S3Storage()
    if name not in ("fs", "local"):
        logger.warning("Unknown STORAGE_BACKEND %r, storing artifacts on disk", name)
    return FSStorage()


def get_storage() -> ArtifactStorage:
    global _backend
    if _backend is None:
        _backend = _create_backend(settings.STORAGE_BACKEND)
    return _backend
