from __future__ import annotations

import json
from typing import Any


def artifact_key(job_id: str, name: str) -> str:
    """Key of a job artifact, ``<job_id>/<name>``; both parts must be plain names."""
    for part in (job_id, name):
        if not part or "/" in part or "\\" in part or part in (".", ".."):
            raise ValueError(f"Invalid artifact path component: {part!r}")
    return f"{job_id}/{name}"


class ArtifactStorage:
    """
    Files produced for a job (pattern JSON, preview, exports), grouped per job.

    Backends only implement ``write`` and ``read`` on raw keys.
    """

    def write(self, key: str, data: bytes) -> None:
        raise NotImplementedError

    def read(self, key: str) -> bytes:
        raise NotImplementedError

    def save_bytes(self, job_id: str, name: str, data: bytes) -> str:
        key = artifact_key(job_id, name)
        self.write(key, data)
        return key

    def save_json(self, job_id: str, name: str, obj: Any) -> str:
        payload = json.dumps(obj, ensure_ascii=False, indent=2).encode("utf-8")
        return self.save_bytes(job_id, name, payload)

    def load_bytes(self, job_id: str, name: str) -> bytes:
        return self.read(artifact_key(job_id, name))
