from __future__ import annotations

import logging

import boto3
from botocore.exceptions import ClientError

from ..settings import S3_ACCESS_KEY, S3_BUCKET, S3_ENDPOINT_URL, S3_SECRET_KEY
from .base import ArtifactStorage

logger = logging.getLogger(__name__)


class S3Storage(ArtifactStorage):
    """Artifacts as objects ``<job_id>/<name>`` in one S3-compatible bucket."""

    def __init__(self, client=None, bucket: str = S3_BUCKET) -> None:
        self.bucket = bucket
        self.client = client or boto3.client(
            "s3",
            endpoint_url=S3_ENDPOINT_URL,
            aws_access_key_id=S3_ACCESS_KEY,
            aws_secret_access_key=S3_SECRET_KEY,
        )
        self._ensure_bucket()

    def _ensure_bucket(self) -> None:
        try:
            self.client.head_bucket(Bucket=self.bucket)
        except ClientError:
            try:
                self.client.create_bucket(Bucket=self.bucket)
            except ClientError as exc:
                # writes will raise with the real cause later
                logger.warning("Could not create bucket %s: %s", self.bucket, exc)

    def write(self, key: str, data: bytes) -> None:
        content_type = "application/octet-stream"
        if key.endswith(".png"):
            content_type = "image/png"
        elif key.endswith(".pdf"):
            content_type = "application/pdf"
        elif key.endswith(".json"):
            content_type = "application/json"
        elif key.endswith(".csv"):
            content_type = "text/csv"
        self.client.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)

    def read(self, key: str) -> bytes:
        response = self.client.get_object(Bucket=self.bucket, Key=key)
        return response["Body"].read()
