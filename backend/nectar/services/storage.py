"""Object storage gateway.

Objects are written below ``STORAGE_DIR/<bucket>/<path>`` and addressed by the
public URL scheme of Supabase Storage, so clients see the same links whether
the files live locally or in a real bucket.
"""

import logging
from pathlib import Path

from nectar.config import settings

logger = logging.getLogger(__name__)

_FALLBACK_BASE_URL = "https://example.com"


class StorageGateway:
    def __init__(self, root: str, base_url: str = ""):
        self.root = Path(root)
        self.base_url = (base_url or _FALLBACK_BASE_URL).rstrip("/")

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{path}"

    def _object_path(self, bucket: str, path: str) -> Path:
        bucket_root = (self.root / bucket).resolve()
        target = (bucket_root / path).resolve()
        if bucket_root not in target.parents:
            raise ValueError(f"object path escapes bucket: {path}")
        return target

    def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        """Store an object (overwriting any existing one) and return its public URL."""
        target = self._object_path(bucket, path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.info("Stored %d bytes (%s) at %s/%s", len(data), content_type, bucket, path)
        return self.public_url(bucket, path)

    def remove(self, bucket: str, path: str) -> None:
        target = self._object_path(bucket, path)
        if target.exists():
            target.unlink()
            logger.info("Removed object %s/%s", bucket, path)


def get_storage() -> StorageGateway:
    """FastAPI dependency returning the configured storage gateway."""
    return StorageGateway(settings.STORAGE_DIR, settings.SUPABASE_URL)
