"""
Content storage for point photos.
"""

import logging
from pathlib import Path, PurePosixPath

from ponto.config import settings
from ponto.exceptions import StorageError

logger = logging.getLogger(__name__)


class ContentStorage:
    """Object storage interface: put / public url / delete"""

    def put(self, key: str, content: bytes, content_type: str) -> str:
        raise NotImplementedError

    def get(self, path: str) -> bytes:
        raise NotImplementedError

    def exists(self, path: str) -> bool:
        raise NotImplementedError

    def get_public_url(self, path: str) -> str:
        raise NotImplementedError

    def delete(self, path: str) -> None:
        raise NotImplementedError


class LocalContentStorage(ContentStorage):
    """Filesystem-backed bucket; keys map to files under `<root>/<bucket>/`"""

    def __init__(self, root: str = None, bucket: str = None, public_base_url: str = None):
        self.bucket = bucket or settings.STORAGE_BUCKET
        self.base_dir = Path(root or settings.STORAGE_ROOT) / self.bucket
        self.public_base_url = (public_base_url or settings.PUBLIC_BASE_URL).rstrip("/")

    def _resolve(self, key: str) -> Path:
        parts = PurePosixPath(key).parts
        if not parts or key.startswith("/") or any(part in ("..", ".") for part in parts):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.base_dir.joinpath(*parts)

    def put(self, key: str, content: bytes, content_type: str) -> str:
        """
        Store `content` under `key` without overwriting.

        Returns:
            The storage path (the key itself)

        Raises:
            StorageError: If the object already exists or the write fails
        """
        target = self._resolve(key)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            # 'xb' refuses to overwrite an existing object
            with open(target, "xb") as f:
                f.write(content)
        except FileExistsError:
            raise StorageError(f"Failed to upload photo: object already exists: {key}")
        except OSError as e:
            raise StorageError(f"Failed to upload photo: {e}")

        logger.info(f"Stored {len(content)} bytes ({content_type}) at {self.bucket}/{key}")
        return key

    def get(self, path: str) -> bytes:
        target = self._resolve(path)
        try:
            return target.read_bytes()
        except FileNotFoundError:
            raise StorageError(f"Object not found: {path}")
        except OSError as e:
            raise StorageError(f"Failed to read object {path}: {e}")

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def get_public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{self.bucket}/{path}"

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete object {path}: {e}")
        logger.info(f"Deleted {self.bucket}/{path}")


def get_storage() -> ContentStorage:
    """FastAPI dependency for the configured photo storage"""
    return LocalContentStorage()
