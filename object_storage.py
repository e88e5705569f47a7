import logging
import os
from pathlib import Path
from typing import Optional

from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when an object cannot be written, read or removed."""
    pass


class LocalObjectStorage:
    """
    Filesystem bucket for product images.

    Objects live under <root>/<bucket>/<name> and are served publicly by the
    app at /storage/<bucket>/<name>. Names are never overwritten.
    """

    def __init__(self, root: str, bucket: str = "product-images", base_url: str = ""):
        self.root = Path(root)
        self.bucket = bucket
        self.base_url = (base_url or "").rstrip("/")

    @property
    def bucket_dir(self) -> Path:
        return self.root / self.bucket

    def _path(self, name: str) -> Path:
        clean = secure_filename(name or "")
        if not clean:
            raise StorageError(f"Invalid object name: {name!r}")
        return self.bucket_dir / clean

    def put(self, name: str, data: bytes, content_type: str = "image/jpeg") -> str:
        """Store data under name and return its public URL."""
        path = self._path(name)
        try:
            self.bucket_dir.mkdir(parents=True, exist_ok=True)
            # "xb" refuses to clobber an existing object
            with open(path, "xb") as f:
                f.write(data)
        except FileExistsError:
            raise StorageError(f"Object already exists: {path.name}")
        except OSError as e:
            raise StorageError(f"Could not write {path.name}: {e}") from e

        logger.info("Stored %s (%d bytes, %s)", path.name, len(data), content_type)
        return self.public_url(path.name)

    def get(self, name: str) -> bytes:
        path = self._path(name)
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            raise StorageError(f"Could not read {path.name}: {e}") from e

    def exists(self, name: str) -> bool:
        try:
            return self._path(name).is_file()
        except StorageError:
            return False

    def delete(self, name: str) -> None:
        path = self._path(name)
        try:
            os.remove(path)
        except OSError as e:
            raise StorageError(f"Could not delete {path.name}: {e}") from e
        logger.info("Deleted %s", path.name)

    def public_url(self, name: str) -> str:
        return f"{self.base_url}/storage/{self.bucket}/{name}"

    def name_from_url(self, url: str) -> Optional[str]:
        """Object name for URLs issued by this bucket, None for anything else."""
        prefix = f"{self.base_url}/storage/{self.bucket}/"
        if not url or not url.startswith(prefix):
            return None
        name = url[len(prefix):]
        if not name or "/" in name:
            return None
        return name
