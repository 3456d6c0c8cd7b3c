"""Local disk storage for task attachments."""
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Union

from fastapi import Request

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class UploadTooLarge(Exception):
    def __init__(self, max_size: int):
        super().__init__(f"File too large. Maximum size is {max_size // (1024 * 1024)} MB")
        self.max_size = max_size


@dataclass(frozen=True)
class StoredFile:
    original_name: str
    filename: str
    path: Path
    size: int
    url: str


class FileStorage:
    """Writes uploads under randomized names and removes them best-effort."""

    def __init__(self, upload_dir: Union[str, Path], url_prefix: str, max_size: int):
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_size = max_size

    def ensure_dir(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def save(self, stream: BinaryIO, original_name: str) -> StoredFile:
        """Copy ``stream`` to disk, enforcing the size limit while writing."""
        self.ensure_dir()
        filename = uuid.uuid4().hex + Path(original_name).suffix.lower()
        path = self.upload_dir / filename

        size = 0
        with path.open("wb") as out:
            while True:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > self.max_size:
                    break
                out.write(chunk)

        if size > self.max_size:
            self._unlink(path)
            raise UploadTooLarge(self.max_size)

        logger.debug("Stored upload %r as %s (%d bytes)", original_name, filename, size)
        return StoredFile(
            original_name=original_name,
            filename=filename,
            path=path,
            size=size,
            url=f"{self.url_prefix}/{filename}",
        )

    def path_for(self, url: str) -> Path:
        # only the final component is trusted, so a stored url cannot escape the upload dir
        return self.upload_dir / Path(url).name

    def remove(self, target: Union[StoredFile, str]) -> bool:
        """Delete a stored file. Failures are logged, never raised."""
        path = target.path if isinstance(target, StoredFile) else self.path_for(target)
        return self._unlink(path)

    def _unlink(self, path: Path) -> bool:
        try:
            path.unlink()
        except OSError as e:
            logger.warning("Failed to delete stored file %s: %s", path, e)
            return False
        return True


def original_name_of(filename: Optional[str]) -> str:
    return Path(filename or "").name or "upload"


def get_storage(request: Request) -> FileStorage:
    """Dependency returning the app's attachment storage."""
    return request.app.state.storage
