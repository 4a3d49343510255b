"""Short-lived scratch copies of uploaded videos."""

import logging
import re
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from starlette.datastructures import UploadFile

from ythelper.exceptions import ClientInputError, ProcessingError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
PREFIX = "ythelper"

_UNSAFE_CHARS = re.compile(r"[^\w.-]+", re.ASCII)


def safe_filename(name: str | None, default: str = "video") -> str:
    return _UNSAFE_CHARS.sub("_", name or "") or default


def scratch_path(scratch_dir: Path, filename: str | None) -> Path:
    """Return a collision-resistant path for ``filename`` inside ``scratch_dir``."""
    return scratch_dir / f"{PREFIX}-{uuid.uuid4()}-{safe_filename(filename)}"


async def write_upload(upload: UploadFile, path: Path, max_bytes: int | None = None) -> int:
    """Copy an upload to ``path`` in chunks and return the number of bytes written."""
    written = 0
    with path.open("wb") as out:
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if max_bytes is not None and written > max_bytes:
                raise ClientInputError(
                    f"Video exceeds the {max_bytes // (1024 * 1024)}MB upload limit."
                )
            out.write(chunk)
    return written


def discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.debug("Could not remove scratch file %s: %s", path, e)


@asynccontextmanager
async def scratch_copy(
    upload: UploadFile, scratch_dir: Path, max_bytes: int | None = None
) -> AsyncIterator[Path]:
    """Yield a private on-disk copy of ``upload`` that is removed on exit."""
    path = scratch_path(scratch_dir, upload.filename)
    try:
        try:
            scratch_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
            size = await write_upload(upload, path, max_bytes)
        except OSError as e:
            raise ProcessingError("Could not store the uploaded video.") from e
        logger.debug("Wrote %d bytes to %s", size, path)
        yield path
    finally:
        discard(path)
