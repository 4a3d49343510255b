"""The upload -> generate -> parse pipeline behind POST /api/analyze."""

import asyncio
import logging
import mimetypes

from starlette.datastructures import UploadFile

from ythelper.config import Settings
from ythelper.exceptions import ClientInputError, ProcessingTimeoutError
from ythelper.models.analysis import AnalysisResult, UploadedAsset
from ythelper.services.backend import (
    AnalysisBackend,
    FileRefPart,
    GenerationOptions,
    InlinePart,
    TextPart,
)
from ythelper.services.parsing import parse_model_json, sanitize_payload
from ythelper.services.prompt import build_prompt
from ythelper.services.scratch import scratch_copy

logger = logging.getLogger(__name__)

ALLOWED_VIDEO_TYPES = ("video/mp4", "video/quicktime", "video/webm")
GENERIC_TYPES = ("", "application/octet-stream")
DEFAULT_VIDEO_TYPE = "video/mp4"
DEFAULT_IMAGE_TYPE = "image/jpeg"
DEFAULT_DISPLAY_NAME = "youtube-helper-video"


def resolve_video_type(content_type: str | None, filename: str | None) -> str:
    """Pick the MIME type to upload a video with, rejecting non-video uploads.

    Browsers sometimes send no type or a generic one; the extension decides then.
    """
    content_type = (content_type or "").split(";")[0].strip().lower()
    if content_type in ALLOWED_VIDEO_TYPES:
        return content_type
    if content_type not in GENERIC_TYPES:
        raise ClientInputError("Video must be MP4, MOV, or WEBM.")
    guessed = mimetypes.guess_type(filename or "")[0]
    if guessed in ALLOWED_VIDEO_TYPES:
        return guessed
    return DEFAULT_VIDEO_TYPE


def check_images(images: list[UploadFile], max_images: int) -> None:
    if len(images) > max_images:
        raise ClientInputError(f"At most {max_images} images can be attached.")
    for image in images:
        content_type = image.content_type or ""
        if content_type not in GENERIC_TYPES and not content_type.startswith("image/"):
            raise ClientInputError(f"{image.filename or 'Attachment'} is not an image.")


async def image_part(upload: UploadFile) -> InlinePart:
    data = await upload.read()
    content_type = upload.content_type or ""
    mime_type = content_type if content_type.startswith("image/") else DEFAULT_IMAGE_TYPE
    return InlinePart(data=data, mime_type=mime_type)


def _forget_asset(backend: AnalysisBackend, asset: UploadedAsset) -> None:
    try:
        backend.delete_asset(asset.name)
    except Exception as e:
        logger.debug("Could not delete remote file %s: %s", asset.name, e)


async def _run_pipeline(
    video: UploadFile,
    mime_type: str,
    images: list[UploadFile],
    context: str,
    backend: AnalysisBackend,
    settings: Settings,
) -> AnalysisResult:
    display_name = video.filename or DEFAULT_DISPLAY_NAME

    async with scratch_copy(video, settings.scratch_dir, settings.max_video_bytes) as path:
        asset = await asyncio.to_thread(backend.upload_asset, path, mime_type, display_name)

    try:
        ready = await asyncio.to_thread(backend.wait_until_ready, asset)
        image_parts = await asyncio.gather(*(image_part(image) for image in images))
        parts = [
            TextPart(build_prompt(context)),
            FileRefPart(uri=ready.uri, mime_type=ready.mime_type),
            *image_parts,
        ]
        logger.info("Generating analysis for %s with %d image(s)", asset.name, len(image_parts))
        text = await asyncio.to_thread(backend.generate, parts, GenerationOptions())
    finally:
        if settings.delete_uploaded_assets:
            await asyncio.to_thread(_forget_asset, backend, asset)

    return sanitize_payload(parse_model_json(text))


async def analyze_upload(
    video: UploadFile,
    images: list[UploadFile],
    context: str,
    backend: AnalysisBackend,
    settings: Settings,
) -> AnalysisResult:
    """Run one analysis, bounded by ``settings.max_processing_seconds``."""
    mime_type = resolve_video_type(video.content_type, video.filename)
    check_images(images, settings.max_images)
    try:
        return await asyncio.wait_for(
            _run_pipeline(video, mime_type, images, context, backend, settings),
            timeout=settings.max_processing_seconds,
        )
    except asyncio.TimeoutError as e:
        raise ProcessingTimeoutError(
            f"Analysis did not finish within {settings.max_processing_seconds:g} seconds."
        ) from e
