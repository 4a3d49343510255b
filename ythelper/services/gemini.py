"""Gemini backend: uploads videos through the File API and requests JSON generations."""

import logging
import time
from pathlib import Path

from fastapi import Depends
from google import genai
from google.genai import errors, types

from ythelper.config import Settings, get_settings
from ythelper.exceptions import ConfigurationError, IntegrationError
from ythelper.models.analysis import UploadedAsset
from ythelper.services.backend import (
    FileRefPart,
    GenerationOptions,
    InlinePart,
    PromptPart,
    TextPart,
)

logger = logging.getLogger(__name__)


def _handle_api_error(e: errors.APIError, action: str):
    logger.warning("Gemini %s failed: %s", action, e)
    if e.code in (401, 403):
        raise ConfigurationError(
            "Gemini rejected the API key. Check GEMINI_API_KEY in .env"
        ) from e
    raise IntegrationError(f"Gemini {action} failed.") from e


def _to_sdk_part(part: PromptPart) -> types.Part:
    if isinstance(part, TextPart):
        return types.Part.from_text(text=part.text)
    if isinstance(part, FileRefPart):
        return types.Part.from_uri(file_uri=part.uri, mime_type=part.mime_type)
    if isinstance(part, InlinePart):
        return types.Part.from_bytes(data=part.data, mime_type=part.mime_type)
    raise TypeError(f"Unsupported prompt part: {type(part).__name__}")


class GeminiBackend:
    def __init__(
        self,
        api_key: str,
        model: str,
        poll_interval: float = 2.0,
        poll_attempts: int = 60,
    ) -> None:
        self.model = model
        self.poll_interval = poll_interval
        self.poll_attempts = poll_attempts
        self.client = genai.Client(api_key=api_key)

    def upload_asset(self, path: Path, mime_type: str, display_name: str) -> UploadedAsset:
        try:
            uploaded = self.client.files.upload(
                file=path,
                config=types.UploadFileConfig(mime_type=mime_type, display_name=display_name),
            )
        except errors.APIError as e:
            _handle_api_error(e, "file upload")
        logger.info("Uploaded %s to Gemini as %s", display_name, uploaded.name)
        return UploadedAsset(
            name=uploaded.name,
            uri=uploaded.uri,
            mime_type=uploaded.mime_type or mime_type,
        )

    def wait_until_ready(self, asset: UploadedAsset) -> UploadedAsset:
        """Poll an uploaded file until Gemini has finished processing it."""
        try:
            for attempt in range(self.poll_attempts):
                if attempt:
                    time.sleep(self.poll_interval)
                remote = self.client.files.get(name=asset.name)
                if remote.state == types.FileState.ACTIVE:
                    return UploadedAsset(
                        name=asset.name,
                        uri=remote.uri or asset.uri,
                        mime_type=remote.mime_type or asset.mime_type,
                    )
                if remote.state == types.FileState.FAILED:
                    raise IntegrationError(f"Gemini could not process {asset.name}.")
        except errors.APIError as e:
            _handle_api_error(e, "file processing")
        raise IntegrationError("Gemini file upload timed out waiting for ACTIVE state.")

    def generate(self, parts: list[PromptPart], options: GenerationOptions) -> str:
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=[
                    types.Content(role="user", parts=[_to_sdk_part(p) for p in parts]),
                ],
                config=types.GenerateContentConfig(
                    response_mime_type=options.response_mime_type,
                    temperature=options.temperature,
                    max_output_tokens=options.max_output_tokens,
                ),
            )
        except errors.APIError as e:
            _handle_api_error(e, "generation")
        return response.text or ""

    def delete_asset(self, name: str) -> None:
        try:
            self.client.files.delete(name=name)
        except errors.APIError as e:
            _handle_api_error(e, "file delete")


def get_backend(settings: Settings = Depends(get_settings)) -> GeminiBackend:
    if not settings.gemini_api_key:
        raise ConfigurationError("Missing GEMINI_API_KEY environment variable.")
    return GeminiBackend(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        poll_interval=settings.file_poll_interval,
        poll_attempts=settings.file_poll_attempts,
    )
