"""Vendor-neutral prompt parts and the capability interface the analyzer talks to."""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Union

from ythelper.models.analysis import UploadedAsset


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class FileRefPart:
    """A previously uploaded asset, referenced by URI instead of embedding its bytes."""

    uri: str
    mime_type: str


@dataclass(frozen=True)
class InlinePart:
    """Binary data embedded directly in the generation request."""

    data: bytes
    mime_type: str


PromptPart = Union[TextPart, FileRefPart, InlinePart]


@dataclass(frozen=True)
class GenerationOptions:
    response_mime_type: str = "application/json"
    temperature: float = 0.6
    max_output_tokens: int = 1200


class AnalysisBackend(Protocol):
    def upload_asset(self, path: Path, mime_type: str, display_name: str) -> UploadedAsset:
        ...

    def wait_until_ready(self, asset: UploadedAsset) -> UploadedAsset:
        ...

    def generate(self, parts: list[PromptPart], options: GenerationOptions) -> str:
        ...

    def delete_asset(self, name: str) -> None:
        ...
