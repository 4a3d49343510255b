import tempfile
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 9000
    log_level: str = "INFO"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-pro"
    scratch_dir: Path = Path(tempfile.gettempdir()) / "ythelper"
    max_processing_seconds: float = 300
    max_video_bytes: int = 500 * 1024 * 1024
    max_images: int = 8
    file_poll_interval: float = 2.0
    file_poll_attempts: int = 60
    delete_uploaded_assets: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
