from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 9000
    log_level: str = "INFO"
    forms_dir: Path = Path("forms")
    max_upload_size: int = 5 * 1024 * 1024

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "APMFORM_"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
