import logging
import sys
from enum import StrEnum

from pydantic import Field
from pydantic_settings import BaseSettings


class RunMode(StrEnum):
    both = "both"
    urls = "urls"


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "frozen": True}

    concurrency: int = Field(default=6, gt=0)
    delay: int = Field(default=300, ge=0)  # ms between waves
    batch_size: int = Field(default=500, gt=0)
    wait_seconds: int = Field(default=0, ge=0)
    mode: RunMode = RunMode.both

    input_file: str = "mc_list.txt"
    output_dir: str = "output"
    keep_snapshots: bool = True

    fetch_timeout: float = Field(default=20.0, gt=0)
    max_retries: int = Field(default=3, gt=0)
    backoff_base: float = Field(default=2.0, ge=0)  # seconds
    hop_delay: float = Field(default=0.3, ge=0)  # seconds

    log_level: str = "INFO"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
