from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import StageConfig
from .streams import DEFAULT_CHUNK_SIZE


class FileSinkSettings(BaseSettings):
    """Environment driven defaults for the operational CLI.

    Variables use the ``FILE_SINK_`` prefix, e.g. ``FILE_SINK_DIRECTORY``.
    """

    model_config = SettingsConfigDict(
        env_prefix="FILE_SINK_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    DIRECTORY: Optional[str] = None
    ENCODING: Optional[str] = None
    ENVELOPE: Literal["header", "info"] = "header"
    CHUNK_SIZE: int = DEFAULT_CHUNK_SIZE
    LOG_LEVEL: str = "INFO"

    def stage_config(self) -> StageConfig:
        return StageConfig(directory=self.DIRECTORY, encoding=self.ENCODING)


@lru_cache()
def get_settings() -> FileSinkSettings:
    return FileSinkSettings()
