from __future__ import annotations
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_VOID_TAGS = [
    "br", "hr", "img", "input", "link", "meta",
    "base", "area", "source", "track", "col", "embed",
]


class Settings(BaseSettings):
    """Pipeline settings, read from MARKSTYLE_* environment variables or .env."""

    model_config = SettingsConfigDict(
        env_prefix="MARKSTYLE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    verbose: bool = Field(False, description="Log successful conversions at DEBUG")
    log_level: str = Field("INFO", description="Level used by the CLI log sink")
    void_tags: List[str] = Field(default_factory=lambda: list(DEFAULT_VOID_TAGS))
    list_indent: int = Field(3, description="Spaces per Markdown list nesting level")
    table_footer: bool = Field(
        True, description="Treat one trailing non-pipe line after a table as <tfoot>"
    )
    root_id: str = Field("rootContainer", description="id of the synthetic root element")
    malformed_html_message: str = Field("Malformed HTML")
    serializer_error_html: str = Field("<div><h1>Error transforming HTML</h1></div>")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
