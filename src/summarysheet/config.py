"""Configuration models and helpers for Summary Sheet."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field, ValidationError

__all__ = [
    "AppConfig",
    "AuthConfig",
    "DEFAULT_CONFIG_PATH",
    "FetchConfig",
    "RenderConfig",
    "StorageConfig",
    "SummarizerConfig",
    "load_config",
]

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "data" / "settings.json"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/129.0.0.0 Safari/537.36"
)


class FetchConfig(BaseModel):
    """Settings used when downloading article pages."""

    timeout: float = Field(default=10.0, description="Request timeout in seconds")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="Browser identification header")
    min_text_length: int = Field(
        default=50,
        description="Extracted text shorter than this is treated as a non-article page",
    )


class RenderConfig(BaseModel):
    """Page geometry for the A4 summary sheet (300 DPI device pixels)."""

    width: int = 2480
    height: int = 3508
    margin: int = 60
    bullet_indent: int = 30
    headline_font_size: int = 72
    subheadline_font_size: int = 54
    bullet_font_size: int = 42
    line_spacing: float = Field(default=1.2, description="Line height as a multiple of the bullet font size")
    bullet_gap: float = Field(default=0.5, description="Extra space between bullets, in line heights")
    headline_y: float = Field(default=0.05, description="Headline baseline as a fraction of page height")
    subheadline_y: float = Field(default=0.125, description="Subheadline baseline as a fraction of page height")
    bullets_y: float = Field(default=0.175, description="First bullet baseline as a fraction of page height")
    bullet_marker: str = "•"
    font_path: str | None = Field(
        default=None,
        description="TrueType font to render with. Pillow's bundled font is used when omitted.",
    )

    @property
    def line_height(self) -> float:
        return self.bullet_font_size * self.line_spacing

    @property
    def text_x(self) -> int:
        return self.margin + self.bullet_indent

    @property
    def max_text_width(self) -> int:
        return self.width - 2 * self.margin - self.bullet_indent

    @property
    def printable_height(self) -> int:
        return self.height - self.margin


class SummarizerConfig(BaseModel):
    """Settings for the OpenAI-compatible chat completion endpoint."""

    model: str = "gpt-4o-mini"
    base_url: str | None = Field(
        default=None,
        description="Alternative OpenAI-compatible endpoint, e.g. https://api.x.ai/v1",
    )
    api_key_env: str = Field(default="OPENAI_API_KEY", description="Environment variable holding the API key")
    max_tokens: int = 200
    temperature: float = 0.3
    timeout: float = 15.0
    max_input_chars: int = 12000


class AuthConfig(BaseModel):
    """Users allowed to work with summaries. An empty list allows any signed-in user."""

    allowed_user_ids: List[str] = Field(default_factory=list)
    user_header: str = "X-User-Id"


class StorageConfig(BaseModel):
    blob_root: str | None = Field(
        default=None,
        description="Directory holding stored summaries. Defaults to the project data directory.",
    )


class AppConfig(BaseModel):
    """Top level application settings."""

    fetch: FetchConfig = Field(default_factory=FetchConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    summarizer: SummarizerConfig = Field(default_factory=SummarizerConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> "AppConfig":
        """Load configuration data from a JSON file."""

        config_path = Path(path) if path else DEFAULT_CONFIG_PATH
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Configuration file not found: {config_path}") from exc
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in configuration file: {config_path}") from exc

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Configuration file is invalid: {config_path}\n{exc}") from exc

    def dump(self, path: Path | str | None = None) -> None:
        """Persist the configuration back to disk as JSON."""

        config_path = Path(path) if path else DEFAULT_CONFIG_PATH
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(self.model_dump_json(indent=2), encoding="utf-8")


def load_config(path: Path | str | None = None) -> AppConfig:
    """Load settings from disk, returning the defaults when no file exists."""

    try:
        return AppConfig.from_file(path)
    except FileNotFoundError:
        logger.debug("No settings file found, using defaults")
        return AppConfig()
