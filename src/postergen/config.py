"""Configuration loading and validation."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

from postergen.types import RGBA
from postergen.utils.colors import parse_color
from postergen.utils.dimensions import Rect, content_rect


class PosterConfig(BaseModel):
    """
    Image settings for one render.

    All parameters have sensible defaults. Override only what you need using
    Pydantic's model_copy():

        base = PosterConfig(image_width=1280, image_height=720)
        variant = base.model_copy(update={"background_color": "#000000"})
    """

    image_width: int = Field(default=1920, gt=0)
    """Image width in pixels."""

    image_height: int = Field(default=1080, gt=0)
    """Image height in pixels."""

    padding: int = Field(default=300, ge=0)
    """Padding in pixels, removed from every side to form the content area."""

    background_color: str = "#FFFFFFFF"
    """Canvas color as a CSS color string."""

    line_spacing: float = Field(default=1.5, gt=0)
    """Vertical advance between lines, as a multiple of the line height."""

    default_family: str | None = None
    """Fallback font family. If None, an installed CJK-capable family is picked."""

    @field_validator("background_color")
    @classmethod
    def _check_color(cls, value: str) -> str:
        parse_color(value)
        return value

    @model_validator(mode="after")
    def _check_padding(self) -> "PosterConfig":
        if self.padding * 2 >= self.image_width or self.padding * 2 >= self.image_height:
            raise ValueError(
                f"Padding {self.padding}px leaves no content area in a "
                f"{self.image_width}x{self.image_height} image"
            )
        return self

    @property
    def background_rgba(self) -> RGBA:
        return parse_color(self.background_color)

    @property
    def content_rect(self) -> Rect:
        """Area text is centered in."""
        return content_rect(self.image_width, self.image_height, self.padding)


def load_config(config_path: Path | None = None) -> PosterConfig:
    """
    Load configuration from TOML file.

    Keys mirror PosterConfig fields, either at the top level or under a
    [poster] table.

    Args:
        config_path: Path to config file. If None, looks for postergen.toml in current directory.

    Returns:
        Validated PosterConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    if config_path is None:
        config_path = Path.cwd() / "postergen.toml"

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        config_dict = tomllib.load(f)

    return PosterConfig(**config_dict.get("poster", config_dict))
