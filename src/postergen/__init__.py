"""Poster and banner generator for a small text markup dialect."""

__version__ = "0.1.0"

# High-level Python API
from postergen.builder import render_poster, render_poster_bytes, render_poster_file
from postergen.config import PosterConfig, load_config
from postergen.fonts import FontFace, FontKey, FontNotFoundError, FontResolver
from postergen.markup import AttributeValueError, MarkupError, MarkupParser, parse_markup
from postergen.models import Content, Line, Run, TextStyle

__all__ = [
    "AttributeValueError",
    "Content",
    "FontFace",
    "FontKey",
    "FontNotFoundError",
    "FontResolver",
    "Line",
    "MarkupError",
    "MarkupParser",
    "PosterConfig",
    "Run",
    "TextStyle",
    "load_config",
    "parse_markup",
    "render_poster",
    "render_poster_bytes",
    "render_poster_file",
]
