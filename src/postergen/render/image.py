"""Image encoding using Pillow."""

from io import BytesIO
from pathlib import Path

from PIL import Image

# Formats without an alpha channel
_OPAQUE_FORMATS = {"JPEG", "BMP"}


def _prepare(img: Image.Image, format: str | None) -> Image.Image:
    if format and format.upper() in _OPAQUE_FORMATS and img.mode != "RGB":
        return img.convert("RGB")
    return img


def save_image(img: Image.Image, path: Path, format: str | None = None) -> Path:
    """
    Encode an image to disk.

    Args:
        img: PIL Image object.
        path: Output path. The format is taken from the suffix unless given.
        format: Optional explicit format (PNG, JPEG, etc.).

    Returns:
        The path written.

    Raises:
        ValueError: If the format can't be determined from the suffix.
        OSError: If the file can't be written.
    """
    path = Path(path)
    if format is None:
        extension = path.suffix.lower()
        format = Image.registered_extensions().get(extension)
        if format is None:
            raise ValueError(f"Unknown image format for extension '{path.suffix}'")

    _prepare(img, format).save(path, format=format)
    return path


def save_image_to_bytes(img: Image.Image, format: str = "PNG") -> bytes:
    """Encode an image in memory, flattening it first for opaque formats."""
    buffer = BytesIO()
    _prepare(img, format).save(buffer, format=format)
    return buffer.getvalue()
