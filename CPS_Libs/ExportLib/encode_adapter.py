"""
Export/Encode Adapter for Creative Photo Studio.

Serializes a rendered raster to encoded image bytes (PNG, JPEG or WEBP).
Quality is given on a 0-1 scale and mapped to Pillow's 1-100 scale for the
lossy formats. JPEG has no alpha, so transparent areas are flattened onto
black before encoding.

An encoder failure never raises: encode_image logs it and returns None, and
callers treat None (or empty bytes) as "nothing to export".

Classes:
    ExportConfig: Target format and quality, with Pillow save kwargs

Functions:
    normalize_format: Map format names, aliases and MIME types to a format key
    encode_image: Encode a rendered output or PIL Image to bytes
"""

import io
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from PIL import Image

from CPS_Libs.constants import (
    FORMAT_ALIASES,
    FORMAT_EXTENSIONS,
    FORMAT_JPEG,
    FORMAT_MIME_TYPES,
    FORMAT_PNG,
    FORMAT_WEBP,
    PIL_SAVE_FORMATS,
    SINGLE_EXPORT_QUALITY,
)

logger = logging.getLogger(__name__)

LOSSY_FORMATS = (FORMAT_JPEG, FORMAT_WEBP)


def normalize_format(save_format: str) -> str:
    """
    Normalize a format name to one of 'png', 'jpeg', 'webp'.

    Accepts case-insensitive names, 'jpg' and MIME types such as 'image/jpeg'.

    Raises:
        ValueError: If the format is not supported
    """
    key = str(save_format).strip().lower()
    key = FORMAT_ALIASES.get(key, key)
    if key not in PIL_SAVE_FORMATS:
        available = ", ".join(PIL_SAVE_FORMATS)
        raise ValueError(f"Unsupported export format '{save_format}'. Supported formats: {available}")
    return key


@dataclass
class ExportConfig:
    """Configuration for one encode.

    Attributes:
        save_format: Target format ('png', 'jpeg', 'webp'; aliases accepted)
        quality: Lossy quality on a 0-1 scale (ignored for PNG)
    """
    save_format: str = FORMAT_PNG
    quality: float = SINGLE_EXPORT_QUALITY

    def __post_init__(self):
        self.save_format = normalize_format(self.save_format)

    @property
    def extension(self) -> str:
        return FORMAT_EXTENSIONS[self.save_format]

    @property
    def mime_type(self) -> str:
        return FORMAT_MIME_TYPES[self.save_format]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExportConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)

    def get_save_kwargs(self) -> Dict[str, Any]:
        """Get PIL Image.save() kwargs based on format."""
        kwargs: Dict[str, Any] = {"format": PIL_SAVE_FORMATS[self.save_format]}

        if self.save_format in LOSSY_FORMATS:
            kwargs["quality"] = max(1, min(100, int(round(float(self.quality) * 100))))

        return kwargs


def flatten_alpha(image: Any, background=(0, 0, 0)) -> Any:
    """Composite an image with alpha onto a solid RGB background."""
    if image.mode not in ("RGBA", "LA", "RGBa"):
        return image.convert("RGB")
    rgba = image.convert("RGBA")
    flattened = Image.new("RGB", rgba.size, background)
    flattened.paste(rgba, mask=rgba.getchannel("A"))
    return flattened


def encode_image(
    output: Any,
    save_format: str = FORMAT_PNG,
    quality: float = SINGLE_EXPORT_QUALITY,
) -> Optional[bytes]:
    """
    Encode a rendered output to image bytes.

    Args:
        output: RenderedOutput or PIL Image
        save_format: 'png', 'jpeg' or 'webp' (aliases and MIME types accepted)
        quality: 0-1 quality for lossy formats

    Returns:
        Encoded bytes, or None when the encoder produced nothing

    Raises:
        TypeError: If output holds no PIL Image
        ValueError: If the format is not supported
    """
    image = getattr(output, "image", output)
    if not hasattr(image, "save") or not hasattr(image, "mode"):
        raise TypeError(f"Expected RenderedOutput or PIL Image, got {type(output)}")

    config = ExportConfig(save_format=save_format, quality=quality)
    kwargs = config.get_save_kwargs()

    if config.save_format == FORMAT_JPEG:
        image = flatten_alpha(image)

    buffer = io.BytesIO()
    try:
        image.save(buffer, **kwargs)
    except (OSError, ValueError, KeyError) as e:
        logger.warning(f"Failed to encode {image.size[0]}x{image.size[1]} image as {kwargs['format']}: {e}")
        return None

    data = buffer.getvalue()
    if not data:
        logger.warning(f"Encoder produced no data for {kwargs['format']}")
        return None

    logger.debug(f"Encoded {len(data)} bytes as {kwargs['format']} ({config.mime_type})")
    return data
