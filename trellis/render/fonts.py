"""Font loading shared by the backends."""

from __future__ import annotations
from pathlib import Path
from typing import Optional
from PIL import ImageFont

from trellis.errors import RendererError


def load_font(font_path: Optional[str], size: int):
    """Load a TTF/OTF font, or Pillow's default font when no path is given."""
    if font_path is None:
        return ImageFont.load_default(size=size)
    if not Path(font_path).exists():
        raise RendererError(f"Font not found: {font_path}")
    return ImageFont.truetype(font_path, size)
