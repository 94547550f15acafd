"""Widget modules for ISeeFood mobile UI."""

from .image_preview import ImagePreview

__all__ = ["ImagePreview"]
