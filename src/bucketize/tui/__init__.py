"""Terminal rendering helpers."""

from .bucket_renderer import BucketRenderer, format_range

__all__ = ["BucketRenderer", "format_range"]
