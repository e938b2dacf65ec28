"""Image rendering for computed timeline layouts."""

from .renderer import DEFAULT_PALETTE, RendererConfig, TimelineRenderer

__all__ = [
    "DEFAULT_PALETTE",
    "RendererConfig",
    "TimelineRenderer",
]
