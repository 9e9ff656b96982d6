"""Host-side rendering: measurement, layout pipeline and output formats."""

from .measure import TextMeasurer, TextMetrics
from .svg import to_json, to_svg, wrap_html
from .sync import FitViewport, Frame, RenderPhase, RenderSync, Viewport, bounding_frame

__all__ = [
    "TextMeasurer",
    "TextMetrics",
    "RenderSync",
    "RenderPhase",
    "Viewport",
    "FitViewport",
    "Frame",
    "bounding_frame",
    "to_svg",
    "to_json",
    "wrap_html",
]
