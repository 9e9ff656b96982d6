"""Node size estimation for non-browser hosts.

A browser measures rendered nodes; the CLI estimates the same boxes from
text length and font size. Only relative sizes matter to the layout.
"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass

from ..graph.nodes import (
    CombinationData,
    GraphNode,
    InputData,
    OriginData,
    PartChunkData,
    Size,
)


@dataclass(frozen=True)
class TextMetrics:
    char_width: float = 0.55  # average glyph width as a fraction of font size
    line_height: float = 1.4

    def text_width(self, text: str, font_size: float) -> float:
        return len(text) * font_size * self.char_width

    def wrap(self, text: str, font_size: float, max_width: float) -> list[str]:
        if not text:
            return []
        chars = max(1, int(max_width / (font_size * self.char_width)))
        return textwrap.wrap(text, width=chars) or [""]

    def block_height(self, lines: int, font_size: float) -> float:
        return lines * font_size * self.line_height


# Font sizes and box constraints per node kind.
CHUNK_FONT = 48.0
CHUNK_BAR = 12.0
ORIGIN_TITLE_FONT = 18.0
ORIGIN_DETAIL_FONT = 12.0
ORIGIN_MAX_WIDTH = 180.0
COMBINATION_TITLE_FONT = 20.0
COMBINATION_DETAIL_FONT = 14.0
COMBINATION_MAX_WIDTH = 250.0
CARD_PAD_X = 16.0
CARD_PAD_Y = 8.0
INPUT_FONT = 16.0
INPUT_FIELD_MIN = 200.0
INPUT_BUTTON = 120.0
INPUT_PAD_X = 24.0
INPUT_PAD_Y = 16.0
INPUT_GAP = 12.0


class TextMeasurer:
    """Estimates the rendered size of each node kind."""

    def __init__(self, metrics: TextMetrics | None = None) -> None:
        self.metrics = metrics or TextMetrics()

    def measure(self, node: GraphNode) -> Size:
        data = node.data
        if isinstance(data, InputData):
            return self._input(data)
        if isinstance(data, PartChunkData):
            return self._chunk(data)
        if isinstance(data, OriginData):
            return self._origin(data)
        return self._combination(data)

    def measure_all(self, nodes: list[GraphNode]) -> dict[str, Size]:
        return {node.id: self.measure(node) for node in nodes}

    def _input(self, data: InputData) -> Size:
        m = self.metrics
        field_w = max(INPUT_FIELD_MIN, m.text_width(data.initial_word, INPUT_FONT) + 24.0)
        width = INPUT_PAD_X * 2 + field_w + INPUT_GAP + INPUT_BUTTON
        height = INPUT_PAD_Y * 2 + m.block_height(1, INPUT_FONT) + 16.0
        return Size(width, height)

    def _chunk(self, data: PartChunkData) -> Size:
        m = self.metrics
        width = m.text_width(data.text, CHUNK_FONT)
        height = m.block_height(1, CHUNK_FONT) + 4.0 + CHUNK_BAR
        return Size(width, height)

    def _origin(self, data: OriginData) -> Size:
        # The title never wraps and may widen the card past its cap.
        m = self.metrics
        title_w = m.text_width(data.original_word, ORIGIN_TITLE_FONT)
        inner = max(title_w, ORIGIN_MAX_WIDTH - CARD_PAD_X * 2)
        lines = m.wrap(data.origin, ORIGIN_DETAIL_FONT, inner) + m.wrap(data.meaning, ORIGIN_DETAIL_FONT, inner)
        detail_w = max((m.text_width(line, ORIGIN_DETAIL_FONT) for line in lines), default=0.0)
        width = max(title_w, detail_w) + CARD_PAD_X * 2
        height = (
            CARD_PAD_Y * 2
            + m.block_height(1, ORIGIN_TITLE_FONT)
            + 4.0
            + m.block_height(len(lines), ORIGIN_DETAIL_FONT)
        )
        return Size(width, height)

    def _combination(self, data: CombinationData) -> Size:
        m = self.metrics
        title_w = m.text_width(data.text, COMBINATION_TITLE_FONT)
        inner = max(title_w, COMBINATION_MAX_WIDTH - CARD_PAD_X * 2)
        lines = m.wrap(data.definition, COMBINATION_DETAIL_FONT, inner)
        detail_w = max((m.text_width(line, COMBINATION_DETAIL_FONT) for line in lines), default=0.0)
        width = max(title_w, detail_w) + CARD_PAD_X * 2
        height = (
            CARD_PAD_Y * 2
            + m.block_height(1, COMBINATION_TITLE_FONT)
            + 4.0
            + m.block_height(len(lines), COMBINATION_DETAIL_FONT)
        )
        return Size(width, height)
