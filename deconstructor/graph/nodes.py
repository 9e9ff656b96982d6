"""Graph node and edge types.

Nodes are a closed tagged variant: the payload type decides the node kind
(Input, PartChunk, Origin, Combination). Position is owned by the layout
engine; everything else is owned by the graph builder.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class NodeKind(str, Enum):
    """Types of graph nodes."""

    INPUT = "input"
    PART_CHUNK = "part_chunk"
    ORIGIN = "origin"
    COMBINATION = "combination"


# Fixed layer index for each non-combination kind.
INPUT_LAYER = 0
PART_CHUNK_LAYER = 1
ORIGIN_LAYER = 2
FIRST_COMBINATION_LAYER = 3


@dataclass(frozen=True)
class Point:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Size:
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class InputData:
    """Payload of the word input node."""

    initial_word: str = ""
    is_disabled: bool = False
    has_analyzed: bool = False
    analyzed_word: str = ""
    is_loading: bool = False
    on_submit: Callable[[str], Any] | None = field(default=None, compare=False, repr=False)

    def is_current_word_analyzed(self, word: str | None = None) -> bool:
        """True when `word` (default: the displayed word) was already analyzed."""
        current = self.initial_word if word is None else word
        return self.has_analyzed and current.strip().lower() == self.analyzed_word.lower()

    @property
    def button_label(self) -> str:
        if self.is_loading:
            return "..."
        if self.is_disabled:
            return "Locked"
        return "Try Again" if self.is_current_word_analyzed() else "Analyze"


@dataclass(frozen=True)
class PartChunkData:
    """Payload of a word-fragment node."""

    text: str
    is_loading: bool = False


@dataclass(frozen=True)
class OriginData:
    """Payload of a part's etymological origin node."""

    original_word: str
    origin: str
    meaning: str
    is_loading: bool = False


@dataclass(frozen=True)
class CombinationData:
    """Payload of a combined-term node."""

    text: str
    definition: str
    is_loading: bool = False


NodeData = InputData | PartChunkData | OriginData | CombinationData

_KIND_BY_DATA: dict[type, NodeKind] = {
    InputData: NodeKind.INPUT,
    PartChunkData: NodeKind.PART_CHUNK,
    OriginData: NodeKind.ORIGIN,
    CombinationData: NodeKind.COMBINATION,
}


@dataclass(frozen=True)
class GraphNode:
    """A positioned (or not yet positioned) node of the decomposition graph."""

    id: str
    data: NodeData
    layer: int
    position: Point = Point()
    measured: Size | None = None

    def __post_init__(self) -> None:
        if type(self.data) not in _KIND_BY_DATA:
            raise TypeError(f"unsupported node payload: {type(self.data).__name__}")

    @property
    def kind(self) -> NodeKind:
        return _KIND_BY_DATA[type(self.data)]

    @property
    def width(self) -> float:
        return self.measured.width if self.measured else 0.0

    @property
    def height(self) -> float:
        return self.measured.height if self.measured else 0.0

    def with_position(self, x: float, y: float) -> GraphNode:
        return replace(self, position=Point(x, y))

    def with_measured(self, size: Size | None) -> GraphNode:
        return replace(self, measured=size)

    def to_dict(self) -> dict[str, Any]:
        payload = {k: v for k, v in vars(self.data).items() if k != "on_submit"}
        d: dict[str, Any] = {
            "id": self.id,
            "type": self.kind.value,
            "layer": self.layer,
            "data": payload,
            "position": {"x": self.position.x, "y": self.position.y},
        }
        if self.measured is not None:
            d["measured"] = {"width": self.measured.width, "height": self.measured.height}
        return d


@dataclass(frozen=True)
class GraphEdge:
    """A presentation-only edge between two nodes."""

    id: str
    source: str
    target: str

    @classmethod
    def between(cls, source: str, target: str) -> GraphEdge:
        return cls(id=f"edge-{source}-{target}", source=source, target=target)

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "source": self.source, "target": self.target}
