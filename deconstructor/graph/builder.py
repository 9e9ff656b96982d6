"""Graph construction from a word definition."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..models import INPUT_NODE_ID, Definition, origin_id
from .nodes import (
    FIRST_COMBINATION_LAYER,
    INPUT_LAYER,
    ORIGIN_LAYER,
    PART_CHUNK_LAYER,
    CombinationData,
    GraphEdge,
    GraphNode,
    InputData,
    OriginData,
    PartChunkData,
)

logger = logging.getLogger(__name__)


def build_graph(
    definition: Definition,
    *,
    on_submit: Callable[[str], Any] | None = None,
    initial_word: str | None = None,
    is_disabled: bool = False,
    has_analyzed: bool = False,
    analyzed_word: str | None = None,
    is_loading: bool = False,
) -> tuple[list[GraphNode], list[GraphEdge]]:
    """Derive the node/edge lists for a definition.

    Output order is fixed: the input node; then for each part its chunk node
    followed by its origin node; then each combination layer in order. The
    layout engine relies on this order.

    Source ids resolve to the part's origin node when they name a part,
    otherwise to a combination from a strictly earlier layer. Anything else
    is dropped as a missing edge.
    """
    nodes: list[GraphNode] = []
    edges: list[GraphEdge] = []

    nodes.append(
        GraphNode(
            id=INPUT_NODE_ID,
            layer=INPUT_LAYER,
            data=InputData(
                initial_word=initial_word or "",
                is_disabled=is_disabled,
                has_analyzed=has_analyzed,
                analyzed_word=analyzed_word or "",
                is_loading=is_loading,
                on_submit=on_submit,
            ),
        )
    )

    for part in definition.parts:
        chunk_id = part.id
        oid = origin_id(part.id)
        nodes.append(
            GraphNode(
                id=chunk_id,
                layer=PART_CHUNK_LAYER,
                data=PartChunkData(text=part.text, is_loading=is_loading),
            )
        )
        nodes.append(
            GraphNode(
                id=oid,
                layer=ORIGIN_LAYER,
                data=OriginData(
                    original_word=part.original_word,
                    origin=part.origin,
                    meaning=part.meaning,
                    is_loading=is_loading,
                ),
            )
        )
        edges.append(GraphEdge.between(chunk_id, oid))

    part_ids = definition.part_ids
    earlier: set[str] = set()  # combination ids from layers already emitted

    for layer_index, layer in enumerate(definition.layers):
        for combination in layer:
            nodes.append(
                GraphNode(
                    id=combination.id,
                    layer=FIRST_COMBINATION_LAYER + layer_index,
                    data=CombinationData(
                        text=combination.text,
                        definition=combination.definition,
                        is_loading=is_loading,
                    ),
                )
            )

            for src in combination.source_ids:
                if src in part_ids:
                    edges.append(GraphEdge.between(origin_id(src), combination.id))
                elif src in earlier:
                    edges.append(GraphEdge.between(src, combination.id))
                else:
                    logger.warning(
                        "Dropping edge %s -> %s: source is not a part or an earlier-layer combination",
                        src,
                        combination.id,
                    )

        earlier.update(c.id for c in layer)

    return nodes, edges
