"""SVG, HTML and JSON output for a positioned decomposition graph."""

from __future__ import annotations

import html
import json

from ..graph.nodes import (
    CombinationData,
    GraphEdge,
    GraphNode,
    InputData,
    OriginData,
    PartChunkData,
)
from .measure import (
    CARD_PAD_X,
    CARD_PAD_Y,
    CHUNK_BAR,
    CHUNK_FONT,
    COMBINATION_DETAIL_FONT,
    COMBINATION_TITLE_FONT,
    INPUT_BUTTON,
    INPUT_FONT,
    INPUT_PAD_X,
    ORIGIN_DETAIL_FONT,
    ORIGIN_TITLE_FONT,
    TextMetrics,
)
from .sync import Frame, bounding_frame

BG = "#0f1115"
CARD_FILL = "#1b1f2a"
CARD_BORDER = "#3a4154"
EDGE_COLOR = "#4b5563"
TEXT_COLOR = "#e6e6e6"
MUTED_TEXT = "#9aa4b2"
BUTTON_ANALYZE = "#2563eb"
BUTTON_RETRY = "#9333ea"


def _esc(s: str) -> str:
    return html.escape(s, quote=True)


def to_json(nodes: list[GraphNode], edges: list[GraphEdge]) -> str:
    payload = {
        "nodes": [n.to_dict() for n in nodes],
        "edges": [e.to_dict() for e in edges],
    }
    return json.dumps(payload, indent=2, sort_keys=True) + "\n"


def to_svg(
    nodes: list[GraphNode],
    edges: list[GraphEdge],
    *,
    frame: Frame | None = None,
    title: str = "",
    metrics: TextMetrics | None = None,
) -> str:
    """Render positioned nodes as a standalone SVG document.

    The view box is `frame` when given (typically the viewport's fitted
    frame), else the padded bounding box of the nodes.
    """
    m = metrics or TextMetrics()
    frame = frame or bounding_frame(nodes)
    by_id = {n.id: n for n in nodes}

    parts: list[str] = []
    parts.append(
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{frame.width:.0f}" height="{frame.height:.0f}" '
        f'viewBox="{frame.view_box}" style="background:{BG}">'
    )
    if title:
        parts.append(f"<title>{_esc(title)}</title>")

    # Edges first (under nodes)
    parts.append('<g id="edges" stroke-linecap="round" fill="none">')
    for edge in edges:
        src = by_id.get(edge.source)
        dst = by_id.get(edge.target)
        if src is None or dst is None:
            continue
        x1 = src.position.x + src.width / 2
        y1 = src.position.y + src.height
        x2 = dst.position.x + dst.width / 2
        y2 = dst.position.y
        parts.append(
            f'<line x1="{x1:.1f}" y1="{y1:.1f}" x2="{x2:.1f}" y2="{y2:.1f}" '
            f'stroke="{EDGE_COLOR}" stroke-width="1" stroke-dasharray="5 5"/>'
        )
    parts.append("</g>")

    parts.append('<g id="nodes">')
    for node in nodes:
        parts.extend(_node_svg(node, m))
    parts.append("</g>")
    parts.append("</svg>")
    return "\n".join(parts) + "\n"


def _text(x: float, y: float, s: str, *, size: float, color: str = TEXT_COLOR, serif: bool = False, anchor: str = "start") -> str:
    family = "Georgia, serif" if serif else "Helvetica, sans-serif"
    return (
        f'<text x="{x:.1f}" y="{y:.1f}" fill="{color}" font-family="{family}" '
        f'font-size="{size:g}" text-anchor="{anchor}">{_esc(s)}</text>'
    )


def _card(node: GraphNode) -> str:
    x, y = node.position.x, node.position.y
    return (
        f'<rect x="{x:.1f}" y="{y:.1f}" width="{node.width:.1f}" height="{node.height:.1f}" rx="8" '
        f'fill="{CARD_FILL}" stroke="{CARD_BORDER}" stroke-width="1"/>'
    )


def _node_svg(node: GraphNode, m: TextMetrics) -> list[str]:
    data = node.data
    x, y = node.position.x, node.position.y
    opacity = ' opacity="0.15"' if data.is_loading else ""
    out = [f'<g id="node-{_esc(node.id)}" class="{node.kind.value}"{opacity}>']

    if isinstance(data, InputData):
        out.append(_card(node))
        word = data.initial_word or "Enter a word..."
        color = TEXT_COLOR if data.initial_word else MUTED_TEXT
        baseline = y + node.height / 2 + INPUT_FONT * 0.35
        out.append(_text(x + INPUT_PAD_X, baseline, word, size=INPUT_FONT, color=color))
        bx = x + node.width - INPUT_PAD_X - INPUT_BUTTON
        fill = BUTTON_RETRY if data.is_current_word_analyzed() else BUTTON_ANALYZE
        out.append(
            f'<rect x="{bx:.1f}" y="{y + 12:.1f}" width="{INPUT_BUTTON:.1f}" height="{node.height - 24:.1f}" '
            f'rx="6" fill="{fill}"/>'
        )
        out.append(_text(bx + INPUT_BUTTON / 2, baseline, data.button_label, size=INPUT_FONT, anchor="middle"))

    elif isinstance(data, PartChunkData):
        cx = x + node.width / 2
        out.append(_text(cx, y + CHUNK_FONT, data.text, size=CHUNK_FONT, serif=True, anchor="middle"))
        bar_top = y + node.height - CHUNK_BAR
        bottom = y + node.height
        right = x + node.width
        out.append(
            f'<polyline points="{x:.1f},{bar_top:.1f} {x:.1f},{bottom:.1f} {right:.1f},{bottom:.1f} {right:.1f},{bar_top:.1f}" '
            f'fill="none" stroke="{TEXT_COLOR}" stroke-width="1"/>'
        )

    elif isinstance(data, OriginData):
        out.append(_card(node))
        inner = node.width - CARD_PAD_X * 2
        ty = y + CARD_PAD_Y + ORIGIN_TITLE_FONT
        out.append(_text(x + CARD_PAD_X, ty, data.original_word, size=ORIGIN_TITLE_FONT, serif=True))
        ty += 4.0
        for line in m.wrap(data.origin, ORIGIN_DETAIL_FONT, inner):
            ty += ORIGIN_DETAIL_FONT * m.line_height
            out.append(_text(x + CARD_PAD_X, ty, line, size=ORIGIN_DETAIL_FONT, color=MUTED_TEXT))
        for line in m.wrap(data.meaning, ORIGIN_DETAIL_FONT, inner):
            ty += ORIGIN_DETAIL_FONT * m.line_height
            out.append(_text(x + CARD_PAD_X, ty, line, size=ORIGIN_DETAIL_FONT))

    elif isinstance(data, CombinationData):
        out.append(_card(node))
        inner = node.width - CARD_PAD_X * 2
        ty = y + CARD_PAD_Y + COMBINATION_TITLE_FONT
        out.append(_text(x + CARD_PAD_X, ty, data.text, size=COMBINATION_TITLE_FONT, serif=True))
        ty += 4.0
        for line in m.wrap(data.definition, COMBINATION_DETAIL_FONT, inner):
            ty += COMBINATION_DETAIL_FONT * m.line_height
            out.append(_text(x + CARD_PAD_X, ty, line, size=COMBINATION_DETAIL_FONT))

    out.append("</g>")
    return out


def wrap_html(svg: str, *, title: str) -> str:
    """Wrap SVG in a standalone HTML page with basic pan/zoom (no external deps)."""
    t = _esc(title)
    return (
        "<!doctype html>\n"
        "<html>\n"
        "<head>\n"
        f"  <meta charset=\"utf-8\" />\n  <title>{t}</title>\n"
        "  <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />\n"
        "  <style>\n"
        "    html, body { height: 100%; }\n"
        f"    body {{ margin: 0; background: {BG}; color: {TEXT_COLOR}; font-family: system-ui, -apple-system, Segoe UI, Roboto, Helvetica, Arial; }}\n"
        "    .wrap { height: 100vh; display: flex; flex-direction: column; }\n"
        "    .viewport { flex: 1; min-height: 0; overflow: hidden; }\n"
        "    .disclaimer { color: #6b7280; font-size: 13px; text-align: center; padding: 8px; }\n"
        "    svg { width: 100%; height: 100%; display: block; touch-action: none; user-select: none; }\n"
        "  </style>\n"
        "</head>\n"
        "<body>\n"
        "  <div class=\"wrap\">\n"
        "    <div class=\"viewport\" id=\"viewport\">\n"
        f"{svg}\n"
        "    </div>\n"
        "    <p class=\"disclaimer\">deconstructor can make mistakes. always double-check important information. "
        "Drag to pan, scroll to zoom.</p>\n"
        "  </div>\n"
        "  <script>\n"
        "    (function () {\n"
        "      const svg = document.querySelector('#viewport svg');\n"
        "      if (!svg) return;\n"
        "      svg.removeAttribute('width');\n"
        "      svg.removeAttribute('height');\n"
        "      const vb = svg.viewBox.baseVal;\n"
        "      const initialW = vb.width;\n"
        "      const zoomAt = (clientX, clientY, factor) => {\n"
        "        const rect = svg.getBoundingClientRect();\n"
        "        const px = (clientX - rect.left) / rect.width;\n"
        "        const py = (clientY - rect.top) / rect.height;\n"
        "        const newW = Math.max(initialW * 0.1, Math.min(initialW * 4, vb.width / factor));\n"
        "        const newH = vb.height * (newW / vb.width);\n"
        "        vb.x += (vb.width - newW) * px;\n"
        "        vb.y += (vb.height - newH) * py;\n"
        "        vb.width = newW;\n"
        "        vb.height = newH;\n"
        "      };\n"
        "      let panning = false;\n"
        "      let start = { x: 0, y: 0, vbX: 0, vbY: 0 };\n"
        "      svg.addEventListener('pointerdown', (e) => {\n"
        "        panning = true;\n"
        "        svg.setPointerCapture(e.pointerId);\n"
        "        start = { x: e.clientX, y: e.clientY, vbX: vb.x, vbY: vb.y };\n"
        "      });\n"
        "      svg.addEventListener('pointerup', () => { panning = false; });\n"
        "      svg.addEventListener('pointercancel', () => { panning = false; });\n"
        "      svg.addEventListener('pointermove', (e) => {\n"
        "        if (!panning) return;\n"
        "        const rect = svg.getBoundingClientRect();\n"
        "        vb.x = start.vbX - (e.clientX - start.x) * (vb.width / rect.width);\n"
        "        vb.y = start.vbY - (e.clientY - start.y) * (vb.height / rect.height);\n"
        "      });\n"
        "      svg.addEventListener('wheel', (e) => {\n"
        "        e.preventDefault();\n"
        "        zoomAt(e.clientX, e.clientY, e.deltaY > 0 ? 1 / 1.15 : 1.15);\n"
        "      }, { passive: false });\n"
        "    })();\n"
        "  </script>\n"
        "</body>\n"
        "</html>\n"
    )
