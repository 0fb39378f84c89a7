"""Debug graph of the chained CYP2D6 regions, written as an SVG file."""

from __future__ import annotations

import math
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from xml.sax.saxutils import escape

from cyptyper.region_label import RegionLabel

MIN_ARROW_WIDTH = 2
MAX_ARROW_WIDTH = 5

NODE_WIDTH = 175.0
NODE_HEIGHT = 100.0
_MARGIN = 40.0
_COLUMN_GAP = 120.0
_ROW_GAP = 40.0
_FONT_SIZE = 15


@dataclass(frozen=True)
class EdgeStyle:
    """Width and RGBA colour (0xRRGGBBAA) of an edge in the debug graph."""

    width: int
    color: int

    @property
    def rgb_hex(self) -> str:
        """The colour as an SVG "#rrggbb" string."""
        return f"#{(self.color >> 8) & 0xFFFFFF:06x}"

    @property
    def opacity(self) -> float:
        """The alpha channel as a fraction."""
        return (self.color & 0xFF) / 255.0


def count_chain_usage(
    num_labels: int, chain_frequency: Mapping[Sequence[int], float]
) -> tuple[list[float], dict[tuple[int, int], float]]:
    """Total frequency per label and per adjacent label pair over all chains.

    Raises IndexError if a chain refers to a label index outside `num_labels`.
    """
    single_counts = [0.0] * num_labels
    pair_counts: dict[tuple[int, int], float] = {}
    for chain, frequency in sorted(chain_frequency.items(), key=lambda item: tuple(item[0])):
        for index in chain:
            if not 0 <= index < num_labels:
                raise IndexError(f"label index {index} out of range for {num_labels} labels")
            single_counts[index] += frequency
        for pair in zip(chain, chain[1:]):
            pair_counts[pair] = pair_counts.get(pair, 0.0) + frequency
    return single_counts, dict(sorted(pair_counts.items()))


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _channel(value: float) -> int:
    return max(0, math.floor(value))


def edge_style(frequency: float, min_edge: float, max_edge: float) -> EdgeStyle:
    """Width scaled between 2 and 5 and a blue-to-red heat colour for an edge."""
    fraction = (frequency - min_edge) / (max_edge - min_edge)
    width = MIN_ARROW_WIDTH + _round_half_away((MAX_ARROW_WIDTH - MIN_ARROW_WIDTH) * fraction)
    red = _channel(fraction * 255.0) << 16
    blue = _channel((1.0 - fraction) * 255.0)
    color = ((red + blue) << 8) + 0xFF
    return EdgeStyle(width, color)


def _layers(nodes: Sequence[int], edges: Sequence[tuple[int, int]]) -> dict[int, int]:
    layers = {node: 0 for node in nodes}
    cap = max(len(nodes) - 1, 0)
    for _ in range(len(nodes)):
        changed = False
        for source, target in edges:
            if source == target:
                continue
            proposed = min(layers[source] + 1, cap)
            if layers[target] < proposed:
                layers[target] = proposed
                changed = True
        if not changed:
            break
    return layers


def _text(x: float, y: float, content: str, **attrs: str) -> str:
    extra = "".join(f' {key.replace("_", "-")}="{value}"' for key, value in attrs.items())
    return (
        f'<text x="{x:.1f}" y="{y:.1f}" font-size="{_FONT_SIZE}" '
        f'text-anchor="middle" dominant-baseline="middle"{extra}>{escape(content)}</text>'
    )


def _render_svg(
    hap_labels: Sequence[RegionLabel],
    single_counts: Sequence[float],
    pair_counts: Mapping[tuple[int, int], float],
    nodes: Sequence[int],
) -> str:
    layers = _layers(nodes, list(pair_counts))
    positions: dict[int, tuple[float, float]] = {}
    rows: dict[int, int] = {}
    for node in nodes:
        layer = layers[node]
        row = rows.get(layer, 0)
        rows[layer] = row + 1
        x = _MARGIN + layer * (NODE_WIDTH + _COLUMN_GAP)
        y = _MARGIN + row * (NODE_HEIGHT + _ROW_GAP)
        positions[node] = (x, y)

    num_columns = max(layers.values(), default=0) + 1
    num_rows = max(rows.values(), default=1)
    width = 2 * _MARGIN + num_columns * NODE_WIDTH + (num_columns - 1) * _COLUMN_GAP
    height = 2 * _MARGIN + num_rows * NODE_HEIGHT + (num_rows - 1) * _ROW_GAP

    defs: list[str] = []
    edge_parts: list[str] = []
    min_edge = min(pair_counts.values(), default=0.0)
    max_edge = max(max(pair_counts.values(), default=0.0), min_edge + 1.0)
    for edge_id, ((source, target), frequency) in enumerate(pair_counts.items()):
        style = edge_style(frequency, min_edge, max_edge)
        marker = f"arrow{edge_id}"
        defs.append(
            f'<marker id="{marker}" viewBox="0 0 10 10" refX="10" refY="5" '
            f'markerWidth="6" markerHeight="6" orient="auto-start-reverse">'
            f'<path d="M 0 0 L 10 5 L 0 10 z" fill="{style.rgb_hex}" '
            f'fill-opacity="{style.opacity:.3f}"/></marker>'
        )
        sx, sy = positions[source]
        tx, ty = positions[target]
        if source == target:
            x0, y0 = sx + NODE_WIDTH * 0.75, sy
            x1, y1 = sx + NODE_WIDTH * 0.25, sy
            path = f"M {x0:.1f} {y0:.1f} C {x0:.1f} {y0 - 60:.1f} {x1:.1f} {y1 - 60:.1f} {x1:.1f} {y1:.1f}"
            label_x, label_y = sx + NODE_WIDTH / 2, sy - 50
        else:
            x0, y0 = sx + NODE_WIDTH, sy + NODE_HEIGHT / 2
            x1, y1 = tx, ty + NODE_HEIGHT / 2
            path = f"M {x0:.1f} {y0:.1f} L {x1:.1f} {y1:.1f}"
            label_x, label_y = (x0 + x1) / 2, (y0 + y1) / 2 - 10
        edge_parts.append(
            f'<path d="{path}" fill="none" stroke="{style.rgb_hex}" '
            f'stroke-opacity="{style.opacity:.3f}" stroke-width="{style.width}" '
            f'marker-end="url(#{marker})"/>'
        )
        edge_parts.append(
            f'<rect x="{label_x - 25:.1f}" y="{label_y - 10:.1f}" width="50" height="20" fill="white"/>'
        )
        edge_parts.append(_text(label_x, label_y, f"{frequency:.2f}"))

    node_parts: list[str] = []
    cell_height = NODE_HEIGHT / 3
    for node in nodes:
        x, y = positions[node]
        cells = (str(node), hap_labels[node].full_allele(), f"{single_counts[node]:.2f}")
        node_parts.append(
            f'<rect x="{x:.1f}" y="{y:.1f}" width="{NODE_WIDTH:.1f}" '
            f'height="{NODE_HEIGHT:.1f}" fill="white" stroke="black"/>'
        )
        for row, content in enumerate(cells):
            top = y + row * cell_height
            if row:
                node_parts.append(
                    f'<line x1="{x:.1f}" y1="{top:.1f}" x2="{x + NODE_WIDTH:.1f}" '
                    f'y2="{top:.1f}" stroke="black"/>'
                )
            node_parts.append(_text(x + NODE_WIDTH / 2, top + cell_height / 2, content))

    body = "\n".join(
        [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width:.0f}" height="{height:.0f}" '
            f'viewBox="0 0 {width:.0f} {height:.0f}">',
            "<defs>",
            *defs,
            "</defs>",
            *edge_parts,
            *node_parts,
            "</svg>",
        ]
    )
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"


def generate_debug_graph(
    hap_labels: Sequence[RegionLabel],
    chain_frequency: Mapping[Sequence[int], float],
    filename: str | os.PathLike[str],
) -> None:
    """Draw the labels as nodes and observed chain links as weighted edges, saved as SVG.

    Only allowed labels become nodes; an edge touching any other label raises ValueError.
    """
    single_counts, pair_counts = count_chain_usage(len(hap_labels), chain_frequency)
    nodes = [index for index, label in enumerate(hap_labels) if label.is_allowed_label()]
    allowed = set(nodes)
    for source, target in pair_counts:
        for index in (source, target):
            if index not in allowed:
                raise ValueError(
                    f"edge ({source}, {target}) uses label {hap_labels[index]} "
                    "that cannot be part of a chain"
                )
    svg = _render_svg(hap_labels, single_counts, pair_counts, nodes)
    with open(filename, "w", encoding="utf-8") as handle:
        handle.write(svg)