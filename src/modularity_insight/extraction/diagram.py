"""Render a dependency diagram as a Graphviz-shaped SVG.

Modules sit on a circle in declaration order. Each node is a
``<g class="node">`` with a ``<title>`` and a ``<text>`` label at the
node's position, which is the shape the layout resolver reads back.
"""

from html import escape
from typing import Mapping, Optional, Sequence

import numpy as np

_MARGIN = 80.0
_MIN_RADIUS = 120.0
_RADIUS_PER_NODE = 18.0


def circular_layout(count: int) -> np.ndarray:
    """Return a (count, 2) array of x, y positions on a circle."""
    if count == 0:
        return np.zeros((0, 2))
    radius = max(_MIN_RADIUS, _RADIUS_PER_NODE * count / np.pi)
    center = radius + _MARGIN
    if count == 1:
        return np.array([[center, center]])
    angles = np.linspace(0.0, 2.0 * np.pi, count, endpoint=False) - np.pi / 2.0
    positions = np.column_stack((np.cos(angles), np.sin(angles))) * radius + center
    return np.round(positions, 2)


def render_dependency_svg(adjacency: Mapping[str, Optional[Sequence[str]]]) -> bytes:
    """Render ``{module: [deps...]}`` as SVG bytes (UTF-8)."""
    modules = list(adjacency)
    positions = circular_layout(len(modules))
    index = {module: i for i, module in enumerate(modules)}

    if modules:
        size = float(positions.max()) + _MARGIN
    else:
        size = 2 * _MARGIN

    lines = [
        '<?xml version="1.0" encoding="UTF-8" standalone="no"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size:.0f}pt" height="{size:.0f}pt" '
        f'viewBox="0 0 {size:.2f} {size:.2f}">',
        '<g id="graph0" class="graph">',
        "<title>dependencies</title>",
    ]

    edge_id = 0
    for module, deps in adjacency.items():
        x1, y1 = positions[index[module]]
        for dep in dict.fromkeys(deps or ()):
            if dep not in index:
                continue
            edge_id += 1
            x2, y2 = positions[index[dep]]
            lines.append(
                f'<g id="edge{edge_id}" class="edge"><title>{escape(module)}&#45;&gt;{escape(dep)}</title>'
                f'<line x1="{x1:.2f}" y1="{y1:.2f}" x2="{x2:.2f}" y2="{y2:.2f}" stroke="#757575"/></g>'
            )

    for i, module in enumerate(modules):
        x, y = positions[i]
        label = escape(module)
        lines.append(
            f'<g id="node{i + 1}" class="node"><title>{label}</title>'
            f'<circle cx="{x:.2f}" cy="{y:.2f}" r="4" fill="#c6c5fe"/>'
            f'<text x="{x:.2f}" y="{y:.2f}" text-anchor="middle" font-size="10">{label}</text></g>'
        )

    lines.append("</g>")
    lines.append("</svg>")
    return "\n".join(lines).encode("utf-8")
