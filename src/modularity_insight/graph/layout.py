"""Best-effort recovery of node display coordinates from a dependency diagram.

The diagram is a Graphviz-shaped SVG: the first ``<g>`` under ``<svg>``
holds one ``<g>`` per node with a ``<title>`` (the module id) and a
``<text x=".." y="..">`` label. Anything else in the document is ignored.

Layout is cosmetic. :func:`resolve_layout` never raises; on any failure it
returns ``None`` and the graph is built without coordinates.
"""

from typing import Callable, Optional, Union
from xml.etree.ElementTree import Element

from defusedxml import ElementTree
from defusedxml.common import DefusedXmlException

from ..exceptions import LayoutParseError
from ..logging_config import get_logger
from .models import NodePosition

logger = get_logger(__name__)

# Narrow interface the orchestrator depends on: diagram bytes -> positions or None
LayoutResolver = Callable[[Optional[bytes]], Optional[list[NodePosition]]]


def _local_name(tag: str) -> str:
    """Strip an XML namespace: '{http://www.w3.org/2000/svg}g' -> 'g'."""
    return tag.rsplit("}", 1)[-1]


def _first_child(element: Element, name: str) -> Optional[Element]:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _parse_coordinate(value: Optional[str], axis: str, title: str) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except ValueError:
        raise LayoutParseError(f"non-numeric {axis}={value!r} for node {title!r}")


def parse_layout(diagram: Union[bytes, str]) -> list[NodePosition]:
    """Parse an SVG diagram into node positions.

    Raises:
        LayoutParseError: If the document is malformed or not shaped
            like a dependency diagram
    """
    try:
        root = ElementTree.fromstring(diagram)
    except (ElementTree.ParseError, DefusedXmlException) as e:
        raise LayoutParseError(f"malformed SVG: {e}")

    if _local_name(root.tag) != "svg":
        raise LayoutParseError(f"root element is <{_local_name(root.tag)}>, expected <svg>")

    graph_group = _first_child(root, "g")
    if graph_group is None:
        raise LayoutParseError("missing top-level <g> element")

    positions: list[NodePosition] = []
    for node in graph_group:
        if _local_name(node.tag) != "g":
            continue
        if node.get("class") not in (None, "node"):
            continue

        title_element = _first_child(node, "title")
        title = (title_element.text or "").strip() if title_element is not None else ""
        if not title:
            continue

        text_element = _first_child(node, "text")
        if text_element is None:
            continue

        x = _parse_coordinate(text_element.get("x"), "x", title)
        y = _parse_coordinate(text_element.get("y"), "y", title)
        positions.append(NodePosition(title=title, x=x, y=y))

    return positions


def resolve_layout(diagram: Optional[bytes]) -> Optional[list[NodePosition]]:
    """Recover node positions, or ``None`` when there is nothing usable."""
    if not diagram:
        return None

    try:
        return parse_layout(diagram)
    except LayoutParseError as e:
        logger.warning(f"Layout recovery skipped: {e}")
        return None
    except Exception as e:
        logger.warning(f"Layout recovery failed unexpectedly: {e}")
        return None
