"""Collect coordinate-bearing nodes from a parsed track document."""

import logging
import math
import re
from collections.abc import Iterator
from dataclasses import dataclass

from gpx_altitude.exceptions import NoTrackpointsError
from gpx_altitude.markup.tree import Element, MarkupNode, MarkupTree, RepeatedGroup

logger = logging.getLogger(__name__)

_DECIMAL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def altitude_key(lat_token: str, lon_token: str) -> str:
    """Key altitudes by the exact source tokens, not their numeric values."""
    return f"{lat_token}|{lon_token}"


@dataclass(frozen=True, slots=True)
class TrackpointRef:
    """Handle to a coordinate node plus its original and parsed coordinates."""

    handle: int
    lat_token: str
    lon_token: str
    lat: float
    lon: float

    @property
    def key(self) -> str:
        return altitude_key(self.lat_token, self.lon_token)


def _parse_coordinate(token: str) -> float | None:
    token = token.strip()
    if not _DECIMAL.fullmatch(token):
        return None
    value = float(token)
    return value if math.isfinite(value) else None


def _walk(node: MarkupNode) -> Iterator[Element]:
    if isinstance(node, RepeatedGroup):
        for item in node.items:
            yield from _walk(item)
    elif isinstance(node, Element):
        yield node
        for _, child in node.children():
            yield from _walk(child)


def collect(tree: MarkupTree) -> list[TrackpointRef]:
    """Return every node with numeric lat/lon fields, in document order.

    Nodes whose lat or lon is missing or not a finite decimal are skipped.

    Raises:
        NoTrackpointsError: If no node qualifies.
    """
    points: list[TrackpointRef] = []
    skipped = 0
    for element in _walk(tree.root):
        lat_token = element.scalar("lat")
        lon_token = element.scalar("lon")
        if lat_token is None or lon_token is None:
            continue
        lat = _parse_coordinate(lat_token)
        lon = _parse_coordinate(lon_token)
        if lat is None or lon is None:
            skipped += 1
            continue
        points.append(TrackpointRef(element.handle, lat_token, lon_token, lat, lon))

    if skipped:
        logger.warning("Skipped malformed coordinate nodes", extra={"skipped": skipped})
    if not points:
        raise NoTrackpointsError()
    logger.info("Collected trackpoints", extra={"point_count": len(points)})
    return points
