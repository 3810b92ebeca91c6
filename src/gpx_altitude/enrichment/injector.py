"""Write looked-up altitudes back into the markup tree."""

import logging
from collections.abc import Sequence
from enum import Enum

from gpx_altitude.enrichment.collector import TrackpointRef
from gpx_altitude.markup.tree import MarkupTree, Scalar

logger = logging.getLogger(__name__)

ALTITUDE_ATTRIBUTE = "alt"
ELEVATION_ELEMENT = "ele"


class InjectionMode(str, Enum):
    """Where an altitude is stored on a trackpoint node."""

    ATTRIBUTE = "attribute"
    ELEMENT = "element"

    @classmethod
    def _missing_(cls, value: object) -> "InjectionMode | None":
        aliases = {"attr": cls.ATTRIBUTE, "ele": cls.ELEMENT}
        aliases.update({member.value: member for member in cls})
        if isinstance(value, str):
            return aliases.get(value.lower())
        return None


def format_altitude(altitude: float) -> str:
    """Render an altitude without a trailing ``.0``: 123.0 -> '123', 123.4 -> '123.4'."""
    text = f"{altitude:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return "0" if text == "-0" else text


def inject(
    tree: MarkupTree,
    points: Sequence[TrackpointRef],
    altitudes: Sequence[float | None],
    mode: InjectionMode,
) -> int:
    """Set altitudes on the nodes behind ``points``; return how many were updated.

    Altitudes are matched by the points' original lat/lon tokens. Existing
    values are overwritten, so repeated runs give the same tree. A point
    whose altitude is None is left untouched.
    """
    by_key: dict[str, float | None] = {
        point.key: altitude for point, altitude in zip(points, altitudes, strict=True)
    }

    updated = 0
    for point in points:
        if point.key not in by_key:
            continue
        altitude = by_key[point.key]
        if altitude is None:
            continue
        element = tree.element(point.handle)
        if mode is InjectionMode.ATTRIBUTE:
            element.set_attribute(ALTITUDE_ATTRIBUTE, format_altitude(altitude))
        else:
            element.set_child(ELEVATION_ELEMENT, Scalar(format_altitude(altitude)))
        updated += 1

    logger.info("Injected altitudes", extra={"updated": updated, "mode": mode.value})
    return updated
