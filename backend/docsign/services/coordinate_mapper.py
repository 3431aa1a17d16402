"""
Placement of a signature on a PDF page.

Placements are expressed in percent of the page (x from the left edge, y down
from the top edge, width as a share of the page width) and mapped here to a
rectangle in PDF points with a bottom-left origin.
"""

import math
from dataclasses import dataclass
from typing import Optional

from docsign.config import settings
from docsign.utils.exceptions import InputValidationError

# Signatures are always drawn in a 16:9 box, whatever the captured image ratio.
ASPECT_WIDTH, ASPECT_HEIGHT = 16, 9

# Space kept free on the right edge when a placement would overflow the page.
RIGHT_EDGE_MARGIN = 45


@dataclass(frozen=True)
class PlacementSpec:
    """Where to put a signature: percentages of the page plus an optional 1-based page."""
    x: float
    y: float
    width_percent: float
    target_page: Optional[int] = None  # None or out of range -> last page

    def __post_init__(self):
        for name in ("x", "y", "width_percent"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise InputValidationError(f"{name} must be a number", field=name, details={"value": repr(value)})
            if value < 0 or value > 100:
                raise InputValidationError(
                    f"{name} must be between 0 and 100",
                    field=name,
                    details={"value": value},
                )
        if self.target_page is not None and (isinstance(self.target_page, bool) or not isinstance(self.target_page, int)):
            raise InputValidationError("target_page must be an integer", field="target_page")

    @classmethod
    def default(cls) -> "PlacementSpec":
        return cls(
            x=settings.default_signature_x,
            y=settings.default_signature_y,
            width_percent=settings.default_signature_width_percent,
        )

    def resolve_page_index(self, page_count: int) -> int:
        """0-based index of the page this placement lands on."""
        if self.target_page is not None and 1 <= self.target_page <= page_count:
            return self.target_page - 1
        return page_count - 1


@dataclass(frozen=True)
class PlacementRect:
    """Rectangle in PDF points, origin at the bottom-left of the page."""
    left: float
    bottom: float
    width: float
    height: float


def map_placement(page_width: float, page_height: float, placement: PlacementSpec) -> PlacementRect:
    """
    Convert a percentage placement into page coordinates.

    The width shrinks to the room left before the right edge (minus
    RIGHT_EDGE_MARGIN) when x would push the box past the page. The height
    always follows the 16:9 ratio. Nothing is clamped: off-page or
    negative results are returned as computed.
    """
    x, y, width_percent = placement.x, placement.y, placement.width_percent

    left = page_width * x / 100

    if x > 100 - width_percent:
        available_width = page_width - left
        width = available_width - RIGHT_EDGE_MARGIN
    else:
        width = page_width * width_percent / 100

    height = width * ASPECT_HEIGHT / ASPECT_WIDTH
    bottom = page_height - height - page_height * y / 100

    return PlacementRect(left=left, bottom=bottom, width=width, height=height)
