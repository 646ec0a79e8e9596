"""
Fast Preview Module.

Non-iterative grid packing for instant feedback. Lays one template out on a
row/column grid over a single surface and tests each grid position against
the roof polygon only: no setback, structural or access checks, and no call
into the optimizer.

Deterministic: the same surface and template always give the same grid.
"""

import logging

from data_models import Surface, PanelTemplate, Point, PreviewCell, PreviewResult
from geometry import bounding_box, point_in_polygon, validate_surface

logger = logging.getLogger(__name__)


# Gap between grid cells, meters
PREVIEW_SPACING_M = 0.5
DEFAULT_PREVIEW_PANELS = 50


def preview_placement(
    surface: Surface,
    template: PanelTemplate,
    max_panels: int = DEFAULT_PREVIEW_PANELS,
    spacing: float = PREVIEW_SPACING_M,
) -> PreviewResult:
    """
    Grid-pack a template over a surface.

    Columns step by template width + spacing, rows by template height +
    spacing, starting at the bounding box's lower-left corner. A position is
    valid when it lies inside the roof polygon. Stepping stops once
    max_panels valid positions have been found.

    Args:
        surface: Roof surface
        template: Panel template to lay out
        max_panels: Cap on valid positions
        spacing: Gap between neighbouring panels, meters

    Returns:
        PreviewResult with every attempted position, the count that fit,
        and the covered share of the surface area (percent)

    Raises:
        InvalidGeometryError: Degenerate surface
    """
    validate_surface(surface)

    bounds = bounding_box(surface.vertices)
    panel_width = template.dimensions.width
    panel_height = template.dimensions.height
    step_x = panel_width + spacing
    step_y = panel_height + spacing

    cells = []
    total_fit = 0

    if step_x > 0 and step_y > 0:
        x = bounds["min_x"]
        while x < bounds["max_x"] - panel_width and total_fit < max_panels:
            y = bounds["min_y"]
            while y < bounds["max_y"] - panel_height and total_fit < max_panels:
                position = Point(x, y)
                valid = point_in_polygon(position, surface.vertices)
                cells.append(PreviewCell(position=position, valid=valid))
                if valid:
                    total_fit += 1
                y += step_y
            x += step_x

    coverage = total_fit * template.area / surface.area * 100.0

    logger.debug(
        f"Preview on {surface.id}: {total_fit}/{len(cells)} positions valid, "
        f"coverage {coverage:.1f}%"
    )

    return PreviewResult(panels=tuple(cells), total_fit=total_fit, coverage=coverage)
