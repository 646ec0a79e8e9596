"""
Geometry Utilities.

Pure functions over roof polygons: bounding boxes, point membership,
polygon area, and clearance distances used by the compliance checks.

Boundary convention for point_in_polygon: the even-odd ray cast treats the
left and bottom edges of an axis-aligned polygon as inside and the right and
top edges as outside (half-open intervals). A point on the right edge of a
square, e.g. (10, 5) for the square (0,0)-(10,10), is OUTSIDE; (0, 5) is
INSIDE. Adjacent grid cells therefore never claim the same edge twice.
"""

import math
from typing import Dict, List, Sequence, Tuple

from shapely.geometry import Point as ShapelyPoint, Polygon, box

from data_models import Point, Surface, RoofObstacle, PanelPlacement


class InvalidGeometryError(ValueError):
    """Raised when a surface cannot be used for placement."""

    def __init__(self, surface_id: str, reason: str):
        self.surface_id = surface_id
        self.reason = reason
        super().__init__(f"Invalid surface '{surface_id}': {reason}")


def bounding_box(polygon: Sequence[Point]) -> Dict[str, float]:
    """
    Compute the axis-aligned bounding box of a vertex list.

    Args:
        polygon: Non-empty sequence of vertices

    Returns:
        Dict with min_x, max_x, min_y, max_y
    """
    if not polygon:
        raise ValueError("Cannot compute bounding box of an empty polygon")

    xs = [vertex.x for vertex in polygon]
    ys = [vertex.y for vertex in polygon]

    return {
        "min_x": min(xs),
        "max_x": max(xs),
        "min_y": min(ys),
        "max_y": max(ys),
    }


def point_in_polygon(point: Point, polygon: Sequence[Point]) -> bool:
    """
    Even-odd ray casting test.

    See the module docstring for how boundary points are classified.
    """
    inside = False
    n = len(polygon)
    j = n - 1

    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y

        if (yi > point.y) != (yj > point.y):
            x_cross = (xj - xi) * (point.y - yi) / (yj - yi) + xi
            if point.x < x_cross:
                inside = not inside
        j = i

    return inside


def polygon_area(polygon: Sequence[Point]) -> float:
    """Unsigned shoelace area."""
    n = len(polygon)
    if n < 3:
        return 0.0

    twice_area = 0.0
    for i in range(n):
        a = polygon[i]
        b = polygon[(i + 1) % n]
        twice_area += a.x * b.y - b.x * a.y

    return abs(twice_area) / 2.0


def validate_surface(surface: Surface) -> None:
    """
    Fail fast on geometry that would produce NaN or meaningless scores.

    Raises:
        InvalidGeometryError: identifying the offending surface
    """
    if len(surface.vertices) < 3:
        raise InvalidGeometryError(
            surface.id,
            f"polygon needs at least 3 vertices, got {len(surface.vertices)}",
        )

    for vertex in surface.vertices:
        if not (math.isfinite(vertex.x) and math.isfinite(vertex.y)):
            raise InvalidGeometryError(surface.id, f"non-finite vertex ({vertex.x}, {vertex.y})")

    if not math.isfinite(surface.area) or surface.area <= 0:
        raise InvalidGeometryError(surface.id, f"area must be positive, got {surface.area}")

    if polygon_area(surface.vertices) <= 0:
        raise InvalidGeometryError(surface.id, "polygon encloses zero area")

    if not surface_polygon(surface).is_valid:
        raise InvalidGeometryError(surface.id, "polygon is self-intersecting")

    if not (math.isfinite(surface.azimuth) and math.isfinite(surface.tilt)):
        raise InvalidGeometryError(surface.id, "azimuth and tilt must be finite")


def validate_surfaces(surfaces: Sequence[Surface]) -> None:
    """Validate every surface; an empty list is itself invalid."""
    if not surfaces:
        raise InvalidGeometryError("<none>", "at least one roof surface is required")

    for surface in surfaces:
        validate_surface(surface)


def largest_surface(surfaces: Sequence[Surface]) -> Surface:
    """Pick the surface with the largest area (first one wins ties)."""
    best = surfaces[0]
    for surface in surfaces[1:]:
        if surface.area > best.area:
            best = surface
    return best


# ============================================================================
# CLEARANCE DISTANCES (shapely)
# ============================================================================

def surface_polygon(surface: Surface) -> Polygon:
    return Polygon([(vertex.x, vertex.y) for vertex in surface.vertices])


def panel_footprint(panel: PanelPlacement) -> Polygon:
    return box(*panel.footprint())


def obstacle_footprint(obstacle: RoofObstacle) -> Polygon:
    return box(
        obstacle.position.x,
        obstacle.position.y,
        obstacle.position.x + obstacle.width,
        obstacle.position.y + obstacle.height,
    )


def edge_clearance(footprint: Polygon, roof: Polygon) -> float:
    """
    Distance from a footprint to the roof edge.

    Returns 0.0 when the footprint is not fully inside the roof, so a panel
    hanging over the edge always reads as having no clearance.
    """
    if not roof.contains(footprint):
        return 0.0
    return roof.exterior.distance(footprint)


def center_distance(panel: PanelPlacement, obstacle: RoofObstacle) -> float:
    """Distance between a panel center and the nearest point of an obstacle footprint."""
    min_x, min_y, max_x, max_y = panel.footprint()
    center = ShapelyPoint((min_x + max_x) / 2.0, (min_y + max_y) / 2.0)
    return obstacle_footprint(obstacle).distance(center)


def close_pairs(footprints: List[Tuple[str, Polygon]], min_gap: float) -> List[Tuple[str, str]]:
    """
    Return id pairs whose footprints are closer than min_gap (overlaps included).

    Touching footprints (gap 0) count as too close whenever min_gap > 0.
    """
    pairs = []
    for i in range(len(footprints)):
        id_a, shape_a = footprints[i]
        for j in range(i + 1, len(footprints)):
            id_b, shape_b = footprints[j]
            if shape_a.intersection(shape_b).area > 0 or shape_a.distance(shape_b) < min_gap:
                pairs.append((id_a, id_b))
    return pairs
