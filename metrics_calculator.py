"""
Metrics Calculator.

Derives aggregate metrics for a candidate layout and the per-panel
estimates (shading, maintenance access) that feed them.

CRITICAL PRINCIPLES:
- Deterministic: the same panel list always yields the same metrics
- No randomness anywhere in this module
- Degenerate input (no panels, zero ceiling) yields zeros, never NaN

THIS IS A SCREENING MODEL, NOT A PRODUCTION SIMULATION.
"""

import math
import statistics
from typing import Sequence

from shapely.geometry import Polygon

from data_models import (
    Metrics, PanelPlacement, PanelTemplate, PlacementConstraints,
    RoofObstacle, Surface
)
from geometry import edge_clearance, center_distance


# kWh per rated W per year (fixed performance ratio)
PERFORMANCE_RATIO = 1.4

# Installed cost, USD per rated W
COST_PER_WATT = 3.5

# Orientation spread (RMS deviation, degrees) at which uniformity reaches zero
ORIENTATION_SPREAD_LIMIT_DEG = 15.0
AZIMUTH_UNIFORMITY_SHARE = 0.7

# Shading model
ORIENTATION_LOSS_WEIGHT = 0.1
OBSTACLE_SHADE_WEIGHT = 0.3
SHADOW_REACH_FACTOR = 2.0  # shadow reach = factor × obstacle height


def compute_metrics(panels: Sequence[PanelPlacement], max_panel_count: int) -> Metrics:
    """
    Compute aggregate metrics for a panel list.

    The compliance score is 100 here; it is only lowered once the
    compliance validator has inspected the layout.

    Args:
        panels: Placed panels
        max_panel_count: Theoretical maximum panel count from the irradiance model

    Returns:
        Metrics
    """
    total_panels = len(panels)
    total_wattage = sum(panel.template.specifications.wattage for panel in panels)

    if max_panel_count > 0:
        roof_coverage = total_panels / max_panel_count * 100.0
    else:
        roof_coverage = 0.0

    return Metrics(
        total_panels=total_panels,
        total_wattage=total_wattage,
        estimated_production=total_wattage * PERFORMANCE_RATIO,
        roof_coverage=roof_coverage,
        aesthetic_score=aesthetic_score(panels),
        maintenance_score=maintenance_score(panels),
        compliance_score=100.0,
        cost_estimate=total_wattage * COST_PER_WATT,
    )


def _uniformity(spread: float) -> float:
    return max(0.0, 1.0 - spread / ORIENTATION_SPREAD_LIMIT_DEG)


def _circular_spread(azimuths: Sequence[float]) -> float:
    """RMS angular distance from the circular mean, degrees. 359° and 1° are 2° apart."""
    if len(azimuths) < 2:
        return 0.0
    radians = [math.radians(azimuth) for azimuth in azimuths]
    mean = math.degrees(math.atan2(
        sum(math.sin(r) for r in radians),
        sum(math.cos(r) for r in radians),
    ))
    deltas = [_angle_delta(azimuth, mean) for azimuth in azimuths]
    return math.sqrt(sum(delta * delta for delta in deltas) / len(deltas))


def _linear_spread(values: Sequence[float]) -> float:
    if len(values) < 2:
        return 0.0
    return statistics.pstdev(values)


def aesthetic_score(panels: Sequence[PanelPlacement]) -> float:
    """Orientation uniformity, 0-100. Azimuth dominates, tilt contributes the rest."""
    if not panels:
        return 0.0

    azimuth_uniformity = _uniformity(_circular_spread([panel.azimuth for panel in panels]))
    tilt_uniformity = _uniformity(_linear_spread([panel.tilt for panel in panels]))

    return 100.0 * (
        AZIMUTH_UNIFORMITY_SHARE * azimuth_uniformity
        + (1.0 - AZIMUTH_UNIFORMITY_SHARE) * tilt_uniformity
    )


def maintenance_score(panels: Sequence[PanelPlacement]) -> float:
    """Share of panels reachable for service, 0-100."""
    if not panels:
        return 0.0
    accessible = sum(1 for panel in panels if panel.maintenance_access)
    return 100.0 * accessible / len(panels)


# ============================================================================
# PER-PANEL ESTIMATES
# ============================================================================

def _angle_delta(a: float, b: float) -> float:
    """Smallest absolute difference between two angles, degrees."""
    delta = abs(a - b) % 360.0
    return min(delta, 360.0 - delta)


def estimate_shading_factor(
    panel: PanelPlacement,
    surface: Surface,
    obstacles: Sequence[RoofObstacle] = (),
) -> float:
    """
    Estimate the shaded fraction of a panel, 0 (clear) to 1 (fully shaded).

    Two contributions:
    - orientation loss: azimuth/tilt turned away from the roof plane
    - obstacle shade: linear falloff within SHADOW_REACH_FACTOR × obstacle height
    """
    azimuth_loss = min(1.0, _angle_delta(panel.azimuth, surface.azimuth) / 180.0)
    tilt_loss = min(1.0, abs(panel.tilt - surface.tilt) / 90.0)
    shade = ORIENTATION_LOSS_WEIGHT * (azimuth_loss + tilt_loss)

    for obstacle in obstacles:
        if obstacle.obstacle_height <= 0:
            continue
        reach = SHADOW_REACH_FACTOR * obstacle.obstacle_height
        distance = center_distance(panel, obstacle)
        if distance < reach:
            shade += OBSTACLE_SHADE_WEIGHT * (1.0 - distance / reach)

    return max(0.0, min(1.0, shade))


def has_maintenance_access(
    footprint: Polygon,
    roof: Polygon,
    template: PanelTemplate,
    constraints: PlacementConstraints,
) -> bool:
    """
    A panel is serviceable when it is within reach of an edge pathway.

    Reach = service clearance + two panel heights (one neighbour can be
    worked across from the pathway). Panels hanging over the roof edge
    have no footing for service and are never accessible.
    """
    if not roof.contains(footprint):
        return False
    reach = constraints.service_clearance + 2.0 * template.dimensions.height
    return edge_clearance(footprint, roof) <= reach
