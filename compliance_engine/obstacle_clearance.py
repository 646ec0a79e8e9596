"""
Obstacle Clearance Check.

Panels must stay clear of vents, chimneys and other roof features.
"""

from typing import List

from compliance_engine.base import ComplianceCheck, ValidationContext
from data_models import PlacementSolution, Violation, ViolationCategory, Severity
from geometry import obstacle_footprint, panel_footprint


class ObstacleClearanceCheck(ComplianceCheck):

    def __init__(self):
        super().__init__("Obstacle clearance")

    def check(self, solution: PlacementSolution, context: ValidationContext) -> List[Violation]:
        if not context.obstacles:
            return []

        clearance = context.constraints.min_clearance_to_obstacles
        obstacle_shapes = [obstacle_footprint(obstacle) for obstacle in context.obstacles]

        offending = []
        for panel in solution.panels:
            footprint = panel_footprint(panel)
            if any(footprint.distance(shape) < clearance for shape in obstacle_shapes):
                offending.append(panel.id)

        if not offending:
            return []

        return [Violation(
            category=ViolationCategory.REGULATORY,
            severity=Severity.WARNING,
            description=(
                f"{len(offending)} panels are within {clearance:.2f} m of a roof obstacle"
            ),
            affected_panels=tuple(offending),
            suggestion="Shift panels away from vents, chimneys and skylights",
        )]
