"""
Panel Spacing Check.

Panels on the same surface must keep the minimum inter-panel gap.
Overlapping footprints are reported here as well.
"""

from collections import defaultdict
from typing import List

from compliance_engine.base import ComplianceCheck, ValidationContext
from data_models import PlacementSolution, Violation, ViolationCategory, Severity
from geometry import close_pairs, panel_footprint


class PanelSpacingCheck(ComplianceCheck):

    def __init__(self):
        super().__init__("Panel spacing")

    def check(self, solution: PlacementSolution, context: ValidationContext) -> List[Violation]:
        by_surface = defaultdict(list)
        for panel in solution.panels:
            by_surface[panel.surface_id].append((panel.id, panel_footprint(panel)))

        affected = set()
        for footprints in by_surface.values():
            for id_a, id_b in close_pairs(footprints, context.constraints.min_panel_spacing):
                affected.add(id_a)
                affected.add(id_b)

        if not affected:
            return []

        ordered = tuple(panel.id for panel in solution.panels if panel.id in affected)
        return [Violation(
            category=ViolationCategory.STRUCTURAL,
            severity=Severity.WARNING,
            description=(
                f"{len(ordered)} panels overlap or are closer than "
                f"{context.constraints.min_panel_spacing:.2f} m to a neighbour"
            ),
            affected_panels=ordered,
            suggestion="Re-space the array to respect racking clearances",
        )]
