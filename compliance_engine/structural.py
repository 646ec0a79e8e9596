"""
Structural Load Check.

Compares the layout's mean panel dead load (mean mass / mean footprint)
with the roof's load capacity. One solution-wide error when exceeded.
"""

from typing import List

from compliance_engine.base import ComplianceCheck, ValidationContext
from data_models import PlacementSolution, Violation, ViolationCategory, Severity


class StructuralLoadCheck(ComplianceCheck):
    """Dead load vs. roof capacity."""

    def __init__(self):
        super().__init__("Structural load")

    def check(self, solution: PlacementSolution, context: ValidationContext) -> List[Violation]:
        panels = solution.panels
        if not panels:
            return []

        avg_weight = sum(panel.template.specifications.weight for panel in panels) / len(panels)
        avg_area = sum(panel.template.area for panel in panels) / len(panels)
        if avg_area <= 0:
            return []

        load_per_m2 = avg_weight / avg_area
        capacity = context.constraints.load_capacity

        if load_per_m2 <= capacity:
            return []

        return [Violation(
            category=ViolationCategory.STRUCTURAL,
            severity=Severity.ERROR,
            description=(
                f"Structural load limit exceeded: {load_per_m2:.1f} kg/m² > {capacity:.1f} kg/m²"
            ),
            affected_panels=tuple(panel.id for panel in panels),
            suggestion="Reduce panel count or use lighter panels",
        )]
