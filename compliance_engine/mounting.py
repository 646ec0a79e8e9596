"""
Mounting Tilt Check.

Flags panels tilted beyond the roof's maximum tilt or outside the range
their mounting system supports.
"""

from typing import List

from compliance_engine.base import ComplianceCheck, ValidationContext
from data_models import PlacementSolution, Violation, ViolationCategory, Severity


class MountingTiltCheck(ComplianceCheck):
    """Tilt limits from constraints and the template's mounting spec."""

    def __init__(self):
        super().__init__("Mounting tilt")

    def check(self, solution: PlacementSolution, context: ValidationContext) -> List[Violation]:
        max_tilt = context.constraints.max_tilt_angle
        offending = []

        for panel in solution.panels:
            mounting = panel.template.mounting
            if panel.tilt > max_tilt or not (mounting.min_tilt <= panel.tilt <= mounting.max_tilt):
                offending.append(panel.id)

        if not offending:
            return []

        return [Violation(
            category=ViolationCategory.STRUCTURAL,
            severity=Severity.WARNING,
            description=(
                f"{len(offending)} panels exceed the allowed tilt "
                f"(roof limit {max_tilt:.0f}° or mounting range)"
            ),
            affected_panels=tuple(offending),
            suggestion="Reduce tilt or select a mounting system rated for the angle",
        )]
