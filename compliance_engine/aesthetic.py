"""
Aesthetic Uniformity Check.

Azimuths are compared in whole degrees.
"""

from typing import List

from compliance_engine.base import ComplianceCheck, ValidationContext
from data_models import PlacementSolution, Violation, ViolationCategory, Severity


MAX_DISTINCT_AZIMUTHS = 2


class AestheticUniformityCheck(ComplianceCheck):

    def __init__(self):
        super().__init__("Aesthetic uniformity")

    def check(self, solution: PlacementSolution, context: ValidationContext) -> List[Violation]:
        if not context.constraints.uniform_orientation:
            return []

        azimuths = {round(panel.azimuth) % 360 for panel in solution.panels}
        if len(azimuths) <= MAX_DISTINCT_AZIMUTHS:
            return []

        return [Violation(
            category=ViolationCategory.AESTHETIC,
            severity=Severity.INFO,
            description=(
                f"Mixed panel orientations ({len(azimuths)} distinct azimuths) "
                f"may affect visual uniformity"
            ),
            affected_panels=(),
            suggestion="Consider standardizing panel orientation for better aesthetics",
        )]
