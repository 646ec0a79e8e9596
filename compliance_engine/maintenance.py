"""
Maintenance Access Check.

When access pathways are required, panels without maintenance access are
reported together as one warning.
"""

from typing import List

from compliance_engine.base import ComplianceCheck, ValidationContext
from data_models import PlacementSolution, Violation, ViolationCategory, Severity


class MaintenanceAccessCheck(ComplianceCheck):
    """Service access check."""

    def __init__(self):
        super().__init__("Maintenance access")

    def check(self, solution: PlacementSolution, context: ValidationContext) -> List[Violation]:
        if not context.constraints.access_pathways:
            return []

        inaccessible = [panel.id for panel in solution.panels if not panel.maintenance_access]
        if not inaccessible:
            return []

        return [Violation(
            category=ViolationCategory.MAINTENANCE,
            severity=Severity.WARNING,
            description=f"{len(inaccessible)} panels may have limited maintenance access",
            affected_panels=tuple(inaccessible),
            suggestion="Consider creating maintenance pathways or using different panel arrangement",
        )]
