"""
Compliance Validator.

Runs every compliance check against a layout and collects the violations.
Violations never block a layout; they only lower its compliance score.
"""

import logging
from typing import List, Optional, Sequence

from compliance_engine.base import ComplianceCheck, ValidationContext
from compliance_engine.setback import SetbackCheck
from compliance_engine.structural import StructuralLoadCheck
from compliance_engine.maintenance import MaintenanceAccessCheck
from compliance_engine.aesthetic import AestheticUniformityCheck
from compliance_engine.mounting import MountingTiltCheck
from compliance_engine.spacing import PanelSpacingCheck
from compliance_engine.obstacle_clearance import ObstacleClearanceCheck
from data_models import (
    PlacementSolution, PlacementConstraints, Surface, RoofObstacle, Violation
)

logger = logging.getLogger(__name__)


def default_checks() -> List[ComplianceCheck]:
    """Checks run by default, in reporting order."""
    return [
        SetbackCheck(),
        StructuralLoadCheck(),
        MaintenanceAccessCheck(),
        AestheticUniformityCheck(),
        MountingTiltCheck(),
        PanelSpacingCheck(),
        ObstacleClearanceCheck(),
    ]


class ComplianceValidator:
    """
    Validates layouts for one set of surfaces and constraints.

    The check list is extensible; each check is independent of the others.
    """

    def __init__(
        self,
        surfaces: Sequence[Surface],
        constraints: PlacementConstraints,
        obstacles: Sequence[RoofObstacle] = (),
        checks: Optional[Sequence[ComplianceCheck]] = None,
    ):
        self.context = ValidationContext(surfaces, constraints, obstacles)
        self.checks = list(checks) if checks is not None else default_checks()

    def validate(self, solution: PlacementSolution) -> List[Violation]:
        """
        Collect violations from every check.

        Args:
            solution: Layout to inspect

        Returns:
            All violations, grouped by check in reporting order
        """
        violations: List[Violation] = []
        for check in self.checks:
            found = check.check(solution, self.context)
            if found:
                logger.debug(f"{check.check_name}: {len(found)} violation(s) on {solution.id}")
            violations.extend(found)
        return violations


def validate_solution(
    solution: PlacementSolution,
    constraints: PlacementConstraints,
    surfaces: Sequence[Surface],
    obstacles: Sequence[RoofObstacle] = (),
) -> List[Violation]:
    """One-shot validation with the default checks."""
    return ComplianceValidator(surfaces, constraints, obstacles).validate(solution)
