"""
Base Compliance Check Abstract Class.

This defines the interface that all compliance checks must implement.
A compliance check is responsible ONLY for finding violations - no scoring,
no optimization, no layout changes.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence

from shapely.geometry import Polygon

from data_models import (
    PlacementSolution, PlacementConstraints, Surface, RoofObstacle, Violation
)
from geometry import surface_polygon


class ValidationContext:
    """
    Everything a check needs besides the layout itself.

    Roof polygons are built once here and shared by all checks of a run.
    """

    def __init__(
        self,
        surfaces: Sequence[Surface],
        constraints: PlacementConstraints,
        obstacles: Sequence[RoofObstacle] = (),
    ):
        self.constraints = constraints
        self.obstacles = list(obstacles)
        self.surfaces: Dict[str, Surface] = {surface.id: surface for surface in surfaces}
        self.roof_polygons: Dict[str, Polygon] = {
            surface.id: surface_polygon(surface) for surface in surfaces
        }


class ComplianceCheck(ABC):
    """
    Abstract base class for compliance checks.

    RESPONSIBILITIES:
    - Inspect a layout against the resolved constraints
    - Report violations as data

    NOT RESPONSIBLE FOR:
    - Scoring
    - Rejecting layouts
    - Fixing layouts
    """

    def __init__(self, check_name: str):
        """
        Initialize compliance check.

        Args:
            check_name: Human-readable name of the check
        """
        self.check_name = check_name

    @abstractmethod
    def check(self, solution: PlacementSolution, context: ValidationContext) -> List[Violation]:
        """
        Inspect a layout.

        Args:
            solution: Layout to inspect
            context: Surfaces, constraints and obstacles for the run

        Returns:
            Violations found (empty if compliant)

        Note:
            This method is deterministic and has no side effects.
            The result does not depend on the order checks are run in.
        """
        pass
