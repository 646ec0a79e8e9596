"""
Fire Setback Check.

Panels must keep the fire-code setback (and, when pathways are required,
the pathway width) from the roof edge. Every offending panel is its own
error-severity regulatory violation.
"""

from typing import List

from compliance_engine.base import ComplianceCheck, ValidationContext
from constraint_resolver import required_edge_setback
from data_models import PlacementSolution, Violation, ViolationCategory, Severity
from geometry import edge_clearance, panel_footprint


class SetbackCheck(ComplianceCheck):
    """Edge setback check."""

    def __init__(self):
        super().__init__("Fire setback")

    def check(self, solution: PlacementSolution, context: ValidationContext) -> List[Violation]:
        violations = []
        code_setback = required_edge_setback(context.constraints)

        for panel in solution.panels:
            roof = context.roof_polygons.get(panel.surface_id)
            if roof is None:
                violations.append(Violation(
                    category=ViolationCategory.REGULATORY,
                    severity=Severity.ERROR,
                    description=f"Panel {panel.id} references unknown surface '{panel.surface_id}'",
                    affected_panels=(panel.id,),
                    suggestion="Place the panel on one of the analysed roof surfaces",
                ))
                continue

            required = max(code_setback, panel.template.mounting.setback_required)
            clearance = edge_clearance(panel_footprint(panel), roof)

            if clearance < required:
                violations.append(Violation(
                    category=ViolationCategory.REGULATORY,
                    severity=Severity.ERROR,
                    description=(
                        f"Panel {panel.id} violates the fire setback requirement: "
                        f"{clearance:.2f} m from roof edge, {required:.2f} m required"
                    ),
                    affected_panels=(panel.id,),
                    suggestion="Move panel away from roof edge or use rapid shutdown device",
                ))

        return violations
