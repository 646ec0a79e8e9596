"""
Unit Tests for the Compliance Engine.

Checks report violations as data: they never reject, score or modify a layout.
Test roof is a 10 m × 10 m square; the code setback is 3 ft (0.9144 m).
"""

from compliance_engine import (
    ComplianceValidator, SetbackCheck, StructuralLoadCheck, MaintenanceAccessCheck,
    AestheticUniformityCheck, MountingTiltCheck, PanelSpacingCheck,
    ObstacleClearanceCheck, ValidationContext, validate_solution
)
from constraint_resolver import resolve_constraints
from data_models import (
    Point, Surface, RoofObstacle, PanelPlacement, PlacementSolution,
    ViolationCategory, Severity
)
from metrics_calculator import compute_metrics
from panel_catalog import STANDARD_PANELS


TEMPLATE = STANDARD_PANELS[0]

SURFACE = Surface(
    id="south",
    vertices=(Point(0, 0), Point(0, 10), Point(10, 10), Point(10, 0)),
    area=100.0,
    azimuth=180.0,
    tilt=20.0,
)


def make_panel(index, x, y, azimuth=180.0, tilt=20.0, access=True, surface_id="south"):
    return PanelPlacement(
        id=f"panel_{index}",
        position=Point(x, y),
        azimuth=azimuth,
        tilt=tilt,
        template=TEMPLATE,
        surface_id=surface_id,
        shading_factor=0.0,
        maintenance_access=access,
    )


def make_solution(panels):
    return PlacementSolution(id="solution_1", panels=tuple(panels), metrics=compute_metrics(panels, 40))


def clean_panels():
    return [make_panel(0, 2.0, 2.0), make_panel(1, 2.0, 5.0)]


class TestSetbackCheck:

    def setup_method(self):
        self.check = SetbackCheck()
        self.context = ValidationContext([SURFACE], resolve_constraints())

    def test_interior_panels_pass(self):
        assert self.check.check(make_solution(clean_panels()), self.context) == []

    def test_one_error_per_offending_panel(self):
        panels = [make_panel(0, 0.5, 4.0), make_panel(1, 9.0, 4.0), make_panel(2, 4.0, 4.0)]
        violations = self.check.check(make_solution(panels), self.context)

        assert len(violations) == 2
        assert [v.affected_panels for v in violations] == [("panel_0",), ("panel_1",)]
        for violation in violations:
            assert violation.category is ViolationCategory.REGULATORY
            assert violation.severity is Severity.ERROR

    def test_larger_fire_setback_catches_more(self):
        context = ValidationContext([SURFACE], resolve_constraints({"setbacks": {"fire_setback_ft": 8.0}}))
        violations = self.check.check(make_solution(clean_panels()), context)
        assert len(violations) == 2, "2 m clearance is below an 8 ft (2.44 m) setback"

    def test_unknown_surface_is_an_error(self):
        panels = [make_panel(0, 4.0, 4.0, surface_id="garage")]
        violations = self.check.check(make_solution(panels), self.context)
        assert len(violations) == 1
        assert violations[0].severity is Severity.ERROR


class TestStructuralLoadCheck:

    def test_light_panels_pass(self):
        context = ValidationContext([SURFACE], resolve_constraints())
        assert StructuralLoadCheck().check(make_solution(clean_panels()), context) == []

    def test_overload_is_one_solution_wide_error(self):
        context = ValidationContext([SURFACE], resolve_constraints({"load_capacity": 5.0}))
        violations = StructuralLoadCheck().check(make_solution(clean_panels()), context)

        assert len(violations) == 1
        assert violations[0].category is ViolationCategory.STRUCTURAL
        assert violations[0].severity is Severity.ERROR
        assert violations[0].affected_panels == ("panel_0", "panel_1")

    def test_empty_layout_passes(self):
        context = ValidationContext([SURFACE], resolve_constraints({"load_capacity": 1.0}))
        assert StructuralLoadCheck().check(make_solution([]), context) == []


class TestMaintenanceAccessCheck:

    def test_inaccessible_panels_grouped_in_one_warning(self):
        panels = [make_panel(0, 2.0, 2.0, access=False), make_panel(1, 2.0, 5.0), make_panel(2, 6.0, 5.0, access=False)]
        context = ValidationContext([SURFACE], resolve_constraints())
        violations = MaintenanceAccessCheck().check(make_solution(panels), context)

        assert len(violations) == 1
        assert violations[0].severity is Severity.WARNING
        assert violations[0].category is ViolationCategory.MAINTENANCE
        assert violations[0].affected_panels == ("panel_0", "panel_2")

    def test_disabled_when_pathways_not_required(self):
        panels = [make_panel(0, 2.0, 2.0, access=False)]
        context = ValidationContext([SURFACE], resolve_constraints({"access_pathways": False}))
        assert MaintenanceAccessCheck().check(make_solution(panels), context) == []


class TestAestheticUniformityCheck:

    def setup_method(self):
        self.context = ValidationContext([SURFACE], resolve_constraints())

    def test_three_orientations_give_info(self):
        panels = [make_panel(i, 2.0, 1.5 + 2 * i, azimuth=az) for i, az in enumerate((170.0, 180.0, 190.0))]
        violations = AestheticUniformityCheck().check(make_solution(panels), self.context)

        assert len(violations) == 1
        assert violations[0].severity is Severity.INFO
        assert violations[0].category is ViolationCategory.AESTHETIC
        assert violations[0].affected_panels == ()

    def test_two_orientations_pass(self):
        panels = [make_panel(i, 2.0, 1.5 + 2 * i, azimuth=az) for i, az in enumerate((170.0, 180.0, 180.0))]
        assert AestheticUniformityCheck().check(make_solution(panels), self.context) == []

    def test_azimuths_compared_in_whole_degrees(self):
        panels = [make_panel(i, 2.0, 1.5 + 2 * i, azimuth=az) for i, az in enumerate((179.8, 180.2, 190.0))]
        assert AestheticUniformityCheck().check(make_solution(panels), self.context) == []

    def test_disabled_without_uniform_orientation(self):
        context = ValidationContext([SURFACE], resolve_constraints({"uniform_orientation": False}))
        panels = [make_panel(i, 2.0, 1.5 + 2 * i, azimuth=az) for i, az in enumerate((150.0, 180.0, 210.0))]
        assert AestheticUniformityCheck().check(make_solution(panels), context) == []


class TestSupplementaryChecks:

    def setup_method(self):
        self.context = ValidationContext([SURFACE], resolve_constraints())

    def test_tilt_beyond_roof_limit(self):
        panels = [make_panel(0, 2.0, 2.0, tilt=35.0), make_panel(1, 2.0, 5.0)]
        violations = MountingTiltCheck().check(make_solution(panels), self.context)

        assert len(violations) == 1
        assert violations[0].severity is Severity.WARNING
        assert violations[0].affected_panels == ("panel_0",)

    def test_panels_too_close(self):
        panels = [make_panel(0, 3.0, 3.0), make_panel(1, 5.02, 3.0), make_panel(2, 3.0, 6.0)]
        violations = PanelSpacingCheck().check(make_solution(panels), self.context)

        assert len(violations) == 1
        assert violations[0].affected_panels == ("panel_0", "panel_1")

    def test_overlapping_panels(self):
        panels = [make_panel(0, 3.0, 3.0), make_panel(1, 4.0, 3.5)]
        violations = PanelSpacingCheck().check(make_solution(panels), self.context)
        assert violations[0].affected_panels == ("panel_0", "panel_1")

    def test_obstacle_clearance(self):
        vent = RoofObstacle(id="vent", feature_type="vent", position=Point(5.5, 3.0), width=0.5, height=0.5)
        context = ValidationContext([SURFACE], resolve_constraints(), obstacles=[vent])
        panels = [make_panel(0, 3.0, 3.0), make_panel(1, 3.0, 7.0)]
        violations = ObstacleClearanceCheck().check(make_solution(panels), context)

        assert len(violations) == 1
        assert violations[0].category is ViolationCategory.REGULATORY
        assert violations[0].affected_panels == ("panel_0",)

    def test_no_obstacles_no_findings(self):
        assert ObstacleClearanceCheck().check(make_solution(clean_panels()), self.context) == []


class TestComplianceValidator:

    def test_compliant_layout_has_no_violations(self):
        validator = ComplianceValidator([SURFACE], resolve_constraints())
        assert validator.validate(make_solution(clean_panels())) == []

    def test_violations_collected_across_checks(self):
        panels = [make_panel(0, 0.2, 2.0, access=False, tilt=40.0), make_panel(1, 2.0, 5.0)]
        violations = validate_solution(make_solution(panels), resolve_constraints(), [SURFACE])

        categories = [(v.category, v.severity) for v in violations]
        assert (ViolationCategory.REGULATORY, Severity.ERROR) in categories
        assert (ViolationCategory.MAINTENANCE, Severity.WARNING) in categories
        assert (ViolationCategory.STRUCTURAL, Severity.WARNING) in categories

    def test_validation_does_not_modify_layout(self):
        solution = make_solution([make_panel(0, 0.2, 2.0, access=False)])
        before = solution.to_dict()
        ComplianceValidator([SURFACE], resolve_constraints()).validate(solution)
        assert solution.to_dict() == before

    def test_custom_check_list(self):
        validator = ComplianceValidator([SURFACE], resolve_constraints(), checks=[StructuralLoadCheck()])
        solution = make_solution([make_panel(0, 0.2, 2.0, access=False)])
        assert validator.validate(solution) == []

    def test_violation_serialization(self):
        violations = validate_solution(
            make_solution([make_panel(0, 0.2, 2.0)]), resolve_constraints(), [SURFACE]
        )
        data = violations[0].to_dict()
        assert data["type"] == "regulatory"
        assert data["severity"] == "error"
        assert data["affected_panels"] == ["panel_0"]
