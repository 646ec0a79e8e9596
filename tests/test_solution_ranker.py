"""
Unit Tests for the Solution Ranker.
"""

import pytest

from compliance_engine import ComplianceValidator
from constraint_resolver import resolve_constraints, resolve_options
from data_models import Point, Surface, PanelPlacement, PlacementSolution, Severity
from metrics_calculator import compute_metrics
from panel_catalog import STANDARD_PANELS
from scoring import objective_score
from solution_ranker import rank_solutions, DEFAULT_TOP_N


SURFACE = Surface(
    id="south",
    vertices=(Point(0, 0), Point(0, 10), Point(10, 10), Point(10, 0)),
    area=100.0,
    azimuth=180.0,
    tilt=20.0,
)


def make_solution(solution_id, positions):
    panels = tuple(
        PanelPlacement(
            id=f"panel_{i}",
            position=Point(x, y),
            azimuth=180.0,
            tilt=20.0,
            template=STANDARD_PANELS[0],
            surface_id=SURFACE.id,
            shading_factor=0.0,
            maintenance_access=True,
        )
        for i, (x, y) in enumerate(positions)
    )
    return PlacementSolution(id=solution_id, panels=panels, metrics=compute_metrics(panels, 40))


class TestRankSolutions:

    def setup_method(self):
        self.validator = ComplianceValidator([SURFACE], resolve_constraints())
        self.weights = resolve_options().objectives

    def test_compliant_layout_ranks_first(self):
        clean = make_solution("clean", [(2.0, 2.0), (2.0, 5.0)])
        edge = make_solution("edge", [(0.1, 2.0), (2.0, 5.0)])

        ranked = rank_solutions([edge, clean], self.validator, self.weights)

        assert [solution.id for solution in ranked] == ["clean", "edge"]
        assert ranked[0].violations == ()
        assert ranked[1].violations[0].severity is Severity.ERROR

    def test_layouts_with_errors_still_returned(self):
        edge = make_solution("edge", [(0.1, 2.0)])
        ranked = rank_solutions([edge], self.validator, self.weights)
        assert len(ranked) == 1

    def test_compliance_folded_into_metrics_and_score(self):
        edge = make_solution("edge", [(0.1, 2.0), (2.0, 5.0)])
        ranked = rank_solutions([edge], self.validator, self.weights)
        solution = ranked[0]

        assert solution.metrics.compliance_score == 80.0
        objective = objective_score(solution.metrics, self.weights)
        assert solution.score == pytest.approx(round(0.7 * objective + 0.3 * 80.0, 1))

    def test_top_n(self):
        population = [make_solution(f"s{i}", [(2.0, 2.0 + 0.1 * i)]) for i in range(8)]

        assert len(rank_solutions(population, self.validator, self.weights)) == DEFAULT_TOP_N
        assert len(rank_solutions(population, self.validator, self.weights, top_n=2)) == 2
        assert rank_solutions(population, self.validator, self.weights, top_n=0) == []

    def test_inputs_not_modified(self):
        edge = make_solution("edge", [(0.1, 2.0)])
        rank_solutions([edge], self.validator, self.weights)
        assert edge.violations == ()
        assert edge.score == 0.0
