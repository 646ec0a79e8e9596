"""
Unit Tests for Scoring.

Every score lands in [0, 100]; violations only ever lower it.
"""

import pytest

from data_models import Metrics, Violation, ViolationCategory, Severity, ObjectiveWeights
from scoring import (
    clamp_score, compliance_score, production_score, cost_score,
    objective_score, final_score
)


DEFAULT_WEIGHTS = ObjectiveWeights(production=0.4, cost=0.3, aesthetics=0.2, maintenance=0.1)


def make_metrics(production=15000.0, cost=0.0, aesthetic=100.0, maintenance=100.0):
    return Metrics(
        total_panels=10,
        total_wattage=4000.0,
        estimated_production=production,
        roof_coverage=25.0,
        aesthetic_score=aesthetic,
        maintenance_score=maintenance,
        compliance_score=100.0,
        cost_estimate=cost,
    )


def make_violation(severity):
    return Violation(
        category=ViolationCategory.REGULATORY,
        severity=severity,
        description="test finding",
        affected_panels=("panel_0",),
        suggestion="none",
    )


class TestClampScore:

    def test_range(self):
        assert clamp_score(150.0) == 100.0
        assert clamp_score(-5.0) == 0.0
        assert clamp_score(42.5) == 42.5

    def test_non_finite_maps_to_zero(self):
        assert clamp_score(float("nan")) == 0.0
        assert clamp_score(float("inf")) == 0.0


class TestComplianceScore:

    def test_no_violations(self):
        assert compliance_score([]) == 100.0

    def test_penalties(self):
        violations = [
            make_violation(Severity.ERROR),
            make_violation(Severity.WARNING),
            make_violation(Severity.INFO),
        ]
        assert compliance_score(violations) == 75.0, "Error -20, warning -5, info free"

    def test_floored_at_zero(self):
        assert compliance_score([make_violation(Severity.ERROR)] * 6) == 0.0


class TestObjectiveScore:

    def test_sub_scores(self):
        assert production_score(make_metrics(production=7500.0)) == pytest.approx(50.0)
        assert production_score(make_metrics(production=30000.0)) == 100.0
        assert cost_score(make_metrics(cost=42000.0)) == pytest.approx(58.0)
        assert cost_score(make_metrics(cost=250000.0)) == 0.0

    def test_perfect_metrics(self):
        assert objective_score(make_metrics(), DEFAULT_WEIGHTS) == 100.0

    def test_weighted_sum(self):
        metrics = make_metrics(production=16800.0, cost=42000.0)
        assert objective_score(metrics, DEFAULT_WEIGHTS) == pytest.approx(87.4)

    def test_weights_are_relative(self):
        metrics = make_metrics(production=7500.0, cost=42000.0, aesthetic=80.0, maintenance=30.0)
        doubled = ObjectiveWeights(production=0.8, cost=0.6, aesthetics=0.4, maintenance=0.2)
        assert objective_score(metrics, doubled) == pytest.approx(objective_score(metrics, DEFAULT_WEIGHTS))

    def test_zero_weights_score_zero(self):
        zero = ObjectiveWeights(production=0, cost=0, aesthetics=0, maintenance=0)
        assert objective_score(make_metrics(), zero) == 0.0

    def test_single_objective(self):
        production_only = ObjectiveWeights(production=1, cost=0, aesthetics=0, maintenance=0)
        assert objective_score(make_metrics(production=3000.0), production_only) == pytest.approx(20.0)


class TestFinalScore:

    def test_compliant_layout_keeps_objective(self):
        assert final_score(make_metrics(), [], DEFAULT_WEIGHTS) == 100.0

    def test_compliance_blended(self):
        metrics = make_metrics(production=7500.0, cost=50000.0, aesthetic=50.0, maintenance=50.0)
        # objective 50, compliance 80
        score = final_score(metrics, [make_violation(Severity.ERROR)], DEFAULT_WEIGHTS)
        assert score == pytest.approx(0.7 * 50.0 + 0.3 * 80.0)

    def test_violations_only_lower_score(self):
        metrics = make_metrics(production=9000.0)
        clean = final_score(metrics, [], DEFAULT_WEIGHTS)
        dirty = final_score(metrics, [make_violation(Severity.WARNING)], DEFAULT_WEIGHTS)
        assert dirty < clean

    def test_always_in_range(self):
        metrics = make_metrics(production=-100.0, cost=1e9, aesthetic=-3.0, maintenance=500.0)
        score = final_score(metrics, [make_violation(Severity.ERROR)] * 10, DEFAULT_WEIGHTS)
        assert 0.0 <= score <= 100.0
