"""
Scoring Module.

Turns metrics and violations into a single 0-100 score.

- objective_score: weighted production / cost / aesthetics / maintenance.
  Used as the cheap in-loop fitness during search.
- final_score: objective score blended with the compliance score as a
  fixed-weight fifth term. Used once violations are known.

Violations only depress the score; they never exclude a candidate.
"""

import math
from typing import Sequence

from data_models import Metrics, Violation, Severity, ObjectiveWeights


# Normalization references
REFERENCE_PRODUCTION_KWH = 15000.0  # "large residential system" yield
COST_SCORE_DIVISOR = 1000.0  # cost score = 100 - cost / divisor

# Compliance penalties
ERROR_PENALTY = 20.0
WARNING_PENALTY = 5.0

# Fixed weight of the compliance term in the final score
COMPLIANCE_WEIGHT = 0.3


def clamp_score(value: float) -> float:
    """Clamp to [0, 100]; NaN and infinities map to 0."""
    if not math.isfinite(value):
        return 0.0
    return max(0.0, min(100.0, value))


def compliance_score(violations: Sequence[Violation]) -> float:
    """100 - 20 per error - 5 per warning, floored at 0. Info findings are free."""
    errors = sum(1 for violation in violations if violation.severity is Severity.ERROR)
    warnings = sum(1 for violation in violations if violation.severity is Severity.WARNING)
    return max(0.0, 100.0 - ERROR_PENALTY * errors - WARNING_PENALTY * warnings)


def production_score(metrics: Metrics) -> float:
    return clamp_score(metrics.estimated_production / REFERENCE_PRODUCTION_KWH * 100.0)


def cost_score(metrics: Metrics) -> float:
    return clamp_score(100.0 - metrics.cost_estimate / COST_SCORE_DIVISOR)


def objective_score(metrics: Metrics, weights: ObjectiveWeights) -> float:
    """
    Weighted sum of the four normalized objectives.

    Weights are treated as relative; they are normalized here so callers may
    pass un-normalized values.
    """
    weights = weights.normalized()
    if weights.total <= 0:
        return 0.0

    weighted = (
        weights.production * production_score(metrics)
        + weights.cost * cost_score(metrics)
        + weights.aesthetics * clamp_score(metrics.aesthetic_score)
        + weights.maintenance * clamp_score(metrics.maintenance_score)
    )
    return round(clamp_score(weighted), 1)


def final_score(
    metrics: Metrics,
    violations: Sequence[Violation],
    weights: ObjectiveWeights,
) -> float:
    """
    Score a validated layout, 0-100.

    The compliance score is computed from the violations (not read from
    metrics) so the two can never disagree.
    """
    objective = objective_score(metrics, weights)
    compliance = compliance_score(violations)
    blended = (1.0 - COMPLIANCE_WEIGHT) * objective + COMPLIANCE_WEIGHT * compliance
    return round(clamp_score(blended), 1)
