"""
Solution Ranker.

Runs full compliance validation over the optimizer's final population,
folds the violations into each layout's compliance and final score, and
returns the top candidates.

This is where violations become visible to the caller. Layouts with errors
are still returned; they simply rank lower.
"""

import logging
from dataclasses import replace
from typing import List, Sequence

from compliance_engine import ComplianceValidator
from data_models import PlacementSolution, ObjectiveWeights, Severity
from scoring import compliance_score, final_score

logger = logging.getLogger(__name__)


DEFAULT_TOP_N = 5


def rank_solutions(
    population: Sequence[PlacementSolution],
    validator: ComplianceValidator,
    weights: ObjectiveWeights,
    top_n: int = DEFAULT_TOP_N,
) -> List[PlacementSolution]:
    """
    Validate, rescore and rank layouts.

    Args:
        population: Candidate layouts (any order)
        validator: Compliance validator bound to the run's surfaces and constraints
        weights: Objective weights
        top_n: Number of layouts to return

    Returns:
        Up to top_n validated layouts, best first
    """
    validated = []

    for solution in population:
        violations = validator.validate(solution)
        metrics = replace(solution.metrics, compliance_score=compliance_score(violations))
        score = final_score(metrics, violations, weights)
        validated.append(solution.with_validation(violations, metrics, score))

    ranked = sorted(validated, key=lambda solution: solution.score, reverse=True)
    top = ranked[:max(0, top_n)]

    if top:
        errors = sum(
            1 for violation in top[0].violations if violation.severity is Severity.ERROR
        )
        logger.info(
            f"Ranked {len(validated)} layouts; best {top[0].id} scored {top[0].score:.1f} "
            f"with {len(top[0].violations)} violation(s) ({errors} error)"
        )

    return top
