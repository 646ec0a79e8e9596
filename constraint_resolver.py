"""
Constraint Resolver.

Merges caller-supplied partial constraints and options over the engineering
defaults. Partially-specified input is never an error: every field of the
output is resolved.

DEFAULTS (documented literals):
- Fire setback 3.0 ft, pathway width 3.0 ft, smoke vent clearance 3.0 ft,
  hip/ridge clearance 1.5 ft (fire code units, converted to meters at use)
- Minimum panel spacing 0.05 m, max tilt 30°, obstacle clearance 1.0 m
- Structural load capacity 75 kg/m²
"""

import copy
import logging
import math
from typing import Any, Dict, Mapping, Optional

from data_models import (
    PlacementConstraints, SetbackRules, OptimizationOptions,
    ObjectiveWeights, SearchAlgorithm
)

logger = logging.getLogger(__name__)


FEET_TO_METERS = 0.3048


DEFAULT_CONSTRAINTS: Dict[str, Any] = {
    "setbacks": {
        "fire_setback_ft": 3.0,
        "pathway_width_ft": 3.0,
        "smoke_vent_clearance_ft": 3.0,
        "hip_ridge_clearance_ft": 1.5,
    },
    "min_panel_spacing": 0.05,  # 5 cm
    "max_tilt_angle": 30.0,
    "min_clearance_to_obstacles": 1.0,
    "load_capacity": 75.0,  # kg/m²
    "uniform_orientation": True,
    "symmetrical_layout": True,
    "hide_from_street": False,
    "match_roof_lines": True,
    "access_pathways": True,
    "service_clearance": 1.0,
    "minimize_shading": True,
    "optimize_for_production": True,
    "consider_weather": False,
}


DEFAULT_OPTIONS: Dict[str, Any] = {
    "algorithm": "genetic",
    "objectives": {
        "production": 0.4,
        "cost": 0.3,
        "aesthetics": 0.2,
        "maintenance": 0.1,
    },
    "population_size": 50,
    "generations": 100,
    "mutation_rate": 0.1,
    "crossover_rate": 0.8,
    "convergence_threshold": 0.001,
    "max_iterations": 1000,
    "parallel_processing": True,
}


def _deep_merge(defaults: Dict[str, Any], overrides: Mapping[str, Any], path: str = "") -> Dict[str, Any]:
    """
    Merge overrides into a copy of defaults.

    Nested mappings merge key by key. None means "keep the default".
    Unknown keys are dropped with a warning.
    """
    merged = copy.deepcopy(defaults)

    for key, value in overrides.items():
        if key not in defaults:
            logger.warning(f"Ignoring unknown setting '{path}{key}'")
            continue
        if value is None:
            continue
        if isinstance(defaults[key], dict):
            if not isinstance(value, Mapping):
                logger.warning(f"Ignoring non-mapping value for '{path}{key}'")
                continue
            merged[key] = _deep_merge(defaults[key], value, path=f"{path}{key}.")
        else:
            merged[key] = value

    return merged


def resolve_constraints(overrides: Optional[Mapping[str, Any]] = None) -> PlacementConstraints:
    """
    Build a complete PlacementConstraints from partial overrides.

    Args:
        overrides: Partial constraint values (nested 'setbacks' allowed)

    Returns:
        Fully-resolved PlacementConstraints
    """
    values = _deep_merge(DEFAULT_CONSTRAINTS, overrides or {})
    setbacks = values.pop("setbacks")

    return PlacementConstraints(
        setbacks=SetbackRules(**{key: float(value) for key, value in setbacks.items()}),
        min_panel_spacing=float(values["min_panel_spacing"]),
        max_tilt_angle=float(values["max_tilt_angle"]),
        min_clearance_to_obstacles=float(values["min_clearance_to_obstacles"]),
        load_capacity=float(values["load_capacity"]),
        uniform_orientation=bool(values["uniform_orientation"]),
        symmetrical_layout=bool(values["symmetrical_layout"]),
        hide_from_street=bool(values["hide_from_street"]),
        match_roof_lines=bool(values["match_roof_lines"]),
        access_pathways=bool(values["access_pathways"]),
        service_clearance=float(values["service_clearance"]),
        minimize_shading=bool(values["minimize_shading"]),
        optimize_for_production=bool(values["optimize_for_production"]),
        consider_weather=bool(values["consider_weather"]),
    )


def required_edge_setback(constraints: PlacementConstraints) -> float:
    """
    Edge clearance demanded by the fire code, in meters.

    The access pathway runs along the roof edge, so when pathways are
    required the wider of the two governs.
    """
    setback_ft = constraints.setbacks.fire_setback_ft
    if constraints.access_pathways:
        setback_ft = max(setback_ft, constraints.setbacks.pathway_width_ft)
    return setback_ft * FEET_TO_METERS


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _resolve_weights(raw: Mapping[str, Any]) -> ObjectiveWeights:
    weights = {}
    for key, value in raw.items():
        value = float(value)
        if not math.isfinite(value) or value < 0:
            logger.warning(f"Objective weight '{key}'={value} treated as 0")
            value = 0.0
        weights[key] = value

    resolved = ObjectiveWeights(**weights)
    if resolved.total <= 0:
        logger.warning("All objective weights are zero; using default weights")
        resolved = ObjectiveWeights(**DEFAULT_OPTIONS["objectives"])

    return resolved.normalized()


def _resolve_algorithm(raw: Any) -> SearchAlgorithm:
    if isinstance(raw, SearchAlgorithm):
        algorithm = raw
    else:
        try:
            algorithm = SearchAlgorithm(str(raw).lower())
        except ValueError:
            logger.warning(f"Unknown search algorithm '{raw}'; using genetic search")
            return SearchAlgorithm.GENETIC

    if algorithm is not SearchAlgorithm.GENETIC:
        logger.warning(f"Search algorithm '{algorithm.value}' is not implemented; using genetic search")
    return algorithm


def resolve_options(overrides: Optional[Mapping[str, Any]] = None) -> OptimizationOptions:
    """
    Build complete OptimizationOptions from partial overrides.

    Weights are treated as relative and normalized to sum to 1.
    The generation count never exceeds the iteration ceiling.
    """
    values = _deep_merge(DEFAULT_OPTIONS, overrides or {})

    max_iterations = max(1, int(values["max_iterations"]))
    generations = max(1, int(values["generations"]))
    if generations > max_iterations:
        logger.info(f"Generations capped at max_iterations ({generations} -> {max_iterations})")
        generations = max_iterations

    return OptimizationOptions(
        algorithm=_resolve_algorithm(values["algorithm"]),
        objectives=_resolve_weights(values["objectives"]),
        population_size=max(2, int(values["population_size"])),
        generations=generations,
        mutation_rate=_clamp(float(values["mutation_rate"]), 0.0, 1.0),
        crossover_rate=_clamp(float(values["crossover_rate"]), 0.0, 1.0),
        convergence_threshold=max(0.0, float(values["convergence_threshold"])),
        max_iterations=max_iterations,
        parallel_processing=bool(values["parallel_processing"]),
    )
