"""
Data models for the roof panel layout optimization system.

This module defines the core data structures used throughout the system.
All models follow strict separation of concerns: surface geometry, panel
templates, placement constraints and candidate layouts are kept separate.

All distances are in meters unless a field name says otherwise
(regulatory setbacks are written in feet, the way the fire code states them).
Candidate layouts are value objects: they are never mutated once created.
"""

from dataclasses import dataclass, field, replace, asdict
from enum import Enum
from typing import Optional, List, Tuple, Dict, Any


class ViolationCategory(Enum):
    """Compliance violation categories."""
    REGULATORY = "regulatory"  # Fire code setbacks, pathways, clearances
    STRUCTURAL = "structural"
    AESTHETIC = "aesthetic"
    MAINTENANCE = "maintenance"


class Severity(Enum):
    """Violation severity levels."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class MountType(Enum):
    """Panel mounting systems supported by the catalog."""
    FLUSH = "flush"
    TILTED = "tilted"
    BALLASTED = "ballasted"


class SearchAlgorithm(Enum):
    """Search algorithm identifiers accepted in optimization options.

    Only GENETIC is implemented; the others resolve to it.
    """
    GENETIC = "genetic"
    SIMULATED_ANNEALING = "simulated_annealing"
    PARTICLE_SWARM = "particle_swarm"
    HYBRID = "hybrid"


class TerminationReason(Enum):
    """Why an optimizer run stopped."""
    CONVERGED = "converged"  # Best score exceeded the convergence score
    STAGNATED = "stagnated"  # No improvement for the stagnation limit
    GENERATION_LIMIT = "generation_limit"
    CANCELLED = "cancelled"


# ============================================================================
# GEOMETRY INPUTS
# ============================================================================

@dataclass(frozen=True)
class Point:
    """2-D point with an optional elevation."""
    x: float
    y: float
    z: Optional[float] = None

    def to_dict(self) -> Dict[str, float]:
        data = {"x": self.x, "y": self.y}
        if self.z is not None:
            data["z"] = self.z
        return data


@dataclass(frozen=True)
class Surface:
    """
    A roof plane supplied by the roof-analysis step.

    Immutable for the duration of an optimization run.
    """
    id: str
    vertices: Tuple[Point, ...]  # Ordered polygon, meters
    area: float  # m²
    azimuth: float  # degrees, 180 = south facing
    tilt: float  # degrees from horizontal


@dataclass(frozen=True)
class RoofObstacle:
    """A roof feature (chimney, vent, skylight...) that casts shade and needs clearance."""
    id: str
    feature_type: str  # chimney | skylight | vent | antenna | solar_panel
    position: Point  # Lower-left corner of the footprint
    width: float  # meters, along x
    height: float  # meters, along y
    obstacle_height: float = 0.0  # meters above the roof plane


# ============================================================================
# PANEL TEMPLATES
# ============================================================================

@dataclass(frozen=True)
class PanelDimensions:
    width: float  # meters
    height: float  # meters
    thickness: float  # meters


@dataclass(frozen=True)
class ElectricalSpec:
    wattage: float  # rated power, W
    efficiency: float  # 0-1
    temperature_coefficient: float  # %/°C
    voltage: float  # V
    current: float  # A
    weight: float  # kg


@dataclass(frozen=True)
class MountingSpec:
    mount_type: MountType
    min_tilt: float  # degrees
    max_tilt: float  # degrees
    setback_required: float  # meters from roof edge


@dataclass(frozen=True)
class PanelTemplate:
    """
    A placeable module template.

    Templates are read-only catalog entries. New templates may be appended
    to a catalog at runtime but existing ones are never mutated.
    """
    id: str
    name: str
    manufacturer: str
    model: str
    dimensions: PanelDimensions
    specifications: ElectricalSpec
    mounting: MountingSpec

    @property
    def area(self) -> float:
        """Footprint area in m²."""
        return self.dimensions.width * self.dimensions.height

    @property
    def mass_per_area(self) -> float:
        """Dead load in kg/m² (0 for a degenerate footprint)."""
        if self.area <= 0:
            return 0.0
        return self.specifications.weight / self.area

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["mounting"]["mount_type"] = self.mounting.mount_type.value
        return data


# ============================================================================
# CONSTRAINTS & OPTIONS
# ============================================================================

@dataclass(frozen=True)
class SetbackRules:
    """Fire code setbacks, in feet."""
    fire_setback_ft: float
    pathway_width_ft: float
    smoke_vent_clearance_ft: float
    hip_ridge_clearance_ft: float


@dataclass(frozen=True)
class PlacementConstraints:
    """
    Fully-resolved placement constraints.

    Built once per optimization call by the constraint resolver;
    no field is ever missing.
    """
    setbacks: SetbackRules

    # Physical limits
    min_panel_spacing: float  # meters
    max_tilt_angle: float  # degrees
    min_clearance_to_obstacles: float  # meters
    load_capacity: float  # kg/m²

    # Aesthetic preferences
    uniform_orientation: bool
    symmetrical_layout: bool
    hide_from_street: bool
    match_roof_lines: bool

    # Maintenance access
    access_pathways: bool
    service_clearance: float  # meters

    # Performance preferences
    minimize_shading: bool
    optimize_for_production: bool
    consider_weather: bool


@dataclass(frozen=True)
class ObjectiveWeights:
    """Relative objective weights. Need not sum to 1."""
    production: float
    cost: float
    aesthetics: float
    maintenance: float

    @property
    def total(self) -> float:
        return self.production + self.cost + self.aesthetics + self.maintenance

    def normalized(self) -> "ObjectiveWeights":
        """Return weights scaled to sum to 1 (unchanged if the total is not positive)."""
        total = self.total
        if total <= 0:
            return self
        return ObjectiveWeights(
            production=self.production / total,
            cost=self.cost / total,
            aesthetics=self.aesthetics / total,
            maintenance=self.maintenance / total,
        )


@dataclass(frozen=True)
class OptimizationOptions:
    """Fully-resolved search options."""
    algorithm: SearchAlgorithm
    objectives: ObjectiveWeights
    population_size: int
    generations: int
    mutation_rate: float
    crossover_rate: float
    convergence_threshold: float
    max_iterations: int
    parallel_processing: bool


# ============================================================================
# CANDIDATE LAYOUTS
# ============================================================================

@dataclass(frozen=True)
class PanelPlacement:
    """One placed panel inside a candidate layout."""
    id: str
    position: Point  # Lower-left corner of the footprint
    azimuth: float  # degrees
    tilt: float  # degrees
    template: PanelTemplate
    surface_id: str
    shading_factor: float  # 0 = unshaded, 1 = fully shaded
    maintenance_access: bool

    def footprint(self) -> Tuple[float, float, float, float]:
        """Axis-aligned footprint as (min_x, min_y, max_x, max_y)."""
        return (
            self.position.x,
            self.position.y,
            self.position.x + self.template.dimensions.width,
            self.position.y + self.template.dimensions.height,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "position": self.position.to_dict(),
            "orientation": {"azimuth": self.azimuth, "tilt": self.tilt},
            "template_id": self.template.id,
            "surface_id": self.surface_id,
            "shading_factor": self.shading_factor,
            "maintenance_access": self.maintenance_access,
        }


@dataclass(frozen=True)
class Metrics:
    """Aggregate metrics for a candidate layout."""
    total_panels: int
    total_wattage: float  # W
    estimated_production: float  # kWh/year
    roof_coverage: float  # 0-100
    aesthetic_score: float  # 0-100
    maintenance_score: float  # 0-100
    compliance_score: float  # 0-100
    cost_estimate: float  # USD

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Violation:
    """A single compliance finding. Violations are data, never exceptions."""
    category: ViolationCategory
    severity: Severity
    description: str
    affected_panels: Tuple[str, ...]
    suggestion: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.category.value,
            "severity": self.severity.value,
            "description": self.description,
            "affected_panels": list(self.affected_panels),
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class PlacementSolution:
    """
    A candidate layout (one individual of the population).

    Created fresh by initialization, crossover and mutation. Scoring and
    validation return new instances instead of mutating this one, so parents
    and offspring never alias each other's state.
    """
    id: str
    panels: Tuple[PanelPlacement, ...]
    metrics: Metrics
    score: float = 0.0
    violations: Tuple[Violation, ...] = ()

    def with_score(self, score: float) -> "PlacementSolution":
        return replace(self, score=score)

    def with_validation(
        self,
        violations: List[Violation],
        metrics: Metrics,
        score: float,
    ) -> "PlacementSolution":
        return replace(self, violations=tuple(violations), metrics=metrics, score=score)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "score": self.score,
            "panels": [panel.to_dict() for panel in self.panels],
            "metrics": self.metrics.to_dict(),
            "violations": [violation.to_dict() for violation in self.violations],
        }


@dataclass(frozen=True)
class OptimizationRun:
    """
    Raw output of an optimizer run, before final validation and ranking.
    """
    population: Tuple[PlacementSolution, ...]  # Sorted by score, descending
    generations_run: int
    best_score_history: Tuple[float, ...]
    termination_reason: TerminationReason


# ============================================================================
# PREVIEW
# ============================================================================

@dataclass(frozen=True)
class PreviewCell:
    position: Point
    valid: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"position": self.position.to_dict(), "valid": self.valid}


@dataclass(frozen=True)
class PreviewResult:
    """Result of the non-optimized grid preview."""
    panels: Tuple[PreviewCell, ...] = field(default_factory=tuple)
    total_fit: int = 0
    coverage: float = 0.0  # percent of surface area

    def to_dict(self) -> Dict[str, Any]:
        return {
            "panels": [cell.to_dict() for cell in self.panels],
            "total_fit": self.total_fit,
            "coverage": self.coverage,
        }
