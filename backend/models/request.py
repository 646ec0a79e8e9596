"""
Request models for layout optimization.

Pydantic models validate the shape of caller input; geometry checks that need
a surface id in the error (zero area, too few vertices) are left to the
domain layer so they always raise InvalidGeometryError.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional

from data_models import (
    Point, Surface, RoofObstacle, PanelTemplate, PanelDimensions,
    ElectricalSpec, MountingSpec, MountType
)


class PointInput(BaseModel):
    """Single vertex or position, meters."""
    x: float
    y: float
    z: Optional[float] = None

    def to_domain(self) -> Point:
        return Point(self.x, self.y, self.z)


class SurfaceInput(BaseModel):
    """Roof plane from the roof-analysis step."""
    id: str
    vertices: List[PointInput] = Field(..., description="Ordered polygon vertices in meters")
    area: float = Field(..., description="Surface area in m²")
    azimuth: float = Field(180.0, description="Surface azimuth in degrees (180 = south)")
    tilt: float = Field(20.0, description="Surface tilt in degrees")

    def to_domain(self) -> Surface:
        return Surface(
            id=self.id,
            vertices=tuple(vertex.to_domain() for vertex in self.vertices),
            area=self.area,
            azimuth=self.azimuth,
            tilt=self.tilt,
        )


class ObstacleInput(BaseModel):
    """Roof feature that casts shade and needs clearance."""
    id: str
    type: Literal["chimney", "skylight", "vent", "antenna", "solar_panel"]
    position: PointInput
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    obstacle_height: float = Field(0.0, ge=0, description="Height above the roof plane in meters")

    def to_domain(self) -> RoofObstacle:
        return RoofObstacle(
            id=self.id,
            feature_type=self.type,
            position=self.position.to_domain(),
            width=self.width,
            height=self.height,
            obstacle_height=self.obstacle_height,
        )


class DimensionsInput(BaseModel):
    width: float = Field(..., gt=0, description="meters")
    height: float = Field(..., gt=0, description="meters")
    thickness: float = Field(0.04, gt=0, description="meters")


class SpecificationsInput(BaseModel):
    wattage: float = Field(..., gt=0)
    efficiency: float = Field(0.2, gt=0, le=1)
    temperature_coefficient: float = -0.35
    voltage: float = Field(40.0, gt=0)
    current: float = Field(10.0, gt=0)
    weight: float = Field(..., gt=0, description="kg")


class MountingInput(BaseModel):
    type: Literal["flush", "tilted", "ballasted"] = "flush"
    min_tilt: float = Field(0.0, ge=0, le=90)
    max_tilt: float = Field(60.0, ge=0, le=90)
    setback_required: float = Field(0.91, ge=0, description="meters")


class PanelTemplateInput(BaseModel):
    """Custom panel template."""
    id: str
    name: str
    manufacturer: str = "Generic"
    model: str = ""
    dimensions: DimensionsInput
    specifications: SpecificationsInput
    mounting: MountingInput = Field(default_factory=MountingInput)

    def to_domain(self) -> PanelTemplate:
        return PanelTemplate(
            id=self.id,
            name=self.name,
            manufacturer=self.manufacturer,
            model=self.model,
            dimensions=PanelDimensions(**self.dimensions.model_dump()),
            specifications=ElectricalSpec(**self.specifications.model_dump()),
            mounting=MountingSpec(
                mount_type=MountType(self.mounting.type),
                min_tilt=self.mounting.min_tilt,
                max_tilt=self.mounting.max_tilt,
                setback_required=self.mounting.setback_required,
            ),
        )


class SetbackOverrides(BaseModel):
    """Fire code setbacks in feet."""
    fire_setback_ft: Optional[float] = Field(None, ge=0)
    pathway_width_ft: Optional[float] = Field(None, ge=0)
    smoke_vent_clearance_ft: Optional[float] = Field(None, ge=0)
    hip_ridge_clearance_ft: Optional[float] = Field(None, ge=0)


class ConstraintOverrides(BaseModel):
    """Partial placement constraints; unset fields take engineering defaults."""
    setbacks: Optional[SetbackOverrides] = None
    min_panel_spacing: Optional[float] = Field(None, ge=0)
    max_tilt_angle: Optional[float] = Field(None, ge=0, le=90)
    min_clearance_to_obstacles: Optional[float] = Field(None, ge=0)
    load_capacity: Optional[float] = Field(None, gt=0)
    uniform_orientation: Optional[bool] = None
    symmetrical_layout: Optional[bool] = None
    hide_from_street: Optional[bool] = None
    match_roof_lines: Optional[bool] = None
    access_pathways: Optional[bool] = None
    service_clearance: Optional[float] = Field(None, ge=0)
    minimize_shading: Optional[bool] = None
    optimize_for_production: Optional[bool] = None
    consider_weather: Optional[bool] = None

    def to_overrides(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ObjectiveOverrides(BaseModel):
    """Relative objective weights."""
    production: Optional[float] = Field(None, ge=0)
    cost: Optional[float] = Field(None, ge=0)
    aesthetics: Optional[float] = Field(None, ge=0)
    maintenance: Optional[float] = Field(None, ge=0)


class OptionOverrides(BaseModel):
    """Partial search options; unset fields take defaults."""
    algorithm: Optional[Literal["genetic", "simulated_annealing", "particle_swarm", "hybrid"]] = None
    objectives: Optional[ObjectiveOverrides] = None
    population_size: Optional[int] = Field(None, ge=2)
    generations: Optional[int] = Field(None, ge=1)
    mutation_rate: Optional[float] = Field(None, ge=0, le=1)
    crossover_rate: Optional[float] = Field(None, ge=0, le=1)
    convergence_threshold: Optional[float] = Field(None, ge=0)
    max_iterations: Optional[int] = Field(None, ge=1)
    parallel_processing: Optional[bool] = None

    def to_overrides(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class OptimizationRequest(BaseModel):
    """Request model for layout optimization."""
    surfaces: List[SurfaceInput] = Field(..., description="Roof surfaces")
    obstacles: List[ObstacleInput] = Field(default_factory=list)
    max_panel_count: int = Field(..., ge=0, description="Panel ceiling from the irradiance model")
    template_id: Optional[str] = Field(None, description="Catalog template to place (default: first)")
    custom_panels: List[PanelTemplateInput] = Field(default_factory=list, description="Templates to register first")
    constraints: ConstraintOverrides = Field(default_factory=ConstraintOverrides)
    options: OptionOverrides = Field(default_factory=OptionOverrides)
    seed: Optional[int] = None
    timeout_s: Optional[float] = Field(None, gt=0, description="Wall-clock limit for the search")


class PreviewRequest(BaseModel):
    """Request model for the grid preview."""
    surfaces: List[SurfaceInput]
    template_id: Optional[str] = None
    custom_panels: List[PanelTemplateInput] = Field(default_factory=list)
    max_panels: int = Field(50, ge=0)
