"""
Placement Service Module.

In-process facade over the layout optimizer: optimize, preview and catalog
management. Used by the CLI (main.py) and by any embedding application.

Each call resolves its own constraints and options and builds its own
optimizer; nothing survives between calls except the catalog.
"""

import logging
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from backend.models.request import OptimizationRequest, PreviewRequest, PanelTemplateInput
from backend.models.response import OptimizationResponse, PreviewResponse, PanelListResponse
from compliance_engine import ComplianceValidator
from constraint_resolver import resolve_constraints, resolve_options
from data_models import (
    Surface, RoofObstacle, PanelTemplate, PlacementSolution, OptimizationRun, PreviewResult
)
from fast_preview import preview_placement, DEFAULT_PREVIEW_PANELS
from genetic_optimizer import GeneticOptimizer, CancellationToken, FitnessFunction
from geometry import validate_surfaces, largest_surface
from panel_catalog import PanelCatalog
from solution_ranker import rank_solutions, DEFAULT_TOP_N

logger = logging.getLogger(__name__)


class PlacementService:
    """
    Layout optimization entry point.

    Owns a panel catalog; every other input is supplied per call.
    """

    def __init__(self, catalog: Optional[PanelCatalog] = None):
        self.catalog = catalog if catalog is not None else PanelCatalog()

    def list_panels(self) -> List[PanelTemplate]:
        return self.catalog.list_templates()

    def add_custom_panel(self, template: PanelTemplate) -> None:
        self.catalog.add(template)

    def run(
        self,
        surfaces: Sequence[Surface],
        max_panel_count: int,
        constraints: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
        obstacles: Sequence[RoofObstacle] = (),
        template_id: Optional[str] = None,
        seed: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
        fitness_fn: Optional[FitnessFunction] = None,
        top_n: int = DEFAULT_TOP_N,
    ) -> Tuple[List[PlacementSolution], OptimizationRun]:
        """
        Optimize, validate and rank.

        Args:
            surfaces: Roof surfaces
            max_panel_count: Panel ceiling from the irradiance model
            constraints: Partial constraint overrides
            options: Partial option overrides
            obstacles: Roof features
            template_id: Catalog template to place
            seed: Random seed for reproducible runs
            cancel_token: Optional cancellation token
            fitness_fn: Optional in-loop fitness override
            top_n: Number of ranked layouts to return

        Returns:
            Tuple of (ranked layouts, raw optimizer run)

        Raises:
            InvalidGeometryError: Empty surface list or degenerate surface
        """
        resolved_constraints = resolve_constraints(constraints)
        resolved_options = resolve_options(options)

        optimizer = GeneticOptimizer(
            surfaces=surfaces,
            max_panel_count=max_panel_count,
            catalog=self.catalog,
            constraints=resolved_constraints,
            options=resolved_options,
            obstacles=obstacles,
            template_id=template_id,
            seed=seed,
            fitness_fn=fitness_fn,
            cancel_token=cancel_token,
        )
        run = optimizer.optimize()

        validator = ComplianceValidator(surfaces, resolved_constraints, obstacles)
        ranked = rank_solutions(run.population, validator, resolved_options.objectives, top_n=top_n)
        return ranked, run

    def optimize(self, surfaces: Sequence[Surface], max_panel_count: int, **kwargs) -> List[PlacementSolution]:
        """Up to five ranked layouts, each carrying its metrics and violations."""
        ranked, _ = self.run(surfaces, max_panel_count, **kwargs)
        return ranked

    def preview(
        self,
        surfaces: Sequence[Surface],
        template_id: Optional[str] = None,
        max_panels: int = DEFAULT_PREVIEW_PANELS,
    ) -> PreviewResult:
        """
        Grid preview on the largest surface. Never runs the optimizer.

        Raises:
            InvalidGeometryError: Empty surface list or degenerate surface
        """
        validate_surfaces(surfaces)
        template = self.catalog.get(template_id) if template_id else self.catalog.default_template()
        return preview_placement(largest_surface(surfaces), template, max_panels=max_panels)


def _register_custom_panels(service: PlacementService, panels: Sequence[PanelTemplateInput]) -> None:
    for panel in panels:
        service.add_custom_panel(panel.to_domain())


def handle_optimization_request(
    request: OptimizationRequest,
    service: Optional[PlacementService] = None,
) -> OptimizationResponse:
    """
    Run a validated optimization request end to end.

    Args:
        request: OptimizationRequest
        service: Service to use (a fresh one with the standard catalog by default)

    Returns:
        OptimizationResponse
    """
    service = service or PlacementService()
    _register_custom_panels(service, request.custom_panels)

    cancel_token = CancellationToken(timeout_s=request.timeout_s) if request.timeout_s else None

    ranked, run = service.run(
        surfaces=[surface.to_domain() for surface in request.surfaces],
        max_panel_count=request.max_panel_count,
        constraints=request.constraints.to_overrides(),
        options=request.options.to_overrides(),
        obstacles=[obstacle.to_domain() for obstacle in request.obstacles],
        template_id=request.template_id,
        seed=request.seed,
        cancel_token=cancel_token,
    )

    return OptimizationResponse(
        solutions=[solution.to_dict() for solution in ranked],
        generations_run=run.generations_run,
        termination_reason=run.termination_reason.value,
        best_score_history=list(run.best_score_history),
    )


def handle_preview_request(
    request: PreviewRequest,
    service: Optional[PlacementService] = None,
) -> PreviewResponse:
    service = service or PlacementService()
    _register_custom_panels(service, request.custom_panels)

    result = service.preview(
        [surface.to_domain() for surface in request.surfaces],
        template_id=request.template_id,
        max_panels=request.max_panels,
    )
    return PreviewResponse(**result.to_dict())


def list_panels_response(service: Optional[PlacementService] = None) -> PanelListResponse:
    service = service or PlacementService()
    return PanelListResponse(panels=[template.to_dict() for template in service.list_panels()])
