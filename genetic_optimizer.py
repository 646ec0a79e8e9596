"""
Genetic Algorithm Optimizer Module.

Population-based search for roof panel layouts.

═══════════════════════════════════════════════════════════════════════════
CORE CONTRACT:
═══════════════════════════════════════════════════════════════════════════

Init → Evaluate → ConvergenceCheck → (Evolve → Evaluate → ConvergenceCheck)* → Terminate

- Seeds every candidate on the largest roof surface
- Evaluates a cheap in-loop fitness (objective score only); full compliance
  validation happens once, after the search, in the solution ranker
- Elitism keeps the best 10% unchanged, so the best score never decreases
- Stops early when the best score exceeds 95 or has not improved for 20
  consecutive generations
- Layouts are value objects: offspring are always new instances
- Holds no state after optimize() returns
═══════════════════════════════════════════════════════════════════════════
"""

import itertools
import logging
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Callable, List, Optional, Sequence

from shapely.geometry import box

from data_models import (
    Surface, RoofObstacle, PanelPlacement, PlacementSolution, Point,
    PlacementConstraints, OptimizationOptions, OptimizationRun, TerminationReason
)
from geometry import validate_surfaces, largest_surface, bounding_box, surface_polygon
from metrics_calculator import compute_metrics, estimate_shading_factor, has_maintenance_access
from panel_catalog import PanelCatalog
from scoring import objective_score, clamp_score

logger = logging.getLogger(__name__)


# Search control
STAGNATION_LIMIT = 20
CONVERGENCE_SCORE = 95.0
ELITE_FRACTION = 0.1
TOURNAMENT_SIZE = 3
PER_PANEL_MUTATION_RATE = 0.1
MAX_SEED_PANELS = 30
MAX_EVALUATION_WORKERS = 8
PROGRESS_LOG_INTERVAL = 10

# Jitter ranges (full width, centered on the current value)
SEED_AZIMUTH_JITTER_DEG = 20.0
SEED_TILT_JITTER_DEG = 10.0
MUTATION_POSITION_JITTER_M = 2.5
MUTATION_AZIMUTH_JITTER_DEG = 30.0
MUTATION_TILT_JITTER_DEG = 10.0


FitnessFunction = Callable[[PlacementSolution], float]


class SequentialIdGenerator:
    """Deterministic solution ids: solution_1, solution_2, ..."""

    def __init__(self, prefix: str = "solution"):
        self.prefix = prefix
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        return f"{self.prefix}_{next(self._counter)}"


class CancellationToken:
    """
    Cooperative cancellation for interactive callers.

    Cancelled explicitly via cancel(), or implicitly once the optional
    wall-clock timeout has elapsed. Checked once per generation.
    """

    def __init__(self, timeout_s: Optional[float] = None):
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout_s if timeout_s is not None else None

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline


def _jitter(rng: random.Random, width: float) -> float:
    return (rng.random() - 0.5) * width


def _clamp_tilt(tilt: float) -> float:
    return max(0.0, min(90.0, tilt))


class GeneticOptimizer:
    """
    Genetic algorithm engine for panel layouts.

    This optimizer:
    - Seeds random layouts on the largest surface
    - Uses the scoring module for fitness
    - Uses tournament selection, single-point crossover and per-panel mutation
    - Evaluates fitness concurrently when parallel processing is enabled
    """

    def __init__(
        self,
        surfaces: Sequence[Surface],
        max_panel_count: int,
        catalog: PanelCatalog,
        constraints: PlacementConstraints,
        options: OptimizationOptions,
        obstacles: Sequence[RoofObstacle] = (),
        template_id: Optional[str] = None,
        seed: Optional[int] = None,
        id_generator: Optional[Callable[[], str]] = None,
        fitness_fn: Optional[FitnessFunction] = None,
        cancel_token: Optional[CancellationToken] = None,
    ):
        """
        Initialize genetic optimizer.

        Args:
            surfaces: Roof surfaces (validated here; invalid geometry fails fast)
            max_panel_count: Panel ceiling from the irradiance model
            catalog: Panel catalog to draw the template from
            constraints: Resolved placement constraints
            options: Resolved optimization options
            obstacles: Roof features used for shading estimates
            template_id: Template to place (defaults to the catalog's first)
            seed: Seed for the search's random stream
            id_generator: Callable returning fresh solution ids
            fitness_fn: Override for the in-loop fitness (defaults to objective score)
            cancel_token: Optional cancellation token

        Raises:
            InvalidGeometryError: Empty surface list or degenerate surface
        """
        validate_surfaces(surfaces)

        self.surfaces = list(surfaces)
        self.max_panel_count = max(0, int(max_panel_count))
        self.constraints = constraints
        self.options = options
        self.obstacles = list(obstacles)
        self.template = catalog.get(template_id) if template_id else catalog.default_template()
        self.rng = random.Random(seed)
        self.id_generator = id_generator or SequentialIdGenerator()
        self.fitness_fn = fitness_fn or self._objective_fitness
        self.cancel_token = cancel_token

        # All seeds go on the largest plane
        self.surface = largest_surface(self.surfaces)
        self.roof = surface_polygon(self.surface)
        self.bounds = bounding_box(self.surface.vertices)
        self.seed_panel_count = min(MAX_SEED_PANELS, self.max_panel_count)

        if self.seed_panel_count == 0:
            logger.warning("Panel ceiling is zero; every candidate layout will be empty")

    def optimize(self) -> OptimizationRun:
        """
        Run the genetic search.

        Returns:
            OptimizationRun with the final population sorted by score
        """
        logger.info(
            f"Starting genetic optimization: population={self.options.population_size}, "
            f"generations={self.options.generations}, surface={self.surface.id}, "
            f"template={self.template.id}"
        )

        population = self._initialize_population()
        best_score: Optional[float] = None
        stagnation_count = 0
        best_score_history: List[float] = []
        termination_reason = TerminationReason.GENERATION_LIMIT
        generations_run = 0

        executor = None
        if self.options.parallel_processing and self.options.population_size > 1:
            executor = ThreadPoolExecutor(
                max_workers=min(MAX_EVALUATION_WORKERS, self.options.population_size)
            )

        try:
            for generation in range(self.options.generations):
                population = self._evaluate_population(population, executor)
                generations_run = generation + 1

                current_best = max(solution.score for solution in population)
                best_score_history.append(current_best)

                if best_score is None or current_best > best_score + self.options.convergence_threshold:
                    best_score = current_best
                    stagnation_count = 0
                else:
                    best_score = max(best_score, current_best)
                    stagnation_count += 1

                if generation % PROGRESS_LOG_INTERVAL == 0:
                    logger.debug(f"Generation {generation}: best score = {best_score:.2f}")

                if best_score > CONVERGENCE_SCORE:
                    termination_reason = TerminationReason.CONVERGED
                    break
                if stagnation_count >= STAGNATION_LIMIT:
                    termination_reason = TerminationReason.STAGNATED
                    break
                if self.cancel_token is not None and self.cancel_token.cancelled:
                    termination_reason = TerminationReason.CANCELLED
                    break

                # The last evaluated generation is the result
                if generation + 1 < self.options.generations:
                    population = self._evolve_population(population)
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

        population = sorted(population, key=lambda solution: solution.score, reverse=True)

        logger.info(
            f"Genetic optimization finished after {generations_run} generation(s) "
            f"({termination_reason.value}); best score {population[0].score:.1f}"
        )

        return OptimizationRun(
            population=tuple(population),
            generations_run=generations_run,
            best_score_history=tuple(best_score_history),
            termination_reason=termination_reason,
        )

    # ------------------------------------------------------------------
    # Init
    # ------------------------------------------------------------------

    def _initialize_population(self) -> List[PlacementSolution]:
        return [self._create_random_solution() for _ in range(self.options.population_size)]

    def _create_random_solution(self) -> PlacementSolution:
        """
        Random seed layout.

        Positions are sampled over the surface's bounding box; panels that end
        up outside the roof are kept and left for the validator to flag.
        """
        panels = []
        width = self.bounds["max_x"] - self.bounds["min_x"]
        height = self.bounds["max_y"] - self.bounds["min_y"]

        for _ in range(self.seed_panel_count):
            x = self.bounds["min_x"] + self.rng.random() * width
            y = self.bounds["min_y"] + self.rng.random() * height
            azimuth = self.surface.azimuth + _jitter(self.rng, SEED_AZIMUTH_JITTER_DEG)
            tilt = self.surface.tilt + _jitter(self.rng, SEED_TILT_JITTER_DEG)
            panels.append(self._place_panel("", x, y, azimuth, tilt))

        return self._assemble_solution(panels)

    def _place_panel(self, panel_id: str, x: float, y: float, azimuth: float, tilt: float) -> PanelPlacement:
        """Build a placement with its shading and access estimates derived from geometry."""
        panel = PanelPlacement(
            id=panel_id,
            position=Point(x, y),
            azimuth=azimuth % 360.0,
            tilt=_clamp_tilt(tilt),
            template=self.template,
            surface_id=self.surface.id,
            shading_factor=0.0,
            maintenance_access=False,
        )
        footprint = box(*panel.footprint())
        return replace(
            panel,
            shading_factor=estimate_shading_factor(panel, self.surface, self.obstacles),
            maintenance_access=has_maintenance_access(footprint, self.roof, self.template, self.constraints),
        )

    def _assemble_solution(self, panels: Sequence[PanelPlacement]) -> PlacementSolution:
        """New unscored layout. Panel ids are positional within the layout."""
        numbered = tuple(replace(panel, id=f"panel_{index}") for index, panel in enumerate(panels))
        return PlacementSolution(
            id=self.id_generator(),
            panels=numbered,
            metrics=compute_metrics(numbered, self.max_panel_count),
        )

    # ------------------------------------------------------------------
    # Evaluate
    # ------------------------------------------------------------------

    def _objective_fitness(self, solution: PlacementSolution) -> float:
        return objective_score(solution.metrics, self.options.objectives)

    def _score(self, solution: PlacementSolution) -> PlacementSolution:
        return solution.with_score(clamp_score(self.fitness_fn(solution)))

    def _evaluate_population(
        self,
        population: List[PlacementSolution],
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> List[PlacementSolution]:
        """
        Score every candidate.

        Each score depends on its candidate alone, so the concurrent path
        returns exactly what the serial path would, in the same order.
        """
        if executor is None:
            return [self._score(solution) for solution in population]
        return list(executor.map(self._score, population))

    # ------------------------------------------------------------------
    # Evolve
    # ------------------------------------------------------------------

    def _evolve_population(self, population: List[PlacementSolution]) -> List[PlacementSolution]:
        """Elitism, then tournament selection + crossover + mutation until full."""
        ranked = sorted(population, key=lambda solution: solution.score, reverse=True)
        elite_count = max(1, int(self.options.population_size * ELITE_FRACTION))
        new_population = ranked[:elite_count]

        while len(new_population) < self.options.population_size:
            parent1 = self._tournament_select(ranked)
            parent2 = self._tournament_select(ranked)

            if self.rng.random() < self.options.crossover_rate:
                offspring = self._crossover(parent1, parent2)
            else:
                offspring = self._assemble_solution(parent1.panels)

            if self.rng.random() < self.options.mutation_rate:
                offspring = self._mutate(offspring)

            new_population.append(offspring)

        return new_population

    def _tournament_select(self, population: List[PlacementSolution]) -> PlacementSolution:
        """Best of TOURNAMENT_SIZE uniformly sampled candidates."""
        tournament = [self.rng.choice(population) for _ in range(TOURNAMENT_SIZE)]
        return max(tournament, key=lambda solution: solution.score)

    def _crossover(self, parent1: PlacementSolution, parent2: PlacementSolution) -> PlacementSolution:
        """Single-point split of the two panel lists."""
        shortest = min(len(parent1.panels), len(parent2.panels))
        if shortest == 0:
            return self._assemble_solution(parent2.panels)

        point = self.rng.randrange(shortest)
        panels = list(parent1.panels[:point]) + list(parent2.panels[point:])
        return self._assemble_solution(panels)

    def _mutate(self, solution: PlacementSolution) -> PlacementSolution:
        """Jitter position and orientation of roughly 10% of the panels."""
        panels = []
        for panel in solution.panels:
            if self.rng.random() < PER_PANEL_MUTATION_RATE:
                panel = self._place_panel(
                    panel.id,
                    panel.position.x + _jitter(self.rng, MUTATION_POSITION_JITTER_M),
                    panel.position.y + _jitter(self.rng, MUTATION_POSITION_JITTER_M),
                    panel.azimuth + _jitter(self.rng, MUTATION_AZIMUTH_JITTER_DEG),
                    panel.tilt + _jitter(self.rng, MUTATION_TILT_JITTER_DEG),
                )
            panels.append(panel)
        return self._assemble_solution(panels)
