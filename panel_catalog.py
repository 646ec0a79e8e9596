"""
Panel Catalog.

Registry of placeable module templates. A catalog is an explicit object
handed to the optimizer, so independent runs can use independent catalogs.

Catalogs are append-only: templates can be registered at runtime but never
updated or removed.
"""

import logging
from typing import Dict, List, Optional, Iterable

from data_models import (
    PanelTemplate, PanelDimensions, ElectricalSpec, MountingSpec, MountType
)

logger = logging.getLogger(__name__)


class PanelCatalogError(ValueError):
    """Raised for duplicate or unknown template ids."""


STANDARD_PANELS = (
    PanelTemplate(
        id="residential_400w",
        name="400W Residential Panel",
        manufacturer="Generic",
        model="RES-400",
        dimensions=PanelDimensions(width=2.0, height=1.0, thickness=0.04),
        specifications=ElectricalSpec(
            wattage=400.0,
            efficiency=0.205,
            temperature_coefficient=-0.35,
            voltage=40.5,
            current=9.88,
            weight=20.5,
        ),
        mounting=MountingSpec(
            mount_type=MountType.FLUSH,
            min_tilt=0.0,
            max_tilt=60.0,
            setback_required=0.91,
        ),
    ),
    PanelTemplate(
        id="commercial_500w",
        name="500W Commercial Panel",
        manufacturer="Generic",
        model="COM-500",
        dimensions=PanelDimensions(width=2.3, height=1.15, thickness=0.04),
        specifications=ElectricalSpec(
            wattage=500.0,
            efficiency=0.22,
            temperature_coefficient=-0.32,
            voltage=45.2,
            current=11.06,
            weight=25.8,
        ),
        mounting=MountingSpec(
            mount_type=MountType.FLUSH,
            min_tilt=0.0,
            max_tilt=60.0,
            setback_required=0.91,
        ),
    ),
)


class PanelCatalog:
    """
    Append-only registry of panel templates.

    Templates are frozen dataclasses, so handing them out never exposes
    catalog state to mutation.
    """

    def __init__(self, templates: Optional[Iterable[PanelTemplate]] = None):
        """
        Initialize catalog.

        Args:
            templates: Initial templates (defaults to the standard panels)
        """
        self._templates: Dict[str, PanelTemplate] = {}
        for template in (STANDARD_PANELS if templates is None else templates):
            self.add(template)

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, template_id: str) -> bool:
        return template_id in self._templates

    def list_templates(self) -> List[PanelTemplate]:
        """Registered templates in registration order."""
        return list(self._templates.values())

    def add(self, template: PanelTemplate) -> None:
        """
        Register a custom template.

        Raises:
            PanelCatalogError: If a template with the same id already exists
        """
        if template.id in self._templates:
            raise PanelCatalogError(f"Panel template '{template.id}' is already registered")
        if template.dimensions.width <= 0 or template.dimensions.height <= 0:
            raise PanelCatalogError(
                f"Panel template '{template.id}' must have positive width and height"
            )

        self._templates[template.id] = template
        logger.debug(f"Registered panel template {template.id} ({template.specifications.wattage:.0f} W)")

    def get(self, template_id: str) -> PanelTemplate:
        if template_id not in self._templates:
            raise PanelCatalogError(f"Unknown panel template: {template_id}")
        return self._templates[template_id]

    def default_template(self) -> PanelTemplate:
        """First registered template."""
        if not self._templates:
            raise PanelCatalogError("Panel catalog is empty")
        return next(iter(self._templates.values()))
