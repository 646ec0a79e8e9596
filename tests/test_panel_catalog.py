"""
Unit Tests for the Panel Catalog.
"""

from dataclasses import replace

import pytest

from panel_catalog import PanelCatalog, PanelCatalogError, STANDARD_PANELS


class TestPanelCatalog:
    """Registry behaviour: standard templates, custom templates, lookups."""

    def setup_method(self):
        self.catalog = PanelCatalog()

    def test_standard_templates_registered(self):
        ids = [template.id for template in self.catalog.list_templates()]
        assert ids == ["residential_400w", "commercial_500w"]

    def test_residential_template_values(self):
        template = self.catalog.get("residential_400w")
        assert template.dimensions.width == 2.0
        assert template.dimensions.height == 1.0
        assert template.specifications.wattage == 400.0
        assert template.specifications.weight == 20.5
        assert template.area == pytest.approx(2.0)
        assert template.mass_per_area == pytest.approx(10.25)

    def test_default_template_is_first_registered(self):
        assert self.catalog.default_template().id == "residential_400w"

    def test_add_custom_template(self):
        custom = replace(STANDARD_PANELS[0], id="custom_450w", name="450W Custom")
        self.catalog.add(custom)

        assert "custom_450w" in self.catalog
        assert len(self.catalog) == 3
        assert self.catalog.get("custom_450w") == custom

    def test_duplicate_id_rejected(self):
        with pytest.raises(PanelCatalogError):
            self.catalog.add(STANDARD_PANELS[0])
        assert len(self.catalog) == 2, "Failed registration must not change the catalog"

    def test_non_positive_dimensions_rejected(self):
        flat = replace(
            STANDARD_PANELS[0],
            id="broken",
            dimensions=replace(STANDARD_PANELS[0].dimensions, width=0.0),
        )
        with pytest.raises(PanelCatalogError):
            self.catalog.add(flat)

    def test_unknown_template_rejected(self):
        with pytest.raises(PanelCatalogError):
            self.catalog.get("does_not_exist")

    def test_listing_is_a_copy(self):
        listing = self.catalog.list_templates()
        listing.clear()
        assert len(self.catalog) == 2

    def test_catalogs_are_independent(self):
        other = PanelCatalog()
        self.catalog.add(replace(STANDARD_PANELS[0], id="only_here"))
        assert "only_here" not in other

    def test_empty_catalog_has_no_default(self):
        with pytest.raises(PanelCatalogError):
            PanelCatalog(templates=[]).default_template()

    def test_catalog_error_is_value_error(self):
        assert issubclass(PanelCatalogError, ValueError)
