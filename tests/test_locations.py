"""
Tests for the location hierarchy and the cascading picker selection.
"""

import pytest

from vadi_hisaab.locations import LocationHierarchy, get_location_hierarchy
from vadi_hisaab.models.location import LocationKind, LocationPath, LocationSelection


@pytest.fixture
def hierarchy() -> LocationHierarchy:
    return get_location_hierarchy()


class TestListing:
    """Tests for listing children of a node."""

    def test_regions_in_declaration_order(self, hierarchy):
        """Test districts are listed in the order they are declared."""
        keys = [item.key for item in hierarchy.list_regions()]
        assert keys[:2] == ["Rajkot", "Jamnagar"]
        assert keys[-1] == "Other"

    def test_sub_regions_of_rajkot(self, hierarchy):
        """Test talukas of Rajkot include Gondal with its Gujarati label."""
        items = {item.key: item.label for item in hierarchy.list_sub_regions("Rajkot")}
        assert items["Gondal"] == "ગોંડલ"
        assert "Kalavad" not in items

    def test_sub_regions_are_disjoint_between_districts(self, hierarchy):
        """Test Rajkot and Jamnagar talukas do not overlap."""
        rajkot = {item.key for item in hierarchy.list_sub_regions("Rajkot")}
        jamnagar = {item.key for item in hierarchy.list_sub_regions("Jamnagar")}
        assert rajkot
        assert jamnagar
        assert rajkot.isdisjoint(jamnagar)

    def test_unknown_parent_lists_nothing(self, hierarchy):
        """Test unknown or missing parents give an empty list."""
        assert hierarchy.list_sub_regions("Atlantis") == []
        assert hierarchy.list_sub_regions(None) == []
        assert hierarchy.list_settlements("Rajkot", "Kalavad") == []
        assert hierarchy.list_settlements("Rajkot", None) == []

    def test_settlements_of_kalavad(self, hierarchy):
        """Test villages are listed under their full parent path."""
        keys = [item.key for item in hierarchy.list_settlements("Jamnagar", "Kalavad")]
        assert "Khijadia" in keys

    def test_every_settlement_has_a_translated_label(self, hierarchy):
        """Test each village label resolves and differs from its key."""
        for region in hierarchy.list_regions():
            for sub_region in hierarchy.list_sub_regions(region.key):
                for settlement in hierarchy.list_settlements(region.key, sub_region.key):
                    path = LocationPath(
                        region=region.key,
                        sub_region=sub_region.key,
                        settlement=settlement.key,
                    )
                    label = hierarchy.resolve_label(LocationKind.SETTLEMENT, path)
                    assert label == settlement.label
                    assert label != settlement.key


class TestResolution:
    """Tests for key to label resolution."""

    def test_resolve_labels_for_full_path(self, hierarchy):
        """Test all three levels resolve in one call."""
        labels = hierarchy.resolve_labels(
            {"region": "Jamnagar", "sub_region": "Kalavad", "settlement": "Khijadia"}
        )
        assert labels[LocationKind.REGION] == "જામનગર"
        assert labels[LocationKind.SUB_REGION] == "કાળાવડ"
        assert labels[LocationKind.SETTLEMENT] == "ખીજડીયા"

    def test_camel_case_path_keys(self, hierarchy):
        """Test a path keyed the way the server spells it resolves too."""
        path = {"region": "Jamnagar", "subRegion": "Kalavad", "settlement": "Khijadia"}
        assert hierarchy.resolve_label(LocationKind.SETTLEMENT, path) == "ખીજડીયા"
        assert hierarchy.resolve_label(LocationKind.SUB_REGION, path) == "કાળાવડ"
        assert hierarchy.contains(path)

    def test_unknown_key_falls_back_to_key(self, hierarchy):
        """Test a key missing from the tree renders as itself."""
        path = {"region": "Rajkot", "sub_region": "Gondal", "settlement": "Nowhere"}
        assert hierarchy.resolve_label(LocationKind.SETTLEMENT, path) == "Nowhere"
        assert hierarchy.resolve_label(LocationKind.REGION, {"region": "Kutch"}) == "Kutch"

    def test_missing_level_is_empty(self, hierarchy):
        """Test a path without a taluka gives an empty taluka label."""
        assert hierarchy.resolve_label(LocationKind.SUB_REGION, {"region": "Rajkot"}) == ""

    def test_settlement_label_needs_right_parent(self, hierarchy):
        """Test the same village key under the wrong taluka is not resolved."""
        path = {"region": "Rajkot", "sub_region": "Rajkot", "settlement": "Khijadia"}
        assert hierarchy.resolve_label(LocationKind.SETTLEMENT, path) == "Khijadia"

    def test_find_key_by_key_or_label(self, hierarchy):
        """Test keys and Gujarati labels both map back to the key."""
        assert hierarchy.find_key(LocationKind.REGION, "Rajkot") == "Rajkot"
        assert hierarchy.find_key(LocationKind.REGION, "રાજકોટ") == "Rajkot"
        assert hierarchy.find_key(
            LocationKind.SUB_REGION, " ગોંડલ ", region_key="Rajkot"
        ) == "Gondal"
        assert hierarchy.find_key(
            LocationKind.SETTLEMENT, "Khijadia",
            region_key="Jamnagar", sub_region_key="Kalavad",
        ) == "Khijadia"

    def test_find_key_unknown(self, hierarchy):
        """Test values outside the tree give None."""
        assert hierarchy.find_key(LocationKind.REGION, "Kutch") is None
        assert hierarchy.find_key(LocationKind.SUB_REGION, "Gondal", region_key="Jamnagar") is None
        assert hierarchy.find_key(LocationKind.REGION, "") is None

    def test_contains(self, hierarchy):
        """Test path membership checks every given level."""
        assert hierarchy.contains({"region": "Rajkot", "sub_region": "Gondal"})
        assert not hierarchy.contains({"region": "Rajkot", "sub_region": "Kalavad"})
        assert not hierarchy.contains({"region": "Rajkot", "settlement": "Gondal"})


class TestHierarchyConstruction:
    """Tests for building a hierarchy from a tree."""

    def test_duplicate_keys_rejected(self):
        """Test duplicate sibling keys are refused."""
        tree = (
            ("A", "a", ()),
            ("A", "a2", ()),
        )
        with pytest.raises(ValueError):
            LocationHierarchy(tree)

    def test_empty_tree_rejected(self):
        """Test a tree needs at least one region."""
        with pytest.raises(ValueError):
            LocationHierarchy(())


class TestLocationSelection:
    """Tests for the cascading picker state."""

    def test_changing_region_clears_children(self):
        """Test picking a new district resets taluka and village."""
        selection = (
            LocationSelection()
            .with_region("Rajkot")
            .with_sub_region("Gondal")
            .with_settlement("Sardhar")
        )
        assert selection.is_complete

        changed = selection.with_region("Jamnagar")
        assert changed.region == "Jamnagar"
        assert changed.sub_region is None
        assert changed.settlement is None

    def test_changing_sub_region_clears_settlement(self):
        """Test picking a new taluka resets the village only."""
        selection = LocationSelection(region="Rajkot", sub_region="Gondal", settlement="Sardhar")
        changed = selection.with_sub_region("Jasdan")
        assert changed.region == "Rajkot"
        assert changed.settlement is None

    def test_reselecting_same_parent_keeps_children(self):
        """Test choosing the same district again changes nothing."""
        selection = LocationSelection(region="Rajkot", sub_region="Gondal", settlement="Sardhar")
        assert selection.with_region("Rajkot") == selection
        assert selection.with_sub_region("Gondal") == selection

    def test_to_path(self):
        """Test the selection converts to a key path once a region is set."""
        assert LocationSelection().to_path() is None
        path = LocationSelection(region="Rajkot", sub_region="Gondal").to_path()
        assert path.key_for(LocationKind.SUB_REGION) == "Gondal"
        assert path.settlement is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
