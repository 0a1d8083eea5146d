"""
Tests for the profile location mapper and the profile cache.
"""

import asyncio

import pytest

from vadi_hisaab.models.profile import FarmerProfile
from vadi_hisaab.profile import ProfileCache, ProfileLocationMapper, ProfileMappingError


@pytest.fixture
def mapper() -> ProfileLocationMapper:
    return ProfileLocationMapper()


@pytest.fixture
def profile() -> FarmerProfile:
    return FarmerProfile(
        _id="p1",
        name="Ramesh",
        district="Jamnagar",
        taluka="Kalavad",
        village="Khijadia",
        total_land={"value": 12, "unit": "bigha"},
        water_source="Borewell",
        tractor_available=True,
        labour_type="Family",
    )


class TestToDisplay:
    """Tests for key to label conversion."""

    def test_labels(self, mapper, profile):
        """Test every keyed field is shown in Gujarati."""
        display = mapper.to_display(profile)
        assert display.district == "જામનગર"
        assert display.taluka == "કાળાવડ"
        assert display.village == "ખીજડીયા"
        assert display.total_land == "12 વીઘા"
        assert display.water_source == "⛽ બોરવેલ"
        assert display.tractor_available is True

    def test_unknown_location_shows_key(self, mapper, profile):
        """Test a key missing from the tree is shown as-is."""
        stale = profile.model_copy(update={"village": "Old Village"})
        assert mapper.to_display(stale).village == "Old Village"


class TestToStorage:
    """Tests for draft to wire payload conversion."""

    def test_labels_become_keys(self, mapper):
        """Test labels from the edit screen are stored as keys."""
        payload = mapper.to_storage({
            "name": " Ramesh ",
            "district": "રાજકોટ",
            "taluka": "ગોંડલ",
            "village": "સરધાર",
            "total_land": {"value": "10", "unit": "વીઘા"},
            "water_source": "⛽ બોરવેલ",
            "labour_type": "પારિવારિક",
            "tractor_available": True,
        })
        assert payload == {
            "name": "Ramesh",
            "district": "Rajkot",
            "taluka": "Gondal",
            "village": "Sardhar",
            "totalLand": {"value": 10.0, "unit": "bigha"},
            "waterSource": "Borewell",
            "labourType": "Family",
            "tractorAvailable": True,
        }

    def test_keys_pass_through(self, mapper):
        """Test stored keys are accepted unchanged."""
        payload = mapper.to_storage({
            "district": "Jamnagar",
            "taluka": "Kalavad",
            "village": "Khijadia",
        })
        assert payload == {"district": "Jamnagar", "taluka": "Kalavad", "village": "Khijadia"}

    def test_land_unit_defaults_to_bigha(self, mapper):
        """Test land without a unit is stored in bigha."""
        assert mapper.to_storage({"totalLand": {"value": 4}}) == {
            "totalLand": {"value": 4.0, "unit": "bigha"}
        }

    def test_partial_update(self, mapper):
        """Test only fields present in the draft are emitted."""
        assert mapper.to_storage({"waterSource": "Canal", "analyticsConsent": False}) == {
            "waterSource": "Canal",
            "analyticsConsent": False,
        }

    def test_taluka_outside_district_rejected(self, mapper):
        """Test a taluka must belong to the chosen district."""
        with pytest.raises(ProfileMappingError) as exc_info:
            mapper.to_storage({"district": "Rajkot", "taluka": "Kalavad"})
        assert exc_info.value.field == "taluka"

    def test_unknown_district_rejected(self, mapper):
        """Test an unknown district is refused."""
        with pytest.raises(ProfileMappingError) as exc_info:
            mapper.to_storage({"district": "Kutch"})
        assert exc_info.value.field == "district"

    def test_unknown_labour_type_rejected(self, mapper):
        """Test labour type must match a key or label."""
        with pytest.raises(ProfileMappingError) as exc_info:
            mapper.to_storage({"labour_type": "Robots"})
        assert exc_info.value.field == "labour_type"

    def test_unknown_land_unit_rejected(self, mapper):
        """Test land units outside acre and bigha are refused."""
        with pytest.raises(ProfileMappingError) as exc_info:
            mapper.to_storage({"total_land": {"value": 2, "unit": "hectare"}})
        assert exc_info.value.field == "land_unit"

    def test_name_must_be_text(self, mapper):
        """Test a name that is not a string is a mapping error, not a crash."""
        with pytest.raises(ProfileMappingError) as exc_info:
            mapper.to_storage({"name": 123})
        assert exc_info.value.field == "name"
        assert exc_info.value.value == 123


class TestProfileCache:
    """Tests for the read-through profile cache."""

    def test_loads_once(self, profile):
        """Test repeated reads hit the loader once."""
        calls = []

        async def loader():
            calls.append(1)
            return profile

        cache = ProfileCache(loader)

        async def scenario():
            first = await cache.get()
            second = await cache.get()
            return first, second

        first, second = asyncio.run(scenario())
        assert first is profile
        assert second is profile
        assert len(calls) == 1

    def test_invalidate_refetches(self, profile):
        """Test invalidate() forces the next read to load again."""
        calls = []

        async def loader():
            calls.append(1)
            return profile

        cache = ProfileCache(loader)
        asyncio.run(cache.get())
        cache.invalidate()
        assert cache.cached is None
        asyncio.run(cache.get())
        assert len(calls) == 2

    def test_set_replaces(self, profile):
        """Test set() stores a profile without loading."""
        async def loader():
            raise AssertionError("loader should not be called")

        cache = ProfileCache(loader)
        cache.set(profile)
        assert asyncio.run(cache.get()) is profile


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
