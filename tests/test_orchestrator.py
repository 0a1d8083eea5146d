"""
Tests for the orchestrator flows.

The flows run against in-memory fakes of the persistence interfaces, and
once end to end through the real HTTP services over httpx.MockTransport.
"""

import asyncio
import json
from decimal import Decimal
from typing import Optional

import httpx
import pytest

from vadi_hisaab.audit import AuditLogger
from vadi_hisaab.models.api import IncomeSummary, OtpRequest, Page, VerifyResult
from vadi_hisaab.models.audit import AuditEventType
from vadi_hisaab.models.crop import CropRecord, CropStatus
from vadi_hisaab.models.profile import FarmerProfile
from vadi_hisaab.models.validation import ValidationErrorKind
from vadi_hisaab.orchestrator import (
    CropFlow,
    LedgerEntryFlow,
    SessionFlow,
    create_app_components,
)
from vadi_hisaab.profile import ProfileCache
from vadi_hisaab.services.api import (
    AuthInterface,
    CropStorageInterface,
    ExpenseStorageInterface,
    IncomeStorageInterface,
    MemoryTokenStore,
    NotFoundError,
    ProfileStorageInterface,
    RequestTimeoutError,
)
from vadi_hisaab.validation import DraftValidationError


def _run(coroutine):
    return asyncio.run(coroutine)


# =============================================================================
# FAKES
# =============================================================================

class RecordingAuditLogger(AuditLogger):
    """Keeps events in memory instead of logging them."""

    def __init__(self):
        super().__init__()
        self.events = []

    def log(self, event):
        self.events.append(event)

    @property
    def types(self):
        return [event.event_type for event in self.events]


class _Store:
    prefix = "x"

    def __init__(self, fail_with: Optional[Exception] = None):
        self.items = {}
        self.calls = 0
        self.fail_with = fail_with

    def _check(self):
        self.calls += 1
        if self.fail_with is not None:
            raise self.fail_with

    def _save(self, record):
        record_id = record.id or f"{self.prefix}{len(self.items) + 1}"
        saved = record.model_copy(update={"id": record_id})
        self.items[record_id] = saved
        return saved

    def _get(self, record_id):
        if record_id not in self.items:
            raise NotFoundError("Not found", 404)
        return self.items[record_id]


class FakeExpenses(_Store, ExpenseStorageInterface):
    prefix = "e"

    async def create(self, expense):
        self._check()
        return self._save(expense)

    async def list(self, crop_id=None, category=None, page=1, limit=None):
        self._check()
        items = [
            r for r in self.items.values()
            if (crop_id is None or r.crop_id == crop_id)
            and (category is None or r.category == category)
        ]
        return Page(items=items)

    async def get(self, expense_id):
        self._check()
        return self._get(expense_id)

    async def delete(self, expense_id):
        self._check()
        self.items.pop(expense_id, None)


class FakeIncomes(_Store, IncomeStorageInterface):
    prefix = "i"

    async def create(self, income):
        self._check()
        return self._save(income)

    async def get(self, income_id):
        self._check()
        return self._get(income_id)

    async def update(self, income_id, income):
        self._check()
        self._get(income_id)
        return self._save(income.model_copy(update={"id": income_id}))

    async def list(self, page=1, limit=None, crop_id=None, category=None, year=None):
        self._check()
        items = [
            r for r in self.items.values()
            if crop_id is None or r.crop_id == crop_id
        ]
        return Page(items=items)

    async def summary(self, year=None):
        self._check()
        return IncomeSummary(year=year)

    async def delete(self, income_id):
        self._check()
        self.items.pop(income_id, None)


class FakeCrops(_Store, CropStorageInterface):
    prefix = "c"

    async def create(self, crop):
        self._check()
        return self._save(crop)

    async def list(self, page=1, limit=None, season=None, status=None):
        self._check()
        items = [
            c for c in self.items.values()
            if (season is None or c.season == season)
            and (status is None or c.status == status)
        ]
        return Page(items=items)

    async def get(self, crop_id):
        self._check()
        return self._get(crop_id)

    async def update(self, crop_id, changes):
        self._check()
        return self._save(self._get(crop_id).model_copy(update=changes))

    async def update_status(self, crop_id, status):
        self._check()
        return self._save(self._get(crop_id).model_copy(update={"status": status}))

    async def delete(self, crop_id):
        self._check()
        self.items.pop(crop_id, None)


class FakeAuth(AuthInterface):
    def __init__(self, profile_completed: bool = True):
        self.token = None
        self.profile_completed = profile_completed

    async def send_otp(self, phone):
        return OtpRequest(message="OTP sent", session_id="s1")

    async def verify_otp(self, phone, otp, session_id):
        self.token = "tok"
        return VerifyResult(
            token="tok",
            is_new_user=not self.profile_completed,
            is_profile_completed=self.profile_completed,
        )

    async def save_consent(self, consent):
        return consent

    async def logout(self):
        self.token = None

    @property
    def is_signed_in(self):
        return self.token is not None


class FakeProfiles(ProfileStorageInterface):
    def __init__(self, profile: Optional[FarmerProfile] = None):
        self.profile = profile
        self.loads = 0
        self.sent = []

    async def get_mine(self):
        self.loads += 1
        if self.profile is None:
            raise NotFoundError("Profile not found", 404)
        return self.profile

    async def complete(self, payload):
        self.sent.append(payload)
        self.profile = FarmerProfile.model_validate({**payload, "_id": "p1"})
        return self.profile

    async def update(self, payload):
        self.sent.append(payload)
        merged = {**self.profile.to_wire(), **payload}
        self.profile = FarmerProfile.model_validate(merged)
        return self.profile


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def audit() -> RecordingAuditLogger:
    return RecordingAuditLogger()


@pytest.fixture
def ledger(audit):
    return LedgerEntryFlow(FakeExpenses(), FakeIncomes(), audit_logger=audit)


@pytest.fixture
def crops(audit):
    return CropFlow(FakeCrops(), audit_logger=audit)


@pytest.fixture
def stored_profile() -> FarmerProfile:
    return FarmerProfile(
        _id="p1",
        name="Ramesh",
        district="Rajkot",
        taluka="Gondal",
        village="Sardhar",
        total_land={"value": 10, "unit": "bigha"},
        water_source="Borewell",
        tractor_available=True,
        labour_type="Family",
    )


@pytest.fixture
def profile_cache(stored_profile) -> ProfileCache:
    return ProfileCache(FakeProfiles(stored_profile).get_mine)


LABOUR_DRAFT = {"task": "Weeding", "numberOfPeople": "3", "days": "2", "dailyRate": "300"}


# =============================================================================
# LEDGER
# =============================================================================

class TestLedgerEntryFlow:
    """Tests for expense and income entry."""

    def test_submit_expense(self, ledger, audit):
        """Test a valid draft is saved with its derived total."""
        saved = _run(ledger.submit_expense("c1", "Labour", LABOUR_DRAFT, mode="Daily"))
        assert saved.id == "e1"
        assert saved.payload.total_cost == Decimal("1800.00")
        assert audit.types == [AuditEventType.EXPENSE_SAVED]
        assert audit.events[0].details["amount"] == "1800.00"

    def test_invalid_draft_never_reaches_storage(self, ledger, audit):
        """Test a rejected draft makes no call and is audited."""
        with pytest.raises(DraftValidationError) as exc_info:
            _run(ledger.submit_expense("c1", "Fertilizer", {"product_name": "Urea"}))
        assert exc_info.value.issue.field == "total_cost"
        assert ledger._expenses.calls == 0
        assert audit.types == [AuditEventType.DRAFT_REJECTED]

    def test_expense_needs_crop(self, ledger):
        """Test expenses without a crop are refused before category checks."""
        with pytest.raises(DraftValidationError) as exc_info:
            _run(ledger.submit_expense("", "Tractor", {}))
        assert exc_info.value.issue.field == "crop_id"

    def test_api_error_audited_and_raised(self, audit):
        """Test a failed save is audited and the draft not marked saved."""
        flow = LedgerEntryFlow(
            FakeExpenses(fail_with=RequestTimeoutError()),
            FakeIncomes(),
            audit_logger=audit,
        )
        with pytest.raises(RequestTimeoutError):
            _run(flow.submit_expense("c1", "Seed", {"seed_type": "Hybrid", "total_cost": "250"}))
        assert audit.types == [AuditEventType.API_ERROR]
        assert audit.events[0].error_code == "RequestTimeoutError"

    def test_income_without_crop(self, ledger, audit):
        """Test incomes may be saved with no crop."""
        saved = _run(ledger.submit_income(
            "Subsidy", {"schemeType": "PM-KISAN", "amount": "2000"}
        ))
        assert saved.crop_id is None
        assert audit.types == [AuditEventType.INCOME_SAVED]

    def test_update_income(self, ledger, audit):
        """Test an income can be replaced with a different category."""
        saved = _run(ledger.submit_income("Subsidy", {"scheme_type": "PM-KISAN", "amount": "2000"}))
        updated = _run(ledger.update_income(
            saved.id, "Other", {"source": "ડેરી", "amount": "800"}
        ))
        assert updated.id == saved.id
        assert updated.amount == Decimal("800.00")
        assert audit.types[-1] == AuditEventType.INCOME_UPDATED

    def test_delete_audited(self, ledger, audit):
        """Test deletions are audited per entity."""
        saved = _run(ledger.submit_expense("c1", "Labour", LABOUR_DRAFT))
        _run(ledger.delete_expense(saved.id))
        assert audit.types[-1] == AuditEventType.EXPENSE_DELETED
        assert _run(ledger.list_expenses(crop_id="c1")).items == []

    def test_crop_balance(self, ledger):
        """Test the balance combines a crop's expenses and incomes."""
        _run(ledger.submit_expense("c1", "Labour", LABOUR_DRAFT))
        _run(ledger.submit_expense("c2", "Seed", {"seed_type": "Hybrid", "total_cost": "999"}))
        _run(ledger.submit_income(
            "Crop Sale", {"quantity_kg": "100", "price_per_kg": "55.5"}, crop_id="c1"
        ))
        balance = _run(ledger.crop_balance("c1"))
        assert balance.expense == Decimal("1800.00")
        assert balance.income == Decimal("5550.00")
        assert balance.profit == Decimal("3750.00")

    def test_income_tag_refused_as_expense(self, ledger, audit):
        """Test an income category in the expense form is an unknown category."""
        with pytest.raises(DraftValidationError) as exc_info:
            _run(ledger.submit_expense(
                "c1", "Crop Sale", {"quantityKg": "10", "pricePerKg": "20"}
            ))
        assert exc_info.value.issue.kind is ValidationErrorKind.UNKNOWN_CATEGORY
        assert ledger._expenses.calls == 0
        assert audit.types == [AuditEventType.DRAFT_REJECTED]

    def test_expense_tag_refused_as_income(self, ledger, audit):
        """Test an expense category in the income form is an unknown category."""
        with pytest.raises(DraftValidationError) as exc_info:
            _run(ledger.submit_income("Seed", {"seed_type": "Hybrid", "total_cost": "250"}))
        assert exc_info.value.issue.kind is ValidationErrorKind.UNKNOWN_CATEGORY
        assert ledger._incomes.calls == 0
        assert audit.types == [AuditEventType.DRAFT_REJECTED]

    def test_records_carry_farmer_id(self, profile_cache, audit):
        """Test expenses and incomes are sent with the signed-in farmer's id."""
        flow = LedgerEntryFlow(
            FakeExpenses(), FakeIncomes(), audit_logger=audit, profile_cache=profile_cache,
        )
        expense = _run(flow.submit_expense("c1", "Labour", LABOUR_DRAFT))
        income = _run(flow.submit_income("Subsidy", {"schemeType": "PM-KISAN", "amount": "2000"}))
        assert expense.user_id == "p1"
        assert expense.to_wire()["userId"] == "p1"
        assert income.to_wire()["userId"] == "p1"

    def test_no_profile_yet_saves_without_farmer_id(self, audit):
        """Test a farmer who has not set up a profile can still save."""
        flow = LedgerEntryFlow(
            FakeExpenses(), FakeIncomes(), audit_logger=audit,
            profile_cache=ProfileCache(FakeProfiles().get_mine),
        )
        saved = _run(flow.submit_expense("c1", "Labour", LABOUR_DRAFT))
        assert saved.user_id is None
        assert "userId" not in saved.to_wire()
        assert audit.types == [AuditEventType.EXPENSE_SAVED]


# =============================================================================
# CROPS
# =============================================================================

class TestCropFlow:
    """Tests for crop creation and status changes."""

    def test_create_catalog_crop(self, crops, audit):
        """Test a catalog crop is saved Active with its emoji."""
        crop = _run(crops.create_crop({
            "season": "kharif", "crop_name": "Cotton", "area": "5", "batch_label": "Plot 2",
        }))
        assert crop.id == "c1"
        assert crop.crop_emoji == "🌿"
        assert crop.status is CropStatus.ACTIVE
        assert crop.display_name == "Cotton - Plot 2"
        assert audit.types == [AuditEventType.CROP_CREATED]

    def test_create_custom_crop(self, crops):
        """Test typed-in crops get the custom emoji and keep the unit."""
        crop = _run(crops.create_crop({
            "season": "Rabi", "customCrop": "Isabgol", "area": "2", "areaUnit": "Acre",
            "year": 2025,
        }))
        assert crop.crop_name == "Isabgol"
        assert crop.crop_emoji == "🌱"
        assert crop.year == 2025
        assert crop.area_unit.value == "Acre"

    def test_area_and_year_parsed_like_the_form(self, crops):
        """Test grouped digits and a whole-number year are accepted."""
        crop = _run(crops.create_crop({
            "season": "Kharif", "crop_name": "Cotton", "area": "1,000", "year": "2024.0",
        }))
        assert crop.area == Decimal("1000")
        assert crop.year == 2024

    def test_crop_carries_farmer_id(self, profile_cache, audit):
        """Test a new crop is sent with the signed-in farmer's id."""
        flow = CropFlow(FakeCrops(), audit_logger=audit, profile_cache=profile_cache)
        crop = _run(flow.create_crop({"season": "Kharif", "crop_name": "Cotton", "area": "5"}))
        assert crop.user_id == "p1"
        assert crop.to_wire()["userId"] == "p1"

    def test_invalid_crop_rejected(self, crops, audit):
        """Test a crop draft without area never reaches storage."""
        with pytest.raises(DraftValidationError):
            _run(crops.create_crop({"season": "Kharif", "crop_name": "Cotton"}))
        assert crops._crops.calls == 0
        assert audit.types == [AuditEventType.DRAFT_REJECTED]

    def test_reopen_closed_crop(self, crops, audit):
        """Test a closed crop can be set back to Active."""
        crop = _run(crops.create_crop({"season": "Kharif", "crop_name": "Cotton", "area": "5"}))
        closed = _run(crops.set_status(crop, "Closed"))
        reopened = _run(crops.set_status(closed, CropStatus.ACTIVE))
        assert reopened.status is CropStatus.ACTIVE
        changed = [e for e in audit.events if e.event_type == AuditEventType.CROP_STATUS_CHANGED]
        assert changed[-1].details == {"old_status": "Closed", "new_status": "Active"}

    def test_cycle_and_counts(self, crops):
        """Test the quick action and the per-status counts."""
        cotton = _run(crops.create_crop({"season": "Kharif", "crop_name": "Cotton", "area": "5"}))
        _run(crops.create_crop({"season": "Kharif", "crop_name": "Groundnut", "area": "3"}))
        harvested = _run(crops.cycle_status(cotton))
        assert harvested.status is CropStatus.HARVESTED

        counts = _run(crops.status_counts())
        assert counts == {
            CropStatus.ACTIVE: 1,
            CropStatus.HARVESTED: 1,
            CropStatus.CLOSED: 0,
        }

    def test_delete_leaves_ledger(self, audit):
        """Test deleting a crop does not touch its expenses."""
        expenses = FakeExpenses()
        ledger = LedgerEntryFlow(expenses, FakeIncomes(), audit_logger=audit)
        crop_flow = CropFlow(FakeCrops(), audit_logger=audit)

        crop = _run(crop_flow.create_crop({"season": "Kharif", "crop_name": "Cotton", "area": "5"}))
        _run(ledger.submit_expense(crop.id, "Labour", LABOUR_DRAFT))
        _run(crop_flow.delete_crop(crop.id))

        assert len(expenses.items) == 1
        assert audit.types[-1] == AuditEventType.CROP_DELETED


# =============================================================================
# SESSION
# =============================================================================

class TestSessionFlow:
    """Tests for sign in and profile handling."""

    def test_verify_loads_profile(self, stored_profile, audit):
        """Test sign in fills the profile cache for returning farmers."""
        profiles = FakeProfiles(stored_profile)
        flow = SessionFlow(FakeAuth(), profiles, audit_logger=audit)

        result = _run(flow.verify_code("9876543210", "1234", "s1"))
        assert result.is_profile_completed is True
        assert flow.profile_cache.cached is stored_profile
        assert profiles.loads == 1
        assert audit.types == [AuditEventType.SESSION_STARTED]

        _run(flow.current_profile())
        assert profiles.loads == 1

    def test_new_farmer_has_no_profile_yet(self, audit):
        """Test sign in does not fetch a profile that does not exist."""
        profiles = FakeProfiles()
        flow = SessionFlow(FakeAuth(profile_completed=False), profiles, audit_logger=audit)
        _run(flow.verify_code("9876543210", "1234", "s1"))
        assert profiles.loads == 0
        assert flow.profile_cache.cached is None

    def test_session_started_even_if_profile_load_fails(self, audit):
        """Test the sign in is audited before the profile load that fails."""
        auth = FakeAuth(profile_completed=True)
        flow = SessionFlow(auth, FakeProfiles(), audit_logger=audit)
        with pytest.raises(NotFoundError):
            _run(flow.verify_code("9876543210", "1234", "s1"))
        assert auth.is_signed_in is True
        assert audit.types == [AuditEventType.SESSION_STARTED, AuditEventType.API_ERROR]
        assert flow.profile_cache.cached is None

    def test_complete_profile_sends_keys(self, audit):
        """Test labels chosen on screen are sent as keys."""
        profiles = FakeProfiles()
        flow = SessionFlow(FakeAuth(profile_completed=False), profiles, audit_logger=audit)
        profile = _run(flow.complete_profile({
            "name": "Ramesh",
            "district": "જામનગર",
            "taluka": "કાળાવડ",
            "village": "ખીજડીયા",
            "total_land": {"value": "12", "unit": "bigha"},
            "water_source": "Canal",
            "labour_type": "Mixed",
            "tractor_available": False,
        }))
        assert profiles.sent[0]["district"] == "Jamnagar"
        assert profiles.sent[0]["village"] == "Khijadia"
        assert profile.id == "p1"
        assert flow.profile_cache.cached is profile
        assert audit.types == [AuditEventType.PROFILE_SAVED]

        display = _run(flow.display_profile())
        assert display.district == "જામનગર"

    def test_incomplete_profile_rejected(self, audit):
        """Test a profile draft missing its village is not sent."""
        profiles = FakeProfiles()
        flow = SessionFlow(FakeAuth(), profiles, audit_logger=audit)
        with pytest.raises(DraftValidationError) as exc_info:
            _run(flow.complete_profile({"name": "Ramesh", "district": "Rajkot", "taluka": "Gondal"}))
        assert exc_info.value.issue.field == "village"
        assert profiles.sent == []

    def test_changing_district_requires_new_taluka(self, stored_profile, audit):
        """Test the old taluka is not carried into a new district."""
        profiles = FakeProfiles(stored_profile)
        flow = SessionFlow(FakeAuth(), profiles, audit_logger=audit)
        with pytest.raises(DraftValidationError) as exc_info:
            _run(flow.update_profile({"district": "Jamnagar"}))
        assert exc_info.value.issue.field == "taluka"
        assert profiles.sent == []

    def test_update_profile(self, stored_profile, audit):
        """Test a consistent location change is saved and cached."""
        profiles = FakeProfiles(stored_profile)
        flow = SessionFlow(FakeAuth(), profiles, audit_logger=audit)
        updated = _run(flow.update_profile({
            "district": "Jamnagar", "taluka": "Kalavad", "village": "Khijadia",
        }))
        assert updated.district == "Jamnagar"
        assert profiles.sent[0]["taluka"] == "Kalavad"
        assert flow.profile_cache.cached is updated

    def test_logout_clears_cache(self, stored_profile, audit):
        """Test logout ends the session and forgets the profile."""
        auth = FakeAuth()
        flow = SessionFlow(auth, FakeProfiles(stored_profile), audit_logger=audit)
        _run(flow.verify_code("9876543210", "1234", "s1"))
        _run(flow.logout())
        assert auth.is_signed_in is False
        assert flow.profile_cache.cached is None
        assert audit.types[-1] == AuditEventType.SESSION_ENDED


# =============================================================================
# WIRING
# =============================================================================

PROFILE_DOCUMENT = {
    "_id": "p1", "name": "Ramesh", "district": "Rajkot", "taluka": "Gondal",
    "village": "Sardhar", "totalLand": {"value": 10, "unit": "bigha"},
    "waterSource": "Rain", "labourType": "Family",
}


class TestCreateAppComponents:
    """Tests for the component factory over a mock transport."""

    def test_expense_round_trip(self):
        """Test a draft reaches the server as a typed record."""
        requests = []

        def handler(request):
            if request.method == "GET":
                assert request.url.path.endswith("/profile/me")
                return httpx.Response(200, json={"profile": PROFILE_DOCUMENT})
            body = json.loads(request.content)
            requests.append((request.method, request.url.path, body, request.headers.get("Authorization")))
            return httpx.Response(201, json={"success": True, "data": {**body, "_id": "e1"}})

        ledger_flow, crop_flow, session_flow, client = create_app_components(
            token_store=MemoryTokenStore("tok"),
            transport=httpx.MockTransport(handler),
        )

        async def scenario():
            async with client:
                return await ledger_flow.submit_expense("c1", "Labour", LABOUR_DRAFT)

        saved = _run(scenario())
        method, path, body, auth = requests[0]
        assert method == "POST"
        assert path.endswith("/expenses")
        assert body["labourDaily"]["totalCost"] == 1800.0
        assert body["userId"] == "p1"
        assert auth == "Bearer tok"
        assert saved.id == "e1"
        assert isinstance(crop_flow, CropFlow)
        assert session_flow.profile_cache.cached.id == "p1"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
