"""
Main Orchestrator for Vadi Hisaab

This module ties together all the components and defines the end-to-end
flows for:
1. Ledger entries (draft -> validate -> build typed record -> derive -> save)
2. Crops (create, list, change status, delete)
3. Session (one-time code sign in, consent, profile)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing invalid reaches the network: validation runs first and a
  rejected draft raises DraftValidationError before any call is made
- Every remote call is one round trip; API errors are audited and
  re-raised for the screen to show, never retried here
- Every step is audited
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic.alias_generators import to_camel

from vadi_hisaab.audit import AuditLogger, configure_logging, create_correlation_id
from vadi_hisaab.config import get_settings
from vadi_hisaab.crops import CropLifecycle, resolve_crop
from vadi_hisaab.ledger import (
    ExpenseRecord,
    IncomeRecord,
    LedgerRecordFactory,
    crop_balance,
    crop_status_counts,
)
from vadi_hisaab.ledger.numbers import is_blank, to_decimal
from vadi_hisaab.ledger.summary import CropBalance
from vadi_hisaab.models.api import IncomeSummary, OtpRequest, Page, VerifyResult
from vadi_hisaab.models.crop import AreaUnit, CropRecord, CropSeason, CropStatus
from vadi_hisaab.models.ledger import ExpenseCategory, IncomeCategory
from vadi_hisaab.models.profile import FarmerProfile, ProfileDisplay
from vadi_hisaab.models.validation import ValidationIssue
from vadi_hisaab.profile import ProfileCache, ProfileLocationMapper, ProfileMappingError
from vadi_hisaab.services.api import (
    ApiClient,
    ApiError,
    AuthInterface,
    CropStorageInterface,
    ExpenseStorageInterface,
    HttpAuthService,
    HttpCropStorage,
    HttpExpenseStorage,
    HttpIncomeStorage,
    HttpProfileStorage,
    IncomeStorageInterface,
    NotFoundError,
    ProfileStorageInterface,
    TokenStore,
)
from vadi_hisaab.validation import DraftValidationError, TransactionValidator


class _AuditedFlow:
    """Shared plumbing: reject drafts and wrap remote calls with audit."""

    def __init__(
        self,
        audit_logger: Optional[AuditLogger],
        profile_cache: Optional[ProfileCache] = None,
    ):
        self._audit_logger = audit_logger or AuditLogger()
        self._profile_cache = profile_cache

    def _reject(
        self,
        entity_type: str,
        issue: ValidationIssue,
        correlation_id: UUID,
    ) -> None:
        self._audit_logger.log_draft_rejected(
            entity_type=entity_type,
            field=issue.field,
            message=issue.message,
            correlation_id=correlation_id,
        )
        raise DraftValidationError(issue)

    async def _remote(self, operation: str, call, correlation_id: UUID):
        try:
            return await call
        except ApiError as e:
            self._audit_logger.log_api_error(operation, e, correlation_id)
            raise

    async def _farmer_id(self, correlation_id: UUID) -> Optional[str]:
        """Profile id of the signed-in farmer, sent as the record's userId."""
        if self._profile_cache is None:
            return None
        try:
            profile = await self._profile_cache.get()
        except NotFoundError:
            # Profile setup not finished yet: save without a farmer id
            return None
        except ApiError as e:
            self._audit_logger.log_api_error("get_profile", e, correlation_id)
            raise
        return profile.id


class LedgerEntryFlow(_AuditedFlow):
    """
    Orchestrates expense and income entry.

    Flow:
    1. Validate -> first issue raises DraftValidationError (no network)
    2. Build -> typed payload from the category schema
    3. Derive -> totals and unit rates filled in
    4. Persist -> one API call
    5. Audit
    """

    def __init__(
        self,
        expenses: ExpenseStorageInterface,
        incomes: IncomeStorageInterface,
        validator: Optional[TransactionValidator] = None,
        factory: Optional[LedgerRecordFactory] = None,
        audit_logger: Optional[AuditLogger] = None,
        profile_cache: Optional[ProfileCache] = None,
    ):
        super().__init__(audit_logger, profile_cache)
        self._expenses = expenses
        self._incomes = incomes
        self._validator = validator or TransactionValidator()
        self._factory = factory or LedgerRecordFactory()

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    async def submit_expense(
        self,
        crop_id: str,
        category,
        fields: Mapping[str, Any],
        mode=None,
        notes: Optional[str] = None,
        date: Optional[datetime] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ExpenseRecord:
        """
        Validate, build and save one expense for a crop.

        Raises:
            DraftValidationError: The draft is incomplete or wrong
            ApiError: The server could not be reached or refused it
        """
        correlation_id = correlation_id or create_correlation_id()

        issue = (
            self._validator.validate_crop_reference(crop_id)
            or self._validator.validate(category, fields, mode, kind=ExpenseCategory)
        )
        if issue:
            self._reject("expense", issue, correlation_id)

        record = self._factory.build_expense(
            crop_id, category, fields, mode=mode, notes=notes, date=date,
            user_id=await self._farmer_id(correlation_id),
        )
        saved = await self._remote(
            "create_expense", self._expenses.create(record), correlation_id
        )

        self._audit_logger.log_expense_saved(
            expense_id=saved.id,
            crop_id=crop_id,
            category=saved.category.value,
            amount=str(saved.amount),
            correlation_id=correlation_id,
        )
        return saved

    async def list_expenses(
        self,
        crop_id: Optional[str] = None,
        category: Optional[ExpenseCategory] = None,
        page: int = 1,
    ) -> Page[ExpenseRecord]:
        return await self._remote(
            "list_expenses",
            self._expenses.list(crop_id=crop_id, category=category, page=page),
            create_correlation_id(),
        )

    async def delete_expense(
        self,
        expense_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        correlation_id = correlation_id or create_correlation_id()
        await self._remote(
            "delete_expense", self._expenses.delete(expense_id), correlation_id
        )
        self._audit_logger.log_deleted("expense", expense_id, correlation_id)

    # -------------------------------------------------------------------------
    # Incomes
    # -------------------------------------------------------------------------

    async def _build_income(
        self,
        category,
        fields: Mapping[str, Any],
        crop_id: Optional[str],
        notes: Optional[str],
        date: Optional[datetime],
        correlation_id: UUID,
    ) -> IncomeRecord:
        issue = self._validator.validate(category, fields, kind=IncomeCategory)
        if issue:
            self._reject("income", issue, correlation_id)
        return self._factory.build_income(
            category, fields, crop_id=crop_id, notes=notes, date=date,
            user_id=await self._farmer_id(correlation_id),
        )

    async def submit_income(
        self,
        category,
        fields: Mapping[str, Any],
        crop_id: Optional[str] = None,
        notes: Optional[str] = None,
        date: Optional[datetime] = None,
        correlation_id: Optional[UUID] = None,
    ) -> IncomeRecord:
        """Validate, build and save one income (crop optional)."""
        correlation_id = correlation_id or create_correlation_id()
        record = await self._build_income(
            category, fields, crop_id, notes, date, correlation_id
        )
        saved = await self._remote(
            "create_income", self._incomes.create(record), correlation_id
        )
        self._audit_logger.log_income_saved(
            income_id=saved.id,
            category=saved.category.value,
            amount=str(saved.amount),
            correlation_id=correlation_id,
        )
        return saved

    async def update_income(
        self,
        income_id: str,
        category,
        fields: Mapping[str, Any],
        crop_id: Optional[str] = None,
        notes: Optional[str] = None,
        date: Optional[datetime] = None,
        correlation_id: Optional[UUID] = None,
    ) -> IncomeRecord:
        """Replace an income's category and payload with a new draft."""
        correlation_id = correlation_id or create_correlation_id()
        record = await self._build_income(
            category, fields, crop_id, notes, date, correlation_id
        )
        saved = await self._remote(
            "update_income",
            self._incomes.update(income_id, record),
            correlation_id,
        )
        self._audit_logger.log_income_saved(
            income_id=income_id,
            category=saved.category.value,
            amount=str(saved.amount),
            updated=True,
            correlation_id=correlation_id,
        )
        return saved

    async def list_incomes(
        self,
        page: int = 1,
        crop_id: Optional[str] = None,
        category: Optional[IncomeCategory] = None,
        year: Optional[int] = None,
    ) -> Page[IncomeRecord]:
        return await self._remote(
            "list_incomes",
            self._incomes.list(
                page=page, crop_id=crop_id, category=category, year=year
            ),
            create_correlation_id(),
        )

    async def income_summary(self, year: Optional[int] = None) -> IncomeSummary:
        return await self._remote(
            "income_summary", self._incomes.summary(year), create_correlation_id()
        )

    async def delete_income(
        self,
        income_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        correlation_id = correlation_id or create_correlation_id()
        await self._remote(
            "delete_income", self._incomes.delete(income_id), correlation_id
        )
        self._audit_logger.log_deleted("income", income_id, correlation_id)

    async def crop_balance(self, crop_id: str) -> CropBalance:
        """Income, expense and profit of one crop (first page of each)."""
        expenses = await self.list_expenses(crop_id=crop_id)
        incomes = await self.list_incomes(crop_id=crop_id)
        return crop_balance(crop_id, expenses.items, incomes.items)


class CropFlow(_AuditedFlow):
    """
    Orchestrates crop records.

    Status changes go through CropLifecycle, which allows every
    transition; this flow only persists and audits them.
    """

    def __init__(
        self,
        crops: CropStorageInterface,
        validator: Optional[TransactionValidator] = None,
        lifecycle: Optional[CropLifecycle] = None,
        audit_logger: Optional[AuditLogger] = None,
        profile_cache: Optional[ProfileCache] = None,
    ):
        super().__init__(audit_logger, profile_cache)
        self._crops = crops
        self._validator = validator or TransactionValidator()
        self._lifecycle = lifecycle or CropLifecycle()

    async def create_crop(
        self,
        fields: Mapping[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> CropRecord:
        """
        Validate and save a new planting.

        `fields` takes season, crop_name (catalog value) or custom_crop
        (free text), area, and optionally area_unit, year, sub_variety,
        batch_label and notes.
        """
        correlation_id = correlation_id or create_correlation_id()

        issue = self._validator.validate_crop(fields)
        if issue:
            self._reject("crop", issue, correlation_id)

        def read(name: str):
            if name in fields:
                return fields[name]
            return fields.get(to_camel(name))

        crop_name, emoji = resolve_crop(read("crop_name"), read("custom_crop"))
        # Area and year are parsed the way the validator parsed them
        extra = {
            name: read(name)
            for name in ("sub_variety", "batch_label", "notes")
            if not is_blank(read(name))
        }
        if not is_blank(read("year")):
            extra["year"] = int(to_decimal(read("year")))
        crop = CropRecord(
            season=read("season"),
            crop_name=crop_name,
            crop_emoji=emoji,
            area=to_decimal(read("area")),
            area_unit=read("area_unit") or AreaUnit.BIGHA,
            status=self._lifecycle.initial_status(),
            user_id=await self._farmer_id(correlation_id),
            **extra,
        )

        saved = await self._remote("create_crop", self._crops.create(crop), correlation_id)
        self._audit_logger.log_crop_created(
            crop_id=saved.id,
            crop_name=saved.crop_name,
            season=saved.season.value,
            correlation_id=correlation_id,
        )
        return saved

    async def list_crops(
        self,
        page: int = 1,
        season: Optional[CropSeason] = None,
        status: Optional[CropStatus] = None,
    ) -> Page[CropRecord]:
        return await self._remote(
            "list_crops",
            self._crops.list(page=page, season=season, status=status),
            create_correlation_id(),
        )

    async def status_counts(
        self,
        season: Optional[CropSeason] = None,
    ) -> dict[CropStatus, int]:
        crops = await self.list_crops(season=season)
        return crop_status_counts(crops.items)

    async def set_status(
        self,
        crop: CropRecord,
        target,
        correlation_id: Optional[UUID] = None,
    ) -> CropRecord:
        """Set any status from any status, then persist it."""
        correlation_id = correlation_id or create_correlation_id()
        new_status = self._lifecycle.set_status(crop.status, target)

        saved = await self._remote(
            "update_crop_status",
            self._crops.update_status(crop.id, new_status),
            correlation_id,
        )
        self._audit_logger.log_crop_status_changed(
            crop_id=crop.id,
            old_status=crop.status.value,
            new_status=new_status.value,
            correlation_id=correlation_id,
        )
        return saved

    async def cycle_status(
        self,
        crop: CropRecord,
        correlation_id: Optional[UUID] = None,
    ) -> CropRecord:
        """Quick action: Active -> Harvested -> Closed -> Active."""
        target = self._lifecycle.next_status(crop.status)
        return await self.set_status(crop, target, correlation_id)

    async def delete_crop(
        self,
        crop_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Delete the crop. Its expenses and incomes are not touched."""
        correlation_id = correlation_id or create_correlation_id()
        await self._remote("delete_crop", self._crops.delete(crop_id), correlation_id)
        self._audit_logger.log_deleted("crop", crop_id, correlation_id)


class SessionFlow(_AuditedFlow):
    """
    Orchestrates sign in and the farmer profile.

    The profile lives in a ProfileCache filled at session start and
    cleared at logout; other flows receive it as an argument.
    """

    def __init__(
        self,
        auth: AuthInterface,
        profiles: ProfileStorageInterface,
        profile_cache: Optional[ProfileCache] = None,
        mapper: Optional[ProfileLocationMapper] = None,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__(audit_logger)
        self._auth = auth
        self._profiles = profiles
        self._cache = profile_cache or ProfileCache(profiles.get_mine)
        self._mapper = mapper or ProfileLocationMapper()
        self._validator = validator or TransactionValidator()

    @property
    def profile_cache(self) -> ProfileCache:
        return self._cache

    async def request_code(self, phone: str) -> OtpRequest:
        return await self._remote(
            "send_otp", self._auth.send_otp(phone), create_correlation_id()
        )

    async def verify_code(
        self,
        phone: str,
        otp: str,
        session_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> VerifyResult:
        """Sign in. Loads the profile into the cache when one exists."""
        correlation_id = correlation_id or create_correlation_id()
        result = await self._remote(
            "verify_otp",
            self._auth.verify_otp(phone, otp, session_id),
            correlation_id,
        )
        self._cache.invalidate()
        # The token is already saved, so the session has started even if
        # the profile load below fails
        self._audit_logger.log_session_started(
            is_new_user=result.is_new_user,
            profile_completed=result.is_profile_completed,
            correlation_id=correlation_id,
        )
        if result.is_profile_completed:
            await self._remote("get_profile", self._cache.get(), correlation_id)
        return result

    async def give_consent(self, consent: bool) -> bool:
        return await self._remote(
            "save_consent", self._auth.save_consent(consent), create_correlation_id()
        )

    def _storage_payload(self, draft: Mapping[str, Any], correlation_id: UUID) -> dict:
        issue = self._validator.validate_profile(draft)
        if issue:
            self._reject("profile", issue, correlation_id)
        try:
            return self._mapper.to_storage(draft)
        except ProfileMappingError as e:
            self._reject(
                "profile",
                ValidationIssue.invalid_choice(e.field, e.value),
                correlation_id,
            )

    async def complete_profile(
        self,
        draft: Mapping[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> FarmerProfile:
        """First-time profile setup. Location may be given as keys or labels."""
        correlation_id = correlation_id or create_correlation_id()
        payload = self._storage_payload(draft, correlation_id)

        profile = await self._remote(
            "complete_profile", self._profiles.complete(payload), correlation_id
        )
        self._cache.set(profile)
        self._audit_logger.log_profile_saved(profile.id, True, correlation_id)
        return profile

    async def update_profile(
        self,
        changes: Mapping[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> FarmerProfile:
        """
        Edit the profile.

        Changes are merged over the current profile and the WHOLE result
        is checked, so a new district with the old taluka is refused.
        """
        correlation_id = correlation_id or create_correlation_id()
        current = await self._remote("get_profile", self._cache.get(), correlation_id)

        merged = {**current.to_wire(), **changes}
        payload = self._storage_payload(merged, correlation_id)

        profile = await self._remote(
            "update_profile", self._profiles.update(payload), correlation_id
        )
        self._cache.set(profile)
        self._audit_logger.log_profile_saved(profile.id, False, correlation_id)
        return profile

    async def current_profile(self) -> FarmerProfile:
        return await self._remote("get_profile", self._cache.get(), create_correlation_id())

    async def display_profile(self) -> ProfileDisplay:
        return self._mapper.to_display(await self.current_profile())

    async def logout(self) -> None:
        await self._auth.logout()
        self._cache.invalidate()
        self._audit_logger.log_session_ended()


def create_app_components(
    token_store: Optional[TokenStore] = None,
    transport=None,
) -> tuple[LedgerEntryFlow, CropFlow, SessionFlow, ApiClient]:
    """
    Factory function to create all application components.

    Args:
        token_store: Where the session token lives. Defaults to the file
                    named by VADI_SESSION_TOKEN_PATH.
        transport: httpx transport override (tests use httpx.MockTransport)

    Returns:
        (ledger_flow, crop_flow, session_flow, api_client)
        Close the client with `await api_client.aclose()` when done.
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)
    token_store = token_store or TokenStore(settings.session.token_path)
    client = ApiClient(token_store, transport=transport)

    audit_logger = AuditLogger()
    validator = TransactionValidator()
    profiles = HttpProfileStorage(client)
    # One cache per process, shared so every flow sees the same farmer
    profile_cache = ProfileCache(profiles.get_mine)

    ledger_flow = LedgerEntryFlow(
        expenses=HttpExpenseStorage(client),
        incomes=HttpIncomeStorage(client),
        validator=validator,
        audit_logger=audit_logger,
        profile_cache=profile_cache,
    )
    crop_flow = CropFlow(
        crops=HttpCropStorage(client),
        validator=validator,
        audit_logger=audit_logger,
        profile_cache=profile_cache,
    )
    session_flow = SessionFlow(
        auth=HttpAuthService(client),
        profiles=profiles,
        profile_cache=profile_cache,
        validator=validator,
        audit_logger=audit_logger,
    )
    return ledger_flow, crop_flow, session_flow, client
