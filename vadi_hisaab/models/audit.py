"""
Audit Models for Vadi Hisaab

Every user action that touches the farmer's books is logged:
- drafts rejected by validation (what the farmer saw)
- records saved, updated or deleted on the server
- crop status changes
- session start and end
- API failures, with the message shown to the farmer

DESIGN DECISION: Audit events are append-only log lines. They are never
sent to the persistence service and never edited after the fact.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Drafts
    DRAFT_REJECTED = "draft_rejected"

    # Ledger
    EXPENSE_SAVED = "expense_saved"
    EXPENSE_DELETED = "expense_deleted"
    INCOME_SAVED = "income_saved"
    INCOME_UPDATED = "income_updated"
    INCOME_DELETED = "income_deleted"

    # Crops
    CROP_CREATED = "crop_created"
    CROP_STATUS_CHANGED = "crop_status_changed"
    CROP_DELETED = "crop_deleted"

    # Session and profile
    SESSION_STARTED = "session_started"
    SESSION_ENDED = "session_ended"
    PROFILE_SAVED = "profile_saved"

    # Failures
    API_ERROR = "api_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of the audit trail; every significant action
    creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity ('expense', 'income', 'crop', 'profile')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Server id of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Ties together the events of one user action"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_saved(expense_id, crop_id, ...)
        event = AuditEventBuilder.crop_status_changed(crop_id, old, new, ...)
    """

    @staticmethod
    def draft_rejected(
        entity_type: str,
        field: Optional[str],
        message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DRAFT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            correlation_id=correlation_id,
            description=f"{entity_type.capitalize()} draft rejected: {message}",
            details={"field": field},
            is_user_action=True,
        )

    @staticmethod
    def expense_saved(
        expense_id: Optional[str],
        crop_id: str,
        category: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_SAVED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense saved: {category} - ₹{amount}",
            details={
                "crop_id": crop_id,
                "category": category,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def income_saved(
        income_id: Optional[str],
        category: str,
        amount: str,
        updated: bool = False,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        verb = "updated" if updated else "saved"
        return AuditEvent(
            event_type=(
                AuditEventType.INCOME_UPDATED if updated
                else AuditEventType.INCOME_SAVED
            ),
            entity_type="income",
            entity_id=income_id,
            correlation_id=correlation_id,
            description=f"Income {verb}: {category} - ₹{amount}",
            details={
                "category": category,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def record_deleted(
        entity_type: str,
        entity_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        event_type = {
            "expense": AuditEventType.EXPENSE_DELETED,
            "income": AuditEventType.INCOME_DELETED,
            "crop": AuditEventType.CROP_DELETED,
        }[entity_type]
        return AuditEvent(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"{entity_type.capitalize()} deleted",
            is_user_action=True,
        )

    @staticmethod
    def crop_created(
        crop_id: Optional[str],
        crop_name: str,
        season: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CROP_CREATED,
            entity_type="crop",
            entity_id=crop_id,
            correlation_id=correlation_id,
            description=f"Crop created: {crop_name} ({season})",
            details={"crop_name": crop_name, "season": season},
            is_user_action=True,
        )

    @staticmethod
    def crop_status_changed(
        crop_id: str,
        old_status: str,
        new_status: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CROP_STATUS_CHANGED,
            entity_type="crop",
            entity_id=crop_id,
            correlation_id=correlation_id,
            description=f"Crop status changed: {old_status} -> {new_status}",
            details={"old_status": old_status, "new_status": new_status},
            is_user_action=True,
        )

    @staticmethod
    def profile_saved(
        profile_id: Optional[str],
        created: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_SAVED,
            entity_type="profile",
            entity_id=profile_id,
            correlation_id=correlation_id,
            description="Profile completed" if created else "Profile updated",
            details={"created": created},
            is_user_action=True,
        )

    @staticmethod
    def session_started(
        is_new_user: bool,
        profile_completed: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_STARTED,
            entity_type="session",
            correlation_id=correlation_id,
            description="Session started",
            details={
                "is_new_user": is_new_user,
                "profile_completed": profile_completed,
            },
            is_user_action=True,
        )

    @staticmethod
    def session_ended(correlation_id: Optional[UUID] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_ENDED,
            entity_type="session",
            correlation_id=correlation_id,
            description="Session ended (logout)",
            is_user_action=True,
        )

    @staticmethod
    def api_error(
        operation: str,
        error_code: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.API_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"API call failed: {operation}",
            error_code=error_code,
            error_message=error_message,
            details={"operation": operation},
            correlation_id=correlation_id,
        )
