"""
Audit Logger

DESIGN DECISION: Every action that changes the farmer's books is logged
as one structured JSON line. This provides:
1. Traceability of what was saved, changed or deleted
2. The exact message a farmer saw when something failed

The audit logger:
- Is synchronous and local; it never calls the persistence service
- Supports correlation IDs to trace the events of one user action
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from vadi_hisaab.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route stdlib logging (and so structlog) to stderr at `level`."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level))


class AuditLogger:
    """
    Central audit logging service.

    Severity decides the log method: errors go to .error(), warnings to
    .warning(), everything else to .info().
    """

    def __init__(self, logger_name: str = "vadi_hisaab.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> None:
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_draft_rejected(
        self,
        entity_type: str,
        field: Optional[str],
        message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a draft the validator turned away."""
        self.log(AuditEventBuilder.draft_rejected(
            entity_type=entity_type,
            field=field,
            message=message,
            correlation_id=correlation_id,
        ))

    def log_expense_saved(
        self,
        expense_id: Optional[str],
        crop_id: str,
        category: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.expense_saved(
            expense_id=expense_id,
            crop_id=crop_id,
            category=category,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_income_saved(
        self,
        income_id: Optional[str],
        category: str,
        amount: str,
        updated: bool = False,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.income_saved(
            income_id=income_id,
            category=category,
            amount=amount,
            updated=updated,
            correlation_id=correlation_id,
        ))

    def log_deleted(
        self,
        entity_type: str,
        entity_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.record_deleted(
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
        ))

    def log_crop_created(
        self,
        crop_id: Optional[str],
        crop_name: str,
        season: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.crop_created(
            crop_id=crop_id,
            crop_name=crop_name,
            season=season,
            correlation_id=correlation_id,
        ))

    def log_crop_status_changed(
        self,
        crop_id: str,
        old_status: str,
        new_status: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.crop_status_changed(
            crop_id=crop_id,
            old_status=old_status,
            new_status=new_status,
            correlation_id=correlation_id,
        ))

    def log_profile_saved(
        self,
        profile_id: Optional[str],
        created: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.profile_saved(
            profile_id=profile_id,
            created=created,
            correlation_id=correlation_id,
        ))

    def log_session_started(
        self,
        is_new_user: bool,
        profile_completed: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.session_started(
            is_new_user=is_new_user,
            profile_completed=profile_completed,
            correlation_id=correlation_id,
        ))

    def log_session_ended(self, correlation_id: Optional[UUID] = None) -> None:
        self.log(AuditEventBuilder.session_ended(correlation_id=correlation_id))

    def log_api_error(
        self,
        operation: str,
        error: Exception,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed API call with the message the farmer will see."""
        self.log(AuditEventBuilder.api_error(
            operation=operation,
            error_code=type(error).__name__,
            error_message=str(error),
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g. saving an expense)
    and pass it through every subsequent call.
    """
    return uuid4()
