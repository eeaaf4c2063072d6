"""
Audit Logger

DESIGN DECISION: Every change to the ledger is logged.
This provides:
1. Traceability of adds and deletes
2. Debugging capability when persisted state turns out unreadable
3. A record of rejected input

The audit logger:
- Is synchronous, like the ledger it observes
- Never raises (logging must not break the main flow)
- Supports correlation IDs to tie a delete request to its removal
"""

import logging
import sys
from typing import Callable, Optional
from uuid import UUID, uuid4

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder


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
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def setup_logging(level: str = "INFO") -> None:
    """
    Route stdlib logging (which structlog writes through) to stderr.

    Call once at startup.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Central audit logging service.

    Writes every event to the structured local log.
    """

    def __init__(self, logger_name: str = "expense_tracker.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity.value in ("error", "critical"):
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # A broken log sink must never take the ledger down with it
            return False

        return True

    def _log_built(self, build: Callable[..., AuditEvent], **kwargs) -> bool:
        """Build an event and log it. Events that fail validation are dropped."""
        try:
            event = build(**kwargs)
        except Exception:
            # Same rule as log(): auditing never fails the caller
            return False

        return self.log(event)

    def log_expense_added(
        self,
        expense_id: str,
        title: str,
        amount: str,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a new expense."""
        self._log_built(
            AuditEventBuilder.expense_added,
            expense_id=expense_id,
            title=title,
            amount=amount,
            category=category,
            correlation_id=correlation_id,
        )

    def log_expense_removed(
        self,
        expense_id: str,
        remaining: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an expense removal."""
        self._log_built(
            AuditEventBuilder.expense_removed,
            expense_id=expense_id,
            remaining=remaining,
            correlation_id=correlation_id,
        )

    def log_removal_scheduled(
        self,
        expense_id: str,
        delay_seconds: float,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a delete request waiting for its delay."""
        self._log_built(
            AuditEventBuilder.removal_scheduled,
            expense_id=expense_id,
            delay_seconds=delay_seconds,
            correlation_id=correlation_id,
        )

    def log_removal_cancelled(
        self,
        expense_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a cancelled delete request."""
        self._log_built(
            AuditEventBuilder.removal_cancelled,
            expense_id=expense_id,
            correlation_id=correlation_id,
        )

    def log_validation_failed(
        self,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log rejected input."""
        self._log_built(
            AuditEventBuilder.validation_failed,
            issues=issues,
            correlation_id=correlation_id,
        )

    def log_ledger_loaded(self, key: str, record_count: int) -> None:
        self._log_built(AuditEventBuilder.ledger_loaded, key=key, record_count=record_count)

    def log_ledger_load_failed(self, key: str, reason: str) -> None:
        self._log_built(AuditEventBuilder.ledger_load_failed, key=key, reason=reason)

    def log_record_skipped(self, key: str, index: int, reason: str) -> None:
        self._log_built(AuditEventBuilder.record_skipped, key=key, index=index, reason=reason)

    def log_save_failed(self, key: str, error_message: str) -> None:
        self._log_built(AuditEventBuilder.save_failed, key=key, error_message=error_message)

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self._log_built(
            AuditEventBuilder.system_error,
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., a delete click) and
    pass it through the operations it triggers.
    """
    return uuid4()
