"""
Audit Models for Expense Tracker

Every change to the ledger is logged for audit purposes.
This provides:
1. Traceability of every add and delete
2. Debugging information when persisted state cannot be read
3. A way to reconstruct what happened to a record

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


# Longest title quoted verbatim in an event description
DESCRIPTION_TITLE_CHARS = 200


def _shorten(text: str, limit: int = DESCRIPTION_TITLE_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger mutations
    EXPENSE_ADDED = "expense_added"
    EXPENSE_REMOVED = "expense_removed"
    EXPENSE_REMOVAL_SCHEDULED = "expense_removal_scheduled"
    EXPENSE_REMOVAL_CANCELLED = "expense_removal_cancelled"

    # Input validation
    VALIDATION_FAILED = "validation_failed"

    # Persistence
    LEDGER_LOADED = "ledger_loaded"
    LEDGER_LOAD_FAILED = "ledger_load_failed"
    RECORD_SKIPPED = "record_skipped"
    SAVE_FAILED = "save_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every ledger mutation creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
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
        description="Type of entity (e.g., 'expense', 'ledger')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., a delete request and its removal)"
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

    # Error information (if applicable)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
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
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, title, amount, category)
        event = AuditEventBuilder.ledger_load_failed(key, reason)
    """

    @staticmethod
    def expense_added(
        expense_id: str,
        title: str,
        amount: str,
        category: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense added: {_shorten(title)} - {amount}",
            details={
                "title": title,
                "amount": amount,
                "category": category,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_removed(
        expense_id: str,
        remaining: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_REMOVED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense removed, {remaining} remaining",
            details={
                "remaining": remaining,
            },
        )

    @staticmethod
    def removal_scheduled(
        expense_id: str,
        delay_seconds: float,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_REMOVAL_SCHEDULED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense removal scheduled in {delay_seconds:g}s",
            details={
                "delay_seconds": delay_seconds,
            },
            is_user_action=True,
        )

    @staticmethod
    def removal_cancelled(
        expense_id: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_REMOVAL_CANCELLED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description="Scheduled expense removal cancelled",
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        issues: list[dict],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            correlation_id=correlation_id,
            description=f"Expense input rejected with {len(issues)} issues",
            details={
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def ledger_loaded(
        key: str,
        record_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            entity_type="ledger",
            entity_id=key,
            description=f"Ledger loaded with {record_count} expenses",
            details={
                "record_count": record_count,
            },
        )

    @staticmethod
    def ledger_load_failed(
        key: str,
        reason: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            entity_id=key,
            description="Persisted ledger unreadable, starting empty",
            error_message=reason,
        )

    @staticmethod
    def record_skipped(
        key: str,
        index: int,
        reason: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_SKIPPED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            entity_id=key,
            description=f"Skipped invalid persisted expense at position {index}",
            details={
                "index": index,
            },
            error_message=reason,
        )

    @staticmethod
    def save_failed(
        key: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            entity_id=key,
            description="Failed to persist ledger",
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
