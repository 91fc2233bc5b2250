"""
Base class for domain events.

Events are immutable records of a single accepted mutation of a will.
They are published after the new state has been persisted and are never
replayed to rebuild state.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, ClassVar, Self
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger(__name__)


class DomainEvent(BaseModel):
    """
    Base class for all domain events with automatic event_type derivation.

    The event_type field is set to the class name unless a subclass
    declares its own value. Payload fields are primitives (ids, strings,
    decimals rendered as strings) so an event can be handed to any
    subscriber without importing the entity models.

    Attributes:
        event_id: Unique identifier for this event instance
        event_type: Type name of the event (auto-derived from class name if not set)
        event_version: Schema version for this event type
        occurred_at: When the event occurred (UTC timestamp)
        aggregate_id: ID of the will this event belongs to
        aggregate_type: Type of aggregate ("Will")
        aggregate_version: Version of the aggregate after this event
        actor_id: User/system that triggered this event
        correlation_id: ID linking events raised by one command
        causation_id: ID of the event that caused this event
        metadata: Additional event metadata dictionary

    Example:
        >>> class WillCreated(DomainEvent):
        ...     aggregate_type: str = "Will"
        ...     testator_id: str
        ...
        >>> event = WillCreated(aggregate_id=uuid4(), testator_id="user-1")
        >>> assert event.event_type == "WillCreated"
    """

    model_config = ConfigDict(frozen=True)

    suppress_event_type_warning: ClassVar[bool] = False

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier",
    )
    event_type: str = Field(
        default="",
        description="Type of event (auto-derived from class name if not set)",
    )
    event_version: int = Field(
        default=1,
        ge=1,
        description="Event schema version",
    )
    occurred_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When event occurred (UTC)",
    )

    aggregate_id: UUID = Field(
        ...,
        description="ID of the aggregate this event belongs to",
    )
    aggregate_type: str = Field(
        ...,
        description="Type of aggregate (e.g., 'Will')",
    )
    aggregate_version: int = Field(
        default=1,
        ge=1,
        description="Version of aggregate after this event",
    )

    actor_id: str | None = Field(
        default=None,
        description="User/system that triggered this event",
    )

    correlation_id: UUID = Field(
        default_factory=uuid4,
        description="ID linking related events across aggregates",
    )
    causation_id: UUID | None = Field(
        default=None,
        description="ID of the event that caused this event",
    )

    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event metadata",
    )

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Default ``event_type`` to the class name unless set explicitly."""
        super().__init_subclass__(**kwargs)

        explicit_type: str | None = None
        if "event_type" in cls.__dict__:
            value = cls.__dict__["event_type"]
            if isinstance(value, str):
                explicit_type = value

        if explicit_type:
            if explicit_type != cls.__name__ and not getattr(
                cls, "suppress_event_type_warning", False
            ):
                logger.warning(
                    "Event class %s has event_type='%s' which differs from class name. "
                    "Set suppress_event_type_warning=True to silence this warning.",
                    cls.__name__,
                    explicit_type,
                )
        elif "event_type" in cls.model_fields:
            cls.model_fields["event_type"].default = cls.__name__

    @model_validator(mode="before")
    @classmethod
    def _ensure_event_type(cls, data: Any) -> Any:
        """Populate event_type when constructing from a dict without one."""
        if isinstance(data, dict):
            provided_event_type = data.get("event_type")
            if not provided_event_type:
                field_info = cls.model_fields.get("event_type")
                field_default = field_info.default if field_info else ""
                if not field_default or provided_event_type == "":
                    data = dict(data)
                    data["event_type"] = cls.__name__
        return data

    def __str__(self) -> str:
        return (
            f"{self.event_type}(event_id={self.event_id}, "
            f"aggregate_id={self.aggregate_id}, "
            f"version={self.aggregate_version})"
        )

    def with_causation(self, causing_event: DomainEvent) -> Self:
        """
        Copy this event with causation tracking from another event.

        Args:
            causing_event: The event that caused this event

        Returns:
            New event instance with causation_id and correlation_id set
        """
        return self.model_copy(
            update={
                "causation_id": causing_event.event_id,
                "correlation_id": causing_event.correlation_id,
            }
        )

    def with_metadata(self, **kwargs: Any) -> Self:
        """Copy this event with additional metadata entries."""
        new_metadata = {**self.metadata, **kwargs}
        return self.model_copy(update={"metadata": new_metadata})

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible dictionary of all fields."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls.model_validate(data)

    def is_caused_by(self, event: DomainEvent) -> bool:
        return self.causation_id == event.event_id

    def is_correlated_with(self, event: DomainEvent) -> bool:
        return self.correlation_id == event.correlation_id


__all__ = ["DomainEvent"]
