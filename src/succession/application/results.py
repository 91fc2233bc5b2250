"""Command results."""

from dataclasses import dataclass
from uuid import UUID

from succession.events.base import DomainEvent
from succession.exceptions import InvariantViolationError


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of one handled command.

    A failed result carries the ``code`` and message of the business rule
    that rejected the command; state and version are then unchanged.

    Attributes:
        success: True if the command was applied and saved
        aggregate_id: The addressed will
        new_version: Stored version after the command (unchanged on failure)
        events: Events recorded by the command, in order
        error_code: ``InvariantViolationError.code`` on failure
        message: Error message on failure
    """

    success: bool
    aggregate_id: UUID
    new_version: int
    events: tuple[DomainEvent, ...] = ()
    error_code: str | None = None
    message: str | None = None

    @property
    def failed(self) -> bool:
        return not self.success

    @property
    def event_types(self) -> list[str]:
        return [e.event_type for e in self.events]

    @classmethod
    def ok(
        cls,
        aggregate_id: UUID,
        new_version: int,
        events: tuple[DomainEvent, ...] = (),
    ) -> "CommandResult":
        return cls(success=True, aggregate_id=aggregate_id, new_version=new_version, events=events)

    @classmethod
    def rejected(
        cls,
        aggregate_id: UUID,
        version: int,
        error: InvariantViolationError,
    ) -> "CommandResult":
        return cls(
            success=False,
            aggregate_id=aggregate_id,
            new_version=version,
            error_code=error.code,
            message=str(error),
        )


__all__ = ["CommandResult"]
