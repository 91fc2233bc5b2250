"""Library exceptions for the succession package.

Two families live here:

- ``InvariantViolationError`` and its subclasses are raised synchronously by
  the will aggregate the moment a mutation would break a legal rule. They are
  always fatal to the requested operation and carry a stable ``code``.
- ``OptimisticLockError`` is the retryable concurrency conflict raised on a
  stale save. It does not derive from ``InvariantViolationError``.
"""

from collections.abc import Sequence
from uuid import UUID


class SuccessionError(Exception):
    """Base exception for the succession package."""

    pass


# =============================================================================
# Invariant violations (raised by the aggregate on mutation)
# =============================================================================


class InvariantViolationError(SuccessionError):
    """Raised when a mutation would break a business rule."""

    code: str = "INVARIANT_VIOLATION"

    def __init__(self, message: str, will_id: UUID | None = None) -> None:
        self.will_id = will_id
        super().__init__(message)


class EntityValidationError(InvariantViolationError):
    """Raised when an incoming child entity fails local validation."""

    code = "ENTITY_VALIDATION_FAILED"

    def __init__(self, field: str, message: str, will_id: UUID | None = None) -> None:
        self.field = field
        super().__init__(f"Invalid {field}: {message}", will_id)


class InvalidTransitionError(InvariantViolationError):
    """Raised when a lifecycle transition is not present in the transition table."""

    code = "INVALID_WILL_STATUS_TRANSITION"

    def __init__(
        self,
        will_id: UUID | None,
        current: str,
        requested: str,
        allowed: Sequence[str],
    ) -> None:
        self.current = current
        self.requested = requested
        self.allowed = list(allowed)
        allowed_str = ", ".join(self.allowed) if self.allowed else "none"
        super().__init__(
            f"Invalid status transition from {current} to {requested}. "
            f"Allowed transitions: {allowed_str}",
            will_id,
        )


class WillNotEditableError(InvariantViolationError):
    """Raised when an operation is attempted in a status that does not permit it."""

    code = "WILL_NOT_EDITABLE"

    def __init__(self, will_id: UUID | None, status: str, operation: str) -> None:
        self.status = status
        self.operation = operation
        super().__init__(f"Cannot {operation} while will is {status}", will_id)


class DuplicatePrimaryExecutorError(InvariantViolationError):
    """Raised when a second active primary executor is nominated."""

    code = "DUPLICATE_PRIMARY_EXECUTOR"

    def __init__(self, will_id: UUID | None, existing_executor_id: UUID) -> None:
        self.existing_executor_id = existing_executor_id
        super().__init__(
            f"Will already has an active primary executor ({existing_executor_id})",
            will_id,
        )


class AllocationExceededError(InvariantViolationError):
    """Raised when a percentage bequest would push the allocation past the limit."""

    code = "ALLOCATION_EXCEEDS_100"

    def __init__(
        self,
        will_id: UUID | None,
        allocated: object,
        requested: object,
        limit: object,
        residuary: bool = False,
    ) -> None:
        self.allocated = allocated
        self.requested = requested
        self.limit = limit
        self.residuary = residuary
        kind = "residuary" if residuary else "percentage"
        super().__init__(
            f"Total {kind} allocation exceeds {limit}%: "
            f"{allocated}% already allocated, {requested}% requested",
            will_id,
        )


class DuplicateAssetAssignmentError(InvariantViolationError):
    """Raised when a specific asset is bequeathed twice."""

    code = "DUPLICATE_ASSET_ASSIGNMENT"

    def __init__(self, will_id: UUID | None, asset_id: str, existing_bequest_id: UUID) -> None:
        self.asset_id = asset_id
        self.existing_bequest_id = existing_bequest_id
        super().__init__(
            f"Asset {asset_id} is already assigned by bequest {existing_bequest_id}",
            will_id,
        )


class DisinheritanceContradictionError(InvariantViolationError):
    """Raised when a person would be both a beneficiary and disinherited."""

    code = "DISINHERITANCE_CONTRADICTION"

    def __init__(self, will_id: UUID | None, person_name: str, existing: str) -> None:
        self.person_name = person_name
        self.existing = existing
        super().__init__(
            f"{person_name} cannot be both a beneficiary and disinherited "
            f"(already recorded as {existing})",
            will_id,
        )


class WitnessConflictError(InvariantViolationError):
    """Raised when a witness has a legal impediment or would become one."""

    code = "WITNESS_CONFLICT"

    def __init__(self, will_id: UUID | None, person_name: str, reasons: Sequence[str]) -> None:
        self.person_name = person_name
        self.reasons = list(reasons)
        super().__init__(
            f"Witness conflict for {person_name}: {'; '.join(self.reasons)}",
            will_id,
        )


class InsufficientWitnessesError(InvariantViolationError):
    """Raised when attestation or activation lacks the minimum witness count."""

    code = "INSUFFICIENT_WITNESSES"

    def __init__(self, will_id: UUID | None, required: int, actual: int) -> None:
        self.required = required
        self.actual = actual
        super().__init__(
            f"Section 11 LSA requires {required} witnesses. Current: {actual}",
            will_id,
        )


class RequirementNotMetError(InvariantViolationError):
    """Raised when a lifecycle step has unmet preconditions."""

    code = "REQUIREMENTS_NOT_MET"

    def __init__(self, will_id: UUID | None, operation: str, unmet: Sequence[str]) -> None:
        self.operation = operation
        self.unmet = list(unmet)
        super().__init__(
            f"Cannot {operation}: {', '.join(self.unmet)}",
            will_id,
        )


class MultipleActiveWillsError(InvariantViolationError):
    """Raised when activation would leave a testator with two ACTIVE wills."""

    code = "MULTIPLE_ACTIVE_WILLS"

    def __init__(
        self, will_id: UUID | None, testator_id: str, active_will_ids: Sequence[UUID]
    ) -> None:
        self.testator_id = testator_id
        self.active_will_ids = list(active_will_ids)
        super().__init__(
            f"Testator {testator_id} already has an active will "
            f"({', '.join(str(i) for i in self.active_will_ids)}). Supersede it instead",
            will_id,
        )


class SupersessionMismatchError(InvariantViolationError):
    """Raised when a replacement will cannot supersede the addressed will."""

    code = "SUPERSESSION_MISMATCH"

    def __init__(self, will_id: UUID | None, replacement_id: UUID, reason: str) -> None:
        self.replacement_id = replacement_id
        self.reason = reason
        super().__init__(f"Will {replacement_id} cannot replace {will_id}: {reason}", will_id)


class CodicilNotAllowedError(InvariantViolationError):
    """Raised when a codicil is attached to a will that is not yet finalised."""

    code = "CODICIL_NOT_ALLOWED"

    def __init__(self, will_id: UUID | None, status: str) -> None:
        self.status = status
        super().__init__(
            f"Codicils can only be added to attested or active wills, will is {status}",
            will_id,
        )


class EntityNotFoundError(InvariantViolationError):
    """Raised when a child entity id does not exist on the will."""

    code = "ENTITY_NOT_FOUND"

    def __init__(self, will_id: UUID | None, entity: str, entity_id: UUID) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}", will_id)


class EntityStateError(InvariantViolationError):
    """Raised when a child entity is not in a state that allows the operation."""

    code = "INVALID_ENTITY_STATE"

    def __init__(self, entity: str, entity_id: UUID, status: str, operation: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        self.status = status
        self.operation = operation
        super().__init__(f"Cannot {operation} {entity} {entity_id} with status {status}")


# =============================================================================
# Persistence and infrastructure errors
# =============================================================================


class OptimisticLockError(SuccessionError):
    """Raised when a save supplies a stale version. Callers reload and retry."""

    retryable = True

    def __init__(self, aggregate_id: UUID, expected_version: int, actual_version: int) -> None:
        self.aggregate_id = aggregate_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Optimistic lock error for aggregate {aggregate_id}: "
            f"expected version {expected_version}, but current version is {actual_version}"
        )


class AggregateNotFoundError(SuccessionError):
    """Raised when an aggregate cannot be found."""

    def __init__(self, aggregate_id: UUID, aggregate_type: str | None = None) -> None:
        self.aggregate_id = aggregate_id
        self.aggregate_type = aggregate_type
        type_info = f" of type {aggregate_type}" if aggregate_type else ""
        super().__init__(f"Aggregate{type_info} not found: {aggregate_id}")


class EventVersionError(SuccessionError):
    """
    Raised when a recorded event does not carry the next aggregate version.

    Attributes:
        expected_version: The version that was expected (current version + 1)
        actual_version: The version found in the event
        event_id: ID of the event with invalid version
        aggregate_id: ID of the aggregate being updated
    """

    def __init__(
        self,
        expected_version: int,
        actual_version: int,
        event_id: UUID,
        aggregate_id: UUID,
    ) -> None:
        self.expected_version = expected_version
        self.actual_version = actual_version
        self.event_id = event_id
        self.aggregate_id = aggregate_id
        super().__init__(
            f"Event version mismatch for aggregate {aggregate_id}: "
            f"expected version {expected_version}, got {actual_version} "
            f"(event_id: {event_id})"
        )


class TransactionError(SuccessionError):
    """Raised when a repository transaction is used after it has finished."""

    pass


class UnknownCommandError(SuccessionError):
    """Raised when no handler is registered for a command payload type."""

    def __init__(self, payload_type: str, available: Sequence[str]) -> None:
        self.payload_type = payload_type
        self.available = list(available)
        super().__init__(
            f"No handler registered for command {payload_type}. "
            f"Available commands: {', '.join(self.available) or 'none'}"
        )
