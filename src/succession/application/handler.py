"""
Command handler for wills.

``WillCommandHandler`` routes each payload type to the method decorated
with ``@handles_command`` for it. Synchronous routes receive the loaded
will and the payload and call exactly one aggregate method; the handler
takes care of loading, command context, saving and error mapping.
Asynchronous routes receive the whole envelope and manage persistence
themselves. ``ActivateWill`` uses this to check the testator's other wills
and ``SupersedeWill`` to change two wills in one transaction.

Business rule violations become failed ``CommandResult`` objects.
``OptimisticLockError`` and ``AggregateNotFoundError`` propagate so the
caller can reload and retry, or report the missing will.
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any, TypeVar
from uuid import UUID

from succession.aggregates.will import WillAggregate
from succession.application.commands import (
    AcceptExecutor,
    ActivateCodicil,
    ActivateWill,
    AddBequest,
    AddCodicil,
    AddDisinheritance,
    AddExecutor,
    AddWitness,
    AttestWill,
    Command,
    CommandEnvelope,
    ContestWill,
    CreateWill,
    DeclineExecutor,
    FileForProbate,
    GrantProbate,
    NotifyExecutor,
    RejectWitness,
    RemoveExecutor,
    ResolveContest,
    ReturnToDraft,
    RevokeBequest,
    RevokeWill,
    SignWitness,
    SubmitForAttestation,
    SupersedeWill,
    UpdateCapacityDeclaration,
    UpdateClauses,
    UpdateStorageLocation,
    VerifyWitness,
    WithdrawDisinheritance,
    WitnessCodicil,
)
from succession.application.results import CommandResult
from succession.config import DEFAULT_RULES, ComplianceRules
from succession.exceptions import (
    AggregateNotFoundError,
    InvariantViolationError,
    MultipleActiveWillsError,
    OptimisticLockError,
    SupersessionMismatchError,
    UnknownCommandError,
)
from succession.observability import Tracer, create_tracer
from succession.observability.attributes import (
    ATTR_ACTOR_ID,
    ATTR_AGGREGATE_ID,
    ATTR_COMMAND_SUCCESS,
    ATTR_COMMAND_TYPE,
    ATTR_CORRELATION_ID,
    ATTR_ERROR_CODE,
    ATTR_EVENT_COUNT,
    ATTR_VERSION,
)
from succession.repositories.interface import WillRepository

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C", bound=Command)


def handles_command(command_type: type[Command], *, creates: bool = False) -> Callable[[F], F]:
    """
    Mark a method as the handler for one command payload type.

    Args:
        command_type: The payload class the method handles
        creates: True if the command creates the will, so a missing will
            is expected rather than an error

    Example:
        >>> class MyHandler(WillCommandHandler):
        ...     @handles_command(AttestWill)
        ...     def _attest(self, will: WillAggregate, payload: AttestWill) -> None:
        ...         will.attest(payload.location, payload.executed_at)
    """

    def decorator(func: F) -> F:
        func._handles_command_type = command_type  # type: ignore[attr-defined]
        func._creates_aggregate = creates  # type: ignore[attr-defined]
        return func

    return decorator


def get_handled_command_type(func: Callable[..., Any]) -> type[Command] | None:
    return getattr(func, "_handles_command_type", None)


def expect_payload(envelope: CommandEnvelope, command_type: type[C]) -> C:
    """The envelope's payload, checked against the type a route handles."""
    payload = envelope.payload
    if not isinstance(payload, command_type):
        raise TypeError(
            f"Expected payload of type {command_type.__name__}, got {type(payload).__name__}"
        )
    return payload


class WillCommandHandler:
    """
    Applies commands to wills.

    Example:
        >>> handler = WillCommandHandler(repo)
        >>> result = await handler.handle(
        ...     CommandEnvelope(
        ...         actor_id="user-42",
        ...         aggregate_id=will_id,
        ...         payload=CreateWill(testator_id="user-42"),
        ...     )
        ... )
        >>> result.success, result.new_version
        (True, 1)
    """

    def __init__(
        self,
        repository: WillRepository,
        *,
        rules: ComplianceRules = DEFAULT_RULES,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        """
        Args:
            repository: Where wills are loaded from and saved to
            rules: Compliance rules for newly created wills
            tracer: Optional custom Tracer instance
            enable_tracing: If True and OpenTelemetry is available, emit traces.
                          Ignored if tracer is explicitly provided.
        """
        self._repository = repository
        self._rules = rules
        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._routes: dict[type[Command], Callable[..., Any]] = {}
        self._discover_routes()

    def _discover_routes(self) -> None:
        for name in dir(type(self)):
            attr = getattr(type(self), name, None)
            if not callable(attr):
                continue
            command_type = get_handled_command_type(attr)
            if command_type is None:
                continue
            if command_type in self._routes:
                raise ValueError(
                    f"{type(self).__name__} has more than one handler for {command_type.__name__}"
                )
            self._routes[command_type] = getattr(self, name)

    @property
    def registered_commands(self) -> list[type[Command]]:
        return sorted(self._routes, key=lambda t: t.__name__)

    def can_handle(self, command_type: type[Command]) -> bool:
        return command_type in self._routes

    async def handle(self, envelope: CommandEnvelope) -> CommandResult:
        """
        Apply one command.

        Raises:
            UnknownCommandError: If no handler is registered for the payload type
            AggregateNotFoundError: If the addressed will does not exist
            OptimisticLockError: If the will changed after it was loaded
        """
        payload = envelope.payload
        route = self._routes.get(type(payload))
        if route is None:
            raise UnknownCommandError(
                type(payload).__name__, [t.__name__ for t in self.registered_commands]
            )

        attributes: dict[str, Any] = {
            ATTR_COMMAND_TYPE: envelope.command_type,
            ATTR_AGGREGATE_ID: str(envelope.aggregate_id),
            ATTR_ACTOR_ID: envelope.actor_id,
        }
        if envelope.correlation_id is not None:
            attributes[ATTR_CORRELATION_ID] = str(envelope.correlation_id)

        with self._tracer.span("succession.command.handle", attributes) as span:
            try:
                if inspect.iscoroutinefunction(route):
                    result = await route(envelope)
                else:
                    result = await self._apply(envelope, route)
            except OptimisticLockError as e:
                logger.info(
                    "Version conflict handling %s for will %s: %s",
                    envelope.command_type,
                    envelope.aggregate_id,
                    e,
                    extra={
                        "command_type": envelope.command_type,
                        "aggregate_id": str(envelope.aggregate_id),
                        "expected_version": e.expected_version,
                        "actual_version": e.actual_version,
                    },
                )
                raise

            if span:
                span.set_attribute(ATTR_COMMAND_SUCCESS, result.success)
                span.set_attribute(ATTR_VERSION, result.new_version)
                span.set_attribute(ATTR_EVENT_COUNT, len(result.events))
                if result.error_code:
                    span.set_attribute(ATTR_ERROR_CODE, result.error_code)
            return result

    async def _load(self, aggregate_id: UUID, creates: bool) -> WillAggregate:
        will = await self._repository.find_by_id(aggregate_id)
        if will is not None:
            return will
        if creates:
            return WillAggregate(aggregate_id, rules=self._rules)
        raise AggregateNotFoundError(aggregate_id, WillAggregate.aggregate_type)

    async def _apply(
        self,
        envelope: CommandEnvelope,
        route: Callable[[WillAggregate, Command], None],
    ) -> CommandResult:
        creates = getattr(route, "_creates_aggregate", False)
        will = await self._load(envelope.aggregate_id, creates)
        loaded_version = will.version
        will.set_command_context(envelope.actor_id, envelope.correlation_id)

        try:
            route(will, envelope.payload)
        except InvariantViolationError as e:
            self._log_rejection(envelope, e)
            return CommandResult.rejected(envelope.aggregate_id, loaded_version, e)

        saved = await self._repository.save(will, expected_version=loaded_version)
        logger.debug(
            "Handled %s for will %s, now at version %d",
            envelope.command_type,
            envelope.aggregate_id,
            saved.new_version,
            extra={
                "command_type": envelope.command_type,
                "aggregate_id": str(envelope.aggregate_id),
                "version": saved.new_version,
                "event_count": saved.event_count,
            },
        )
        return CommandResult.ok(envelope.aggregate_id, saved.new_version, saved.events)

    def _log_rejection(self, envelope: CommandEnvelope, error: InvariantViolationError) -> None:
        logger.warning(
            "Rejected %s for will %s: %s",
            envelope.command_type,
            envelope.aggregate_id,
            error,
            extra={
                "command_type": envelope.command_type,
                "aggregate_id": str(envelope.aggregate_id),
                "actor_id": envelope.actor_id,
                "error_code": error.code,
            },
        )

    # =========================================================================
    # Document
    # =========================================================================

    @handles_command(CreateWill, creates=True)
    def _create(self, will: WillAggregate, payload: CreateWill) -> None:
        will.create(
            testator_id=payload.testator_id,
            will_type=payload.will_type,
            title=payload.title,
            supersedes_will_id=payload.supersedes_will_id,
        )

    @handles_command(UpdateClauses)
    def _update_clauses(self, will: WillAggregate, payload: UpdateClauses) -> None:
        will.update_clauses(
            title=payload.title,
            funeral_wishes=payload.funeral_wishes,
            burial_location=payload.burial_location,
            residuary_clause=payload.residuary_clause,
        )

    @handles_command(UpdateCapacityDeclaration)
    def _update_capacity(self, will: WillAggregate, payload: UpdateCapacityDeclaration) -> None:
        will.update_capacity_declaration(payload.declaration)

    @handles_command(UpdateStorageLocation)
    def _update_storage(self, will: WillAggregate, payload: UpdateStorageLocation) -> None:
        will.update_storage_location(payload.location, payload.details)

    # =========================================================================
    # Witnesses
    # =========================================================================

    @handles_command(AddWitness)
    def _add_witness(self, will: WillAggregate, payload: AddWitness) -> None:
        will.add_witness(payload.candidate)

    @handles_command(SignWitness)
    def _sign_witness(self, will: WillAggregate, payload: SignWitness) -> None:
        will.sign_witness(payload.witness_id, payload.signature, payload.declarations)

    @handles_command(VerifyWitness)
    def _verify_witness(self, will: WillAggregate, payload: VerifyWitness) -> None:
        will.verify_witness(payload.witness_id, payload.verified_by)

    @handles_command(RejectWitness)
    def _reject_witness(self, will: WillAggregate, payload: RejectWitness) -> None:
        will.reject_witness(payload.witness_id, payload.reason)

    # =========================================================================
    # Executors
    # =========================================================================

    @handles_command(AddExecutor)
    def _add_executor(self, will: WillAggregate, payload: AddExecutor) -> None:
        will.add_executor(payload.nomination)

    @handles_command(NotifyExecutor)
    def _notify_executor(self, will: WillAggregate, payload: NotifyExecutor) -> None:
        will.notify_executor(payload.executor_id)

    @handles_command(AcceptExecutor)
    def _accept_executor(self, will: WillAggregate, payload: AcceptExecutor) -> None:
        will.accept_executor(payload.executor_id)

    @handles_command(DeclineExecutor)
    def _decline_executor(self, will: WillAggregate, payload: DeclineExecutor) -> None:
        will.decline_executor(payload.executor_id, payload.reason)

    @handles_command(RemoveExecutor)
    def _remove_executor(self, will: WillAggregate, payload: RemoveExecutor) -> None:
        will.remove_executor(payload.executor_id, payload.reason)

    # =========================================================================
    # Bequests and disinheritance
    # =========================================================================

    @handles_command(AddBequest)
    def _add_bequest(self, will: WillAggregate, payload: AddBequest) -> None:
        will.add_bequest(payload.bequest)

    @handles_command(RevokeBequest)
    def _revoke_bequest(self, will: WillAggregate, payload: RevokeBequest) -> None:
        will.revoke_bequest(payload.bequest_id, payload.reason)

    @handles_command(AddDisinheritance)
    def _add_disinheritance(self, will: WillAggregate, payload: AddDisinheritance) -> None:
        will.add_disinheritance(payload.record)

    @handles_command(WithdrawDisinheritance)
    def _withdraw_disinheritance(
        self, will: WillAggregate, payload: WithdrawDisinheritance
    ) -> None:
        will.withdraw_disinheritance(payload.record_id, payload.reason)

    # =========================================================================
    # Codicils
    # =========================================================================

    @handles_command(AddCodicil)
    def _add_codicil(self, will: WillAggregate, payload: AddCodicil) -> None:
        will.add_codicil(
            payload.codicil_type,
            payload.title,
            payload.content,
            payload.affected_clauses,
        )

    @handles_command(WitnessCodicil)
    def _witness_codicil(self, will: WillAggregate, payload: WitnessCodicil) -> None:
        will.witness_codicil(payload.codicil_id, payload.attestation)

    @handles_command(ActivateCodicil)
    def _activate_codicil(self, will: WillAggregate, payload: ActivateCodicil) -> None:
        will.activate_codicil(payload.codicil_id)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @handles_command(SubmitForAttestation)
    def _submit(self, will: WillAggregate, payload: SubmitForAttestation) -> None:
        will.submit_for_attestation()

    @handles_command(ReturnToDraft)
    def _return_to_draft(self, will: WillAggregate, payload: ReturnToDraft) -> None:
        will.return_to_draft(payload.reason)

    @handles_command(AttestWill)
    def _attest(self, will: WillAggregate, payload: AttestWill) -> None:
        will.attest(payload.location, payload.executed_at)

    @handles_command(ActivateWill)
    async def _activate(self, envelope: CommandEnvelope) -> CommandResult:
        """
        Activate the addressed will.

        A testator may have only one ACTIVE will. The check runs inside the
        transaction; replacing an active will goes through ``SupersedeWill``.
        """
        expect_payload(envelope, ActivateWill)
        will_id = envelope.aggregate_id

        async with self._repository.begin_transaction() as tx:
            will = await tx.get(will_id, for_update=True)
            loaded_version = will.version
            will.set_command_context(envelope.actor_id, envelope.correlation_id)

            try:
                will.activate()
                await self._ensure_sole_active(will, ignore={will_id})
            except InvariantViolationError as e:
                await tx.rollback()
                self._log_rejection(envelope, e)
                return CommandResult.rejected(will_id, loaded_version, e)

            tx.save(will, expected_version=loaded_version)
            [saved] = await tx.commit()

        logger.info(
            "Will %s activated",
            will_id,
            extra={
                "aggregate_id": str(will_id),
                "testator_id": will.testator_id,
                "actor_id": envelope.actor_id,
            },
        )
        return CommandResult.ok(will_id, saved.new_version, saved.events)

    async def _ensure_sole_active(self, will: WillAggregate, ignore: set[UUID]) -> None:
        testator_id = will.testator_id
        if testator_id is None:
            return
        others = [
            w.aggregate_id
            for w in await self._repository.find_active_by_owner(testator_id)
            if w.aggregate_id not in ignore
        ]
        if others:
            raise MultipleActiveWillsError(will.aggregate_id, testator_id, others)

    @staticmethod
    def _ensure_replaceable(old: WillAggregate, new: WillAggregate) -> None:
        if old.testator_id != new.testator_id:
            raise SupersessionMismatchError(
                old.aggregate_id, new.aggregate_id, "the wills belong to different testators"
            )
        declared = new.current_state.supersedes_will_id
        if declared not in (None, old.aggregate_id):
            raise SupersessionMismatchError(
                old.aggregate_id, new.aggregate_id, f"it was drafted to supersede {declared}"
            )

    @handles_command(RevokeWill)
    def _revoke(self, will: WillAggregate, payload: RevokeWill) -> None:
        will.revoke(
            payload.method,
            reason=payload.reason,
            court_order_ref=payload.court_order_ref,
            revoked_by=payload.revoked_by,
        )

    @handles_command(ContestWill)
    def _contest(self, will: WillAggregate, payload: ContestWill) -> None:
        will.contest(payload.contested_by, payload.grounds)

    @handles_command(ResolveContest)
    def _resolve_contest(self, will: WillAggregate, payload: ResolveContest) -> None:
        will.resolve_contest(payload.upheld, payload.resolution)

    @handles_command(FileForProbate)
    def _file_for_probate(self, will: WillAggregate, payload: FileForProbate) -> None:
        will.file_for_probate(payload.case_number, payload.registry, payload.filed_by)

    @handles_command(GrantProbate)
    def _grant_probate(self, will: WillAggregate, payload: GrantProbate) -> None:
        will.grant_probate(payload.granted_at)

    @handles_command(SupersedeWill)
    async def _supersede(self, envelope: CommandEnvelope) -> CommandResult:
        """
        Supersede the addressed will and activate its replacement.

        Both wills are locked for the duration, in id order. Either both
        changes are committed or neither is. The replacement must belong to
        the same testator and must not have been drafted to supersede a
        different will.
        """
        payload = expect_payload(envelope, SupersedeWill)
        old_id = envelope.aggregate_id
        new_id = payload.new_will_id

        async with self._repository.begin_transaction() as tx:
            loaded: dict[UUID, WillAggregate] = {}
            for will_id in sorted({old_id, new_id}, key=str):
                loaded[will_id] = await tx.get(will_id, for_update=True)
            old, new = loaded[old_id], loaded[new_id]
            versions = {will_id: will.version for will_id, will in loaded.items()}

            for will in loaded.values():
                will.set_command_context(envelope.actor_id, envelope.correlation_id)

            try:
                self._ensure_replaceable(old, new)
                old.supersede(new_id)
                new.activate()
                await self._ensure_sole_active(new, ignore={old_id, new_id})
            except InvariantViolationError as e:
                await tx.rollback()
                self._log_rejection(envelope, e)
                return CommandResult.rejected(old_id, versions[old_id], e)

            tx.save(old, expected_version=versions[old_id])
            tx.save(new, expected_version=versions[new_id])
            results = await tx.commit()

        by_id = {r.aggregate_id: r for r in results}
        events = by_id[old_id].events + by_id[new_id].events
        logger.info(
            "Will %s superseded by %s",
            old_id,
            new_id,
            extra={
                "aggregate_id": str(old_id),
                "superseded_by": str(new_id),
                "actor_id": envelope.actor_id,
            },
        )
        return CommandResult.ok(old_id, by_id[old_id].new_version, events)


__all__ = [
    "WillCommandHandler",
    "handles_command",
    "get_handled_command_type",
    "expect_payload",
]
