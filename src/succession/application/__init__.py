"""
Application layer: commands in, results and reports out.

``WillCommandHandler`` is the only writer; ``WillQueryService`` only reads.
"""

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
from succession.application.handler import (
    WillCommandHandler,
    get_handled_command_type,
    handles_command,
)
from succession.application.queries import WillQueryService
from succession.application.results import CommandResult

__all__ = [
    # Handling
    "WillCommandHandler",
    "WillQueryService",
    "CommandResult",
    "handles_command",
    "get_handled_command_type",
    # Envelope
    "Command",
    "CommandEnvelope",
    # Payloads
    "CreateWill",
    "UpdateClauses",
    "UpdateCapacityDeclaration",
    "UpdateStorageLocation",
    "AddWitness",
    "SignWitness",
    "VerifyWitness",
    "RejectWitness",
    "AddExecutor",
    "NotifyExecutor",
    "AcceptExecutor",
    "DeclineExecutor",
    "RemoveExecutor",
    "AddBequest",
    "RevokeBequest",
    "AddDisinheritance",
    "WithdrawDisinheritance",
    "AddCodicil",
    "WitnessCodicil",
    "ActivateCodicil",
    "SubmitForAttestation",
    "ReturnToDraft",
    "AttestWill",
    "ActivateWill",
    "RevokeWill",
    "SupersedeWill",
    "ContestWill",
    "ResolveContest",
    "FileForProbate",
    "GrantProbate",
]
