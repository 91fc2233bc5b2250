"""
Shared test fixtures for the succession library.

Usage:
    from tests.fixtures import (
        adult_candidate,
        competent_declaration,
        draft_will,
        attested_will,
        nomination,
        residuary_bequest,
    )
"""

from tests.fixtures.builders import (
    ADULT_DOB,
    BENEFICIARY_NAME,
    EXECUTOR_USER_ID,
    TESTATOR_ID,
    WITNESS_NAMES,
    active_will,
    add_standard_witnesses,
    adult_candidate,
    asset_bequest,
    attested_will,
    competent_declaration,
    created_will,
    disinheritance,
    draft_will,
    external,
    nomination,
    pending_will,
    percentage_bequest,
    physical_signature,
    registered,
    residuary_bequest,
    sign_all,
    signed_will,
)

__all__ = [
    "ADULT_DOB",
    "BENEFICIARY_NAME",
    "EXECUTOR_USER_ID",
    "TESTATOR_ID",
    "WITNESS_NAMES",
    "active_will",
    "add_standard_witnesses",
    "adult_candidate",
    "asset_bequest",
    "attested_will",
    "competent_declaration",
    "created_will",
    "disinheritance",
    "draft_will",
    "external",
    "nomination",
    "pending_will",
    "percentage_bequest",
    "physical_signature",
    "registered",
    "residuary_bequest",
    "sign_all",
    "signed_will",
]
