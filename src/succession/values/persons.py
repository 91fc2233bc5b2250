"""
Person descriptors.

A person referenced by a will is either a registered user of the platform
or an external individual. The two are modelled as a tagged variant
(``kind`` discriminator) rather than one model with many optional fields.
Every consumer goes through the helpers below, which handle both variants
and reject anything else.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from succession.types import PersonKey


class RegisteredPerson(BaseModel):
    """A person with a platform account."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["registered"] = "registered"
    user_id: str = Field(..., min_length=1)
    full_name: str = Field(..., min_length=2)
    national_id: str | None = None

    @field_validator("full_name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return value.strip()


class ExternalPerson(BaseModel):
    """A person known only by the details captured on the will."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["external"] = "external"
    full_name: str = Field(..., min_length=2)
    national_id: str | None = None
    relationship: str | None = None
    contact: str | None = None

    @field_validator("full_name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return value.strip()


PersonRef = Annotated[RegisteredPerson | ExternalPerson, Field(discriminator="kind")]


def _normalize_national_id(value: str) -> str:
    return value.strip().upper()


def _normalize_name(value: str) -> str:
    return " ".join(value.lower().split())


def identity_keys(person: RegisteredPerson | ExternalPerson) -> frozenset[PersonKey]:
    """
    All keys under which ``person`` can be recognised.

    Registered people match on user id and national id. External people
    match on national id, or on their normalised name when no id was
    captured.
    """
    keys: set[PersonKey] = set()
    if isinstance(person, RegisteredPerson):
        keys.add(f"user:{person.user_id}")
    elif not isinstance(person, ExternalPerson):
        raise TypeError(f"Unsupported person descriptor: {type(person).__name__}")

    if person.national_id:
        keys.add(f"nid:{_normalize_national_id(person.national_id)}")
    if not keys:
        keys.add(f"name:{_normalize_name(person.full_name)}")
    return frozenset(keys)


def person_key(person: RegisteredPerson | ExternalPerson) -> PersonKey:
    """The most specific identity key for ``person``."""
    if isinstance(person, RegisteredPerson):
        return f"user:{person.user_id}"
    if isinstance(person, ExternalPerson):
        if person.national_id:
            return f"nid:{_normalize_national_id(person.national_id)}"
        return f"name:{_normalize_name(person.full_name)}"
    raise TypeError(f"Unsupported person descriptor: {type(person).__name__}")


def _id_keys(person: RegisteredPerson | ExternalPerson) -> frozenset[PersonKey]:
    return frozenset(key for key in identity_keys(person) if not key.startswith("name:"))


def same_person(
    first: RegisteredPerson | ExternalPerson,
    second: RegisteredPerson | ExternalPerson,
) -> bool:
    """
    Whether two descriptors refer to the same individual.

    Ids decide when both sides carry one. When either side was captured
    without an id, the normalised names are compared instead.
    """
    first_ids, second_ids = _id_keys(first), _id_keys(second)
    if first_ids and second_ids:
        return not first_ids.isdisjoint(second_ids)
    return _normalize_name(first.full_name) == _normalize_name(second.full_name)


def display_name(person: RegisteredPerson | ExternalPerson) -> str:
    if isinstance(person, (RegisteredPerson, ExternalPerson)):
        return person.full_name
    raise TypeError(f"Unsupported person descriptor: {type(person).__name__}")


__all__ = [
    "RegisteredPerson",
    "ExternalPerson",
    "PersonRef",
    "identity_keys",
    "person_key",
    "same_person",
    "display_name",
]
