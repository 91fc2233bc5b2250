"""Common type definitions for the succession package."""

from typing import TypeVar

from pydantic import BaseModel

# Type variable for aggregate state
TState = TypeVar("TState", bound=BaseModel)

# Identity key of a person across registries ("user:<id>", "nid:<national id>")
PersonKey = str
