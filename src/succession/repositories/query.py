"""
Query objects for searching stored wills.

Filters apply to the flat search row of each will (see
``InMemoryWillRepository.search``). Enum members compare by value, so
``Filter.eq("status", WillStatus.ACTIVE)`` and ``Filter.eq("status",
"ACTIVE")`` are the same filter.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Literal, TypeVar
from uuid import UUID

T = TypeVar("T")

Operator = Literal["eq", "ne", "gt", "gte", "lt", "lte", "in", "not_in"]


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_plain(v) for v in value]
    return value


@dataclass(frozen=True)
class Filter:
    """
    A single filter condition for a query.

    Attributes:
        field: Name of the search-row field to filter on
        operator: Comparison operator (eq, ne, gt, gte, lt, lte, in, not_in)
        value: Value to compare against

    Example:
        >>> Filter.eq("status", WillStatus.ACTIVE)
        >>> Filter.gte("bequest_count", 3)
        >>> Filter.in_("will_type", [WillType.JOINT_WILL, WillType.MUTUAL_WILL])
    """

    field: str
    operator: Operator
    value: Any

    @classmethod
    def eq(cls, field: str, value: Any) -> "Filter":
        return cls(field=field, operator="eq", value=value)

    @classmethod
    def ne(cls, field: str, value: Any) -> "Filter":
        return cls(field=field, operator="ne", value=value)

    @classmethod
    def gt(cls, field: str, value: Any) -> "Filter":
        return cls(field=field, operator="gt", value=value)

    @classmethod
    def gte(cls, field: str, value: Any) -> "Filter":
        return cls(field=field, operator="gte", value=value)

    @classmethod
    def lt(cls, field: str, value: Any) -> "Filter":
        return cls(field=field, operator="lt", value=value)

    @classmethod
    def lte(cls, field: str, value: Any) -> "Filter":
        return cls(field=field, operator="lte", value=value)

    @classmethod
    def in_(cls, field: str, values: list[Any]) -> "Filter":
        return cls(field=field, operator="in", value=tuple(values))

    @classmethod
    def not_in(cls, field: str, values: list[Any]) -> "Filter":
        return cls(field=field, operator="not_in", value=tuple(values))

    def matches(self, row: dict[str, Any]) -> bool:
        """
        True if ``row`` satisfies this filter.

        Missing fields and ordering comparisons against None never match.
        """
        if self.field not in row:
            return False
        actual = _plain(row[self.field])
        expected = _plain(self.value)

        if self.operator == "eq":
            return bool(actual == expected)
        elif self.operator == "ne":
            return bool(actual != expected)
        elif self.operator == "in":
            return actual in expected
        elif self.operator == "not_in":
            return actual not in expected

        if actual is None:
            return False
        if self.operator == "gt":
            return bool(actual > expected)
        elif self.operator == "gte":
            return bool(actual >= expected)
        elif self.operator == "lt":
            return bool(actual < expected)
        elif self.operator == "lte":
            return bool(actual <= expected)
        return False

    def __str__(self) -> str:
        op_symbols = {
            "eq": "=",
            "ne": "!=",
            "gt": ">",
            "gte": ">=",
            "lt": "<",
            "lte": "<=",
            "in": "IN",
            "not_in": "NOT IN",
        }
        return f"{self.field} {op_symbols[self.operator]} {self.value!r}"


@dataclass(frozen=True)
class Query:
    """
    Filters, ordering and pagination for a will search.

    All filters are combined with AND logic.

    Example:
        >>> query = Query(
        ...     filters=(Filter.eq("testator_id", "user-42"),),
        ...     order_by="created_at",
        ...     order_direction="desc",
        ...     limit=20,
        ... )
        >>> page = await repo.search(query)
    """

    filters: tuple[Filter, ...] = ()
    order_by: str | None = None
    order_direction: Literal["asc", "desc"] = "asc"
    limit: int | None = None
    offset: int = 0

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}.")
        if self.limit is not None and self.limit < 0:
            raise ValueError(f"limit must be >= 0, got {self.limit}.")

    def with_filter(self, filter_: Filter) -> "Query":
        return Query(
            filters=(*self.filters, filter_),
            order_by=self.order_by,
            order_direction=self.order_direction,
            limit=self.limit,
            offset=self.offset,
        )

    def with_order(self, field: str, direction: Literal["asc", "desc"] = "asc") -> "Query":
        return Query(
            filters=self.filters,
            order_by=field,
            order_direction=direction,
            limit=self.limit,
            offset=self.offset,
        )

    def with_pagination(self, limit: int, offset: int = 0) -> "Query":
        """
        Example:
            >>> # Page 2 with 20 items per page
            >>> query = Query().with_pagination(limit=20, offset=20)
        """
        return Query(
            filters=self.filters,
            order_by=self.order_by,
            order_direction=self.order_direction,
            limit=limit,
            offset=offset,
        )

    def matches(self, row: dict[str, Any]) -> bool:
        return all(f.matches(row) for f in self.filters)

    def __str__(self) -> str:
        parts = []
        if self.filters:
            parts.append("WHERE " + " AND ".join(str(f) for f in self.filters))
        if self.order_by:
            parts.append(f"ORDER BY {self.order_by} {self.order_direction.upper()}")
        if self.limit is not None:
            parts.append(f"LIMIT {self.limit}")
        if self.offset:
            parts.append(f"OFFSET {self.offset}")
        return " ".join(parts) if parts else "(all records)"


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of search results."""

    items: tuple[T, ...] = field(default_factory=tuple)
    total: int = 0
    offset: int = 0
    limit: int | None = None

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total

    def __len__(self) -> int:
        return len(self.items)


__all__ = [
    "Filter",
    "Query",
    "Page",
]
