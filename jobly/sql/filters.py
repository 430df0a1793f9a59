"""
Filtered list queries.

A list endpoint accepts a sparse set of optional criteria (a search term and
numeric bounds). Each entity declares a `ListQuery`: its projection and one
explicit, ordered tuple of `FilterField`s. `build_filtered_select` walks that
tuple in order, so placeholder numbering never depends on how the criteria
mapping happens to be ordered.

Predicate text is fixed for every entity:

    search       <column> LIKE '%' || $i || '%'
    lower bound  <column> >= $i
    upper bound  <column> <= $i

Example:
    >>> build_filtered_select(COMPANY_LIST, {"search": "n", "min_employees": 2})
    ("SELECT handle, name FROM companies WHERE (name LIKE '%' || $1 || '%' AND num_employees >= $2);", ['n', 2])
"""

import enum
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from jobly.core.exceptions import RangeInvalidError

Number = Union[int, float, Decimal]

# Integer bounds must fit a signed 64-bit column value (PostgreSQL bigint, SQLite INTEGER)
BIGINT_MIN = -2 ** 63
BIGINT_MAX = 2 ** 63 - 1


class Predicate(str, enum.Enum):
    SEARCH = "search"
    MIN = "min"
    MAX = "max"


def search_fragment(column: str, index: int) -> str:
    """Substring match on a text column."""
    return f"{column} LIKE '%' || ${index} || '%'"


def min_fragment(column: str, index: int) -> str:
    """Inclusive lower bound on a numeric column."""
    return f"{column} >= ${index}"


def max_fragment(column: str, index: int) -> str:
    """Inclusive upper bound on a numeric column."""
    return f"{column} <= ${index}"


_FRAGMENT_BUILDERS: Dict[Predicate, Callable[[str, int], str]] = {
    Predicate.SEARCH: search_fragment,
    Predicate.MIN: min_fragment,
    Predicate.MAX: max_fragment,
}


def to_number(value: Any) -> Optional[Number]:
    """
    Parse a criteria value as a number.

    Returns None for anything that is not numeric (None, booleans, NaN,
    non-numeric strings). Zero is a valid number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, Decimal)):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) else value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return None if math.isnan(number) else number
    return None


@dataclass(frozen=True)
class FilterField:
    """One optional criterion: the criteria key, the column it filters and how."""
    name: str
    column: str
    predicate: Predicate

    def fragment(self, index: int) -> str:
        return _FRAGMENT_BUILDERS[self.predicate](self.column, index)

    def bind_value(self, raw: Any) -> Optional[Any]:
        """
        Value to bind for this field, or None when the field is absent.

        Raises:
            RangeInvalidError: An integer bound too large to compare against a column
        """
        if self.predicate is Predicate.SEARCH:
            # Any string counts, including the empty string
            return raw if isinstance(raw, str) else None
        number = to_number(raw)
        if isinstance(number, int) and not BIGINT_MIN <= number <= BIGINT_MAX:
            raise RangeInvalidError(f"{self.name} parameter value is out of range.")
        return number


@dataclass(frozen=True)
class OrderedRange:
    """`lower` must not exceed `upper` when both are given."""
    lower: str
    upper: str
    message: str

    def check(self, values: Mapping[str, Any]) -> None:
        low, high = values.get(self.lower), values.get(self.upper)
        if low is not None and high is not None and low > high:
            raise RangeInvalidError(self.message)


@dataclass(frozen=True)
class Bounded:
    """`field`, when given, must lie within [minimum, maximum]."""
    field: str
    minimum: Number
    maximum: Number
    message: str

    def check(self, values: Mapping[str, Any]) -> None:
        value = values.get(self.field)
        if value is not None and not (self.minimum <= value <= self.maximum):
            raise RangeInvalidError(self.message)


@dataclass(frozen=True)
class ListQuery:
    table: str
    projection: Tuple[str, ...]
    fields: Tuple[FilterField, ...]
    rules: Tuple[Union[OrderedRange, Bounded], ...] = ()
    order_by: Optional[str] = None

    def select_clause(self) -> str:
        return f"SELECT {', '.join(self.projection)} FROM {self.table}"

    def finish(self, statement: str) -> str:
        if self.order_by:
            statement = f"{statement} ORDER BY {self.order_by}"
        return f"{statement};"


def _criteria_dict(criteria: Any) -> Dict[str, Any]:
    if criteria is None:
        return {}
    if hasattr(criteria, "model_dump"):
        return criteria.model_dump()
    return dict(criteria)


def build_filtered_select(query: ListQuery, criteria: Any = None) -> Tuple[str, List[Any]]:
    """
    Build the SELECT for a list endpoint from optional criteria.

    Args:
        query: Entity list definition
        criteria: Mapping (or pydantic model) of criteria values; unknown keys are ignored

    Returns:
        (statement, values) where values[i - 1] binds placeholder $i

    Raises:
        RangeInvalidError: If the criteria break one of the query's range rules.
            Raised before any SQL is built.
    """
    raw = _criteria_dict(criteria)

    present: Dict[str, Any] = {}
    for field in query.fields:
        value = field.bind_value(raw.get(field.name))
        if value is not None:
            present[field.name] = value

    for rule in query.rules:
        rule.check(present)

    if not present:
        return query.finish(query.select_clause()), []

    predicates: List[str] = []
    values: List[Any] = []
    for field in query.fields:
        if field.name in present:
            values.append(present[field.name])
            predicates.append(field.fragment(len(values)))

    where = " AND ".join(predicates)
    return query.finish(f"{query.select_clause()} WHERE ({where})"), values
