"""
Dynamic filter-query builder.

Each searchable entity declares its filterable fields once as a tuple of
FieldSpec records. build_filter() walks that tuple in declared order and
emits a parameterized predicate for every field the caller supplied, so
placeholder numbering depends only on which fields are present, never on
the order the caller passed them in.
"""

import enum
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from app.core.errors import InvalidFilterValueError, UnknownFieldError
from app.core.sql import CompiledClause

TRUE_PREDICATE = "1=1"

# Largest value a PostgreSQL INTEGER column can hold
PG_INTEGER_MAX = 2**31 - 1


class Comparison(str, enum.Enum):
    """SQL comparison operator applied to a filter column."""
    EQUALS = "="
    GREATER_OR_EQUAL = ">="
    LESS_OR_EQUAL = "<="
    GREATER_THAN = ">"
    ILIKE = "ILIKE"


class ValueTransform(str, enum.Enum):
    """
    How a raw filter value becomes a bound parameter.

    - IDENTITY: value bound unchanged (numbers are range-checked)
    - WILDCARD: string wrapped as %value% for substring matching
    - THRESHOLD: tri-state flag; True binds 0, False/None adds no predicate
    """
    IDENTITY = "identity"
    WILDCARD = "wildcard"
    THRESHOLD = "threshold"


@dataclass(frozen=True)
class FieldSpec:
    """One filterable column of an entity."""
    external: str
    column: str
    comparison: Comparison = Comparison.EQUALS
    transform: ValueTransform = ValueTransform.IDENTITY
    allow_negative: bool = False
    max_value: Optional[int] = None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _is_finite(value: Any) -> bool:
    # ints are always finite; float() of a huge int overflows
    if isinstance(value, int):
        return True
    if isinstance(value, Decimal):
        return value.is_finite()
    try:
        return math.isfinite(value)
    except (OverflowError, ValueError):
        return False


def _transform(spec: FieldSpec, value: Any) -> Optional[Any]:
    """Return the parameter to bind, or None when the field adds no predicate."""
    if spec.transform is ValueTransform.WILDCARD:
        if not isinstance(value, str):
            raise InvalidFilterValueError(spec.external, value, "expected a string")
        return f"%{value}%"

    if spec.transform is ValueTransform.THRESHOLD:
        if not isinstance(value, bool):
            raise InvalidFilterValueError(spec.external, value, "expected true or false")
        return 0 if value else None

    if spec.comparison in (Comparison.GREATER_OR_EQUAL, Comparison.LESS_OR_EQUAL, Comparison.GREATER_THAN):
        if not _is_number(value) or not _is_finite(value):
            raise InvalidFilterValueError(spec.external, value, "expected a finite number")
        if value < 0 and not spec.allow_negative:
            raise InvalidFilterValueError(spec.external, value, "must not be negative")
        if spec.max_value is not None and value > spec.max_value:
            raise InvalidFilterValueError(spec.external, value, f"must be at most {spec.max_value}")

    return value


def build_filter(field_specs: Sequence[FieldSpec], request: Mapping[str, Any]) -> CompiledClause:
    """
    Build a WHERE predicate from optional filter values.

    The result always starts with the always-true base predicate, so its
    ``sql`` can follow ``WHERE`` directly:

        specs: minEmployees (>=), maxEmployees (<=), nameLike (ILIKE)
        request: {"nameLike": "tech", "maxEmployees": 500}
        => "1=1 AND num_employees <= $1 AND name ILIKE $2", (500, "%tech%")

    Args:
        field_specs: Declared filterable fields, in canonical order
        request: External field name -> value; None means not filtered

    Raises:
        UnknownFieldError: If request names a field not in field_specs
        InvalidFilterValueError: If a value fails its type or range check
    """
    declared = {spec.external for spec in field_specs}
    for key in request:
        if key not in declared:
            raise UnknownFieldError(key)

    fragments = []
    params = []
    for spec in field_specs:
        value = request.get(spec.external)
        if value is None:
            continue

        param = _transform(spec, value)
        if param is None:
            continue

        comparison = Comparison.GREATER_THAN if spec.transform is ValueTransform.THRESHOLD else spec.comparison
        fragments.append(f"{spec.column} {comparison.value} ${len(params) + 1}")
        params.append(param)

    return CompiledClause(
        fragments=tuple(fragments),
        params=tuple(params),
        separator=" AND ",
        base=TRUE_PREDICATE,
    )
