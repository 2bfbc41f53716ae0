"""
SQL helpers shared by the CRUD layer.

Statements are assembled from fixed templates plus a CompiledClause: an
ordered list of fragments using positional placeholders ($1, $2, ...) and the
parameters bound to them. bind_positional() turns the finished text into a
SQLAlchemy text() construct so it runs on any dialect.
"""

import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Tuple

from sqlalchemy import TextClause, text

from app.core.errors import EmptyPayloadError, UnknownFieldError

_PLACEHOLDER = re.compile(r"\$(\d+)")


@dataclass(frozen=True)
class CompiledClause:
    """Parameterized SQL fragments and their positional parameters.

    ``params[i]`` is bound to placeholder ``$i+1``. ``base`` is an optional
    leading predicate that takes no parameter (``1=1`` for filters).
    """

    fragments: Tuple[str, ...]
    params: Tuple[Any, ...]
    separator: str = ", "
    base: Optional[str] = None

    @property
    def sql(self) -> str:
        parts = [self.base] if self.base else []
        parts.extend(self.fragments)
        return self.separator.join(parts)

    def to_statement(self, template: str, *extra_params: Any) -> TextClause:
        """Render ``template`` around this clause and bind all parameters.

        ``{clause}`` in the template is replaced by :attr:`sql` and ``{next}``
        by the first free placeholder index, so a template may reference
        ``${next}`` for a trailing key such as ``WHERE handle = ${next}``.
        """
        sql = template.format(clause=self.sql, next=len(self.params) + 1)
        return bind_positional(sql, self.params + tuple(extra_params))


def bind_positional(sql: str, params: Iterable[Any]) -> TextClause:
    """Rewrite ``$n`` placeholders into named binds ``:pn`` and bind values."""
    values = {f"p{idx}": value for idx, value in enumerate(params, start=1)}
    statement = text(_PLACEHOLDER.sub(lambda m: f":p{m.group(1)}", sql))
    if values:
        statement = statement.bindparams(**values)
    return statement


def compile_partial_update(
    payload: Mapping[str, Any],
    alias_map: Mapping[str, str],
    allowed: Optional[Iterable[str]] = None,
) -> CompiledClause:
    """
    Compile a sparse field mapping into the body of a SQL SET clause.

    Keys are resolved to column names through ``alias_map`` (falling back to
    the key itself) and emitted in payload order:

        {"firstName": "Aliya", "age": 32}, {"firstName": "first_name"}
        => '"first_name"=$1, "age"=$2', ("Aliya", 32)

    A key mapped to None is still written; only a missing key is left alone.

    Args:
        payload: External field name -> new value. Must not be empty.
        alias_map: External field name -> column name.
        allowed: Optional set of accepted external names.

    Raises:
        EmptyPayloadError: If payload has no keys
        UnknownFieldError: If allowed is given and a key is not in it
    """
    if not payload:
        raise EmptyPayloadError()

    if allowed is not None:
        accepted = set(allowed)
        for key in payload:
            if key not in accepted:
                raise UnknownFieldError(key)

    fragments = []
    params = []
    for position, (key, value) in enumerate(payload.items(), start=1):
        column = alias_map.get(key, key)
        fragments.append(f'"{column}"=${position}')
        params.append(value)

    return CompiledClause(fragments=tuple(fragments), params=tuple(params))
