"""
Helpers for building parameterized SQL fragments.

Crud modules keep hand-written SQL for their statements and use these helpers
only for the dynamic parts: the SET list of a partial UPDATE and the WHERE
clause of a filtered SELECT. Values are never interpolated into the SQL text;
they come back separately, positionally aligned with the `$1..$N`
placeholders in the fragment.
"""

from typing import Any, Dict, Iterable, List, Mapping, NamedTuple

from app.core.exceptions import BadRequestError


class SqlFragment(NamedTuple):
    """A SQL fragment and the bind values for its `$N` placeholders."""
    clause: str
    values: List[Any]


def resolve_column(key: str, table: Mapping[str, str]) -> str:
    """Return the column mapped to `key`, or `key` itself when unmapped."""
    return table.get(key, key)


def quote_identifier(name: str) -> str:
    """Double-quote a column name, escaping embedded double quotes."""
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def sql_for_partial_update(data: Mapping[str, Any], js_to_sql: Mapping[str, str]) -> SqlFragment:
    """
    Build the SET list for a partial UPDATE.

    Keys are renamed to their database column via `js_to_sql` (falling back to
    the key itself) and quoted; placeholders are numbered from $1 in the order
    the keys appear in `data`.

        >>> sql_for_partial_update({"firstName": "Aliya", "age": 32}, {"firstName": "first_name"})
        SqlFragment(clause='"first_name"=$1, "age"=$2', values=['Aliya', 32])

    Args:
        data: Fields to update, keyed by their API name
        js_to_sql: API name -> column name

    Returns:
        SqlFragment with the comma-joined assignments and their values

    Raises:
        BadRequestError: If `data` is empty
    """
    keys = list(data)
    if not keys:
        raise BadRequestError("No data")

    cols = [
        f"{quote_identifier(resolve_column(key, js_to_sql))}=${idx}"
        for idx, key in enumerate(keys, start=1)
    ]

    return SqlFragment(", ".join(cols), [data[key] for key in keys])


def escape_like(value: Any) -> str:
    """Backslash-escape LIKE wildcards so `%` and `_` match literally."""
    return str(value).replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def sql_for_filter(
    filters: Mapping[str, Any],
    js_to_sql: Mapping[str, str],
    fuzzy_fields: Iterable[str] = ("name",),
) -> SqlFragment:
    """
    Build a WHERE clause from search filters.

    `js_to_sql` maps each accepted filter to a predicate prefix ending in its
    comparison operator, e.g. {"minSalary": "salary >= "}. Values for keys in
    `fuzzy_fields` are wrapped in `%...%` for substring matching; wildcards
    already in those values are backslash-escaped (PostgreSQL's default LIKE
    escape) so they match literally. `filters` is left untouched.

        >>> sql_for_filter({"name": "and"}, {"name": "name ILIKE "})
        SqlFragment(clause='WHERE name ILIKE $1', values=['%and%'])

    An empty `filters` yields SqlFragment("", []), which callers embed as is.

    Raises:
        BadRequestError: If a filter has no entry in `js_to_sql`
    """
    fuzzy = set(fuzzy_fields)
    wheres: List[str] = []
    values: List[Any] = []

    for idx, key in enumerate(filters, start=1):
        if key not in js_to_sql:
            raise BadRequestError(f"Unsupported filter: {key}")

        value = filters[key]
        if key in fuzzy:
            value = f"%{escape_like(value)}%"

        wheres.append(f"{js_to_sql[key]}${idx}")
        values.append(value)

    if not wheres:
        return SqlFragment("", [])

    return SqlFragment("WHERE " + " AND ".join(wheres), values)


def prune_filters(filters: Dict[str, Any]) -> Dict[str, Any]:
    """Drop filters that were not supplied (None values) from a query dict."""
    return {key: value for key, value in filters.items() if value is not None}
