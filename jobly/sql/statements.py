"""
INSERT and partial UPDATE statement builders.

Both take a sparse record and emit a statement touching only the columns
actually supplied, with $n placeholders and the matching value list.
"""

from typing import Any, List, Mapping, Sequence, Tuple

from jobly.core.exceptions import ValidationFailedError

# Keys with this prefix carry transport metadata (e.g. `_token`), never columns
METADATA_PREFIX = "_"


def parameterized_string(count: int) -> str:
    """
    Placeholder list for `count` values.

    Examples:
        >>> parameterized_string(4)
        '$1, $2, $3, $4'
    """
    return ", ".join(f"${index}" for index in range(1, count + 1))


def sql_for_partial_update(table: str, items: Mapping[str, Any], key: str, ident: Any) -> Tuple[str, List[Any]]:
    """
    Generate a selective UPDATE for the columns present in `items`.

    Args:
        table: Table to update
        items: Column -> new value; keys starting with "_" are dropped
        key: Column identifying the row (e.g. username, handle, id)
        ident: Value of `key` for the row being updated

    Returns:
        (query, values), e.g.
        ("UPDATE addresses SET city=$1, state=$2 WHERE id=$3 RETURNING *", ["Portland", "Oregon", 1])

    Raises:
        ValidationFailedError: If no updatable columns remain
    """
    columns = [column for column in items if not column.startswith(METADATA_PREFIX)]
    if not columns:
        raise ValidationFailedError("No fields to update")

    assignments = ", ".join(f"{column}=${index}" for index, column in enumerate(columns, start=1))
    query = f"UPDATE {table} SET {assignments} WHERE {key}=${len(columns) + 1} RETURNING *"

    values = [items[column] for column in columns]
    values.append(ident)
    return query, values


def _is_defined(value: Any) -> bool:
    return value is not None and value != ""


def sql_for_insert(table: str, record: Mapping[str, Any], returning: Sequence[str]) -> Tuple[str, List[Any]]:
    """
    Generate an INSERT for the defined fields of `record`.

    None and empty-string values are left out so the column default applies;
    0 and False are kept. Column order follows the record.

    Raises:
        ValidationFailedError: If the record has no defined fields
    """
    entries = [(column, value) for column, value in record.items()
               if not column.startswith(METADATA_PREFIX) and _is_defined(value)]
    if not entries:
        raise ValidationFailedError(f"No fields to insert into {table}")

    columns = ", ".join(column for column, _ in entries)
    query = (
        f"INSERT INTO {table} ({columns}) "
        f"VALUES ({parameterized_string(len(entries))}) "
        f"RETURNING {', '.join(returning)}"
    )
    return query, [value for _, value in entries]
