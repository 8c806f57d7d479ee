"""Record Operations: pure lookup, id generation and record builders.

Invariants:
    - Functions are PURE: they never mutate the collection or the body passed in
    - Ids match by string form, so path segment "1" finds id 1
    - Generated ids are strictly greater than every numeric id present
"""

import json
import math

from mockapi.core.domain_types import ID_FIELD, Collection, Record


def is_number(value: object) -> bool:
    """True for int/float values. bool is excluded."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def stringify(value: object) -> str:
    """String form of a JSON value, as it would appear in a URL.

    Booleans render as true/false, None as null and integral floats
    without a fractional part, so `?active=true` and `/users/2` match.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if is_number(value):
        return str(value)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def parse_json(text: str | bytes) -> object:
    """json.loads restricted to standard JSON. Raises ValueError.

    NaN, Infinity and numbers that overflow to infinity are rejected, since
    they cannot be written back out as JSON.
    """
    return json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)


def _reject_constant(token: str) -> object:
    raise ValueError(f"{token} is not valid JSON")


def _finite_float(token: str) -> float:
    number = float(token)
    if math.isinf(number):
        raise ValueError(f"{token} is out of range")
    return number


def find_index(records: Collection, record_id: str) -> int:
    """Index of the first record whose id matches record_id, or -1."""
    for index, record in enumerate(records):
        if ID_FIELD in record and stringify(record[ID_FIELD]) == record_id:
            return index
    return -1


def next_id(records: Collection) -> int | float:
    """Max numeric id + 1, or 1 when the collection has no numeric id."""
    numeric = [r[ID_FIELD] for r in records if is_number(r.get(ID_FIELD))]
    if not numeric:
        return 1
    return max(numeric) + 1


def build_created(body: Record, new_id: int | float) -> Record:
    """Body with the computed id. The computed id always wins."""
    return _with_id(body, new_id)


def build_replacement(existing: Record, body: Record) -> Record:
    """Body with the existing record's id reasserted."""
    return _with_id(body, existing.get(ID_FIELD))


def merge_update(existing: Record, body: Record) -> Record:
    """Shallow merge: body fields overwrite, absent fields are kept."""
    return {**existing, **body}


def _with_id(body: Record, record_id: object) -> Record:
    record: Record = {ID_FIELD: record_id}
    record.update((k, v) for k, v in body.items() if k != ID_FIELD)
    return record
