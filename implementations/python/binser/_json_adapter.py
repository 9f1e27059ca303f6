"""JSON adapter — convert records to and from plain JSON-compatible objects.

Type mapping:
    Int32Field   ↔ JSON integer
    EnumField    ↔ JSON string (member name); integers accepted on input
    BoolField    ↔ JSON true/false
    Float64Field ↔ JSON number
    TextField    ↔ JSON string
    ArrayField   ↔ JSON array of objects

Missing keys take the field default.  Unknown keys, wrong JSON types and
the non-standard NaN/Infinity tokens raise BinserError(ERR_SCHEMA).
Like direct construction, this performs no range checks: a JSON class
with age 5 loads fine and only fails once its encoding is decoded.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Type

from ._errors import ERR_SCHEMA, BinserError
from ._fields import ArrayField, BoolField, EnumField, Field, Float64Field, Int32Field, TextField
from ._record import Record


def _reject_constant(token: str) -> Any:
    raise BinserError(ERR_SCHEMA, "non-standard JSON constant {}".format(token))


def _value_to_obj(field: Field, value: Any) -> Any:
    if isinstance(field, ArrayField):
        return [record_to_obj(item) for item in value]
    if isinstance(field, EnumField):
        return value.name if isinstance(value, field.enum_type) else int(value)
    return value


def record_to_obj(record: Record) -> Dict[str, Any]:
    """Return a dict of field name → JSON-compatible value, in wire order."""
    return {f.name: _value_to_obj(f, getattr(record, f.name)) for f in record.FIELDS}


def _value_from_obj(field: Field, val: Any, path: str) -> Any:
    if isinstance(field, ArrayField):
        if not isinstance(val, list):
            raise BinserError(ERR_SCHEMA, "{}: expected array".format(path))
        return [
            record_from_obj(field.record_type, item, "{}[{}]".format(path, i))
            for i, item in enumerate(val)
        ]

    if isinstance(field, EnumField):
        if isinstance(val, str):
            try:
                return field.enum_type[val]
            except KeyError:
                raise BinserError(ERR_SCHEMA, "{}: unknown {} {!r}".format(
                    path, field.enum_type.__name__, val))
        if isinstance(val, int) and not isinstance(val, bool):
            try:
                return field.enum_type(val)
            except ValueError:
                return val
        raise BinserError(ERR_SCHEMA, "{}: expected enum name or ordinal".format(path))

    if isinstance(field, BoolField):
        if not isinstance(val, bool):
            raise BinserError(ERR_SCHEMA, "{}: expected boolean".format(path))
        return val

    if isinstance(field, Int32Field):
        # True is an int in Python; in JSON it is not.
        if isinstance(val, bool) or not isinstance(val, int):
            raise BinserError(ERR_SCHEMA, "{}: expected integer".format(path))
        return val

    if isinstance(field, Float64Field):
        if isinstance(val, bool) or not isinstance(val, (int, float)):
            raise BinserError(ERR_SCHEMA, "{}: expected number".format(path))
        try:
            return float(val)
        except OverflowError:
            raise BinserError(ERR_SCHEMA, "{}: number out of range".format(path))

    if isinstance(field, TextField):
        if not isinstance(val, str):
            raise BinserError(ERR_SCHEMA, "{}: expected string".format(path))
        return val

    raise BinserError(ERR_SCHEMA, "{}: unsupported field kind {}".format(path, field.kind))


def record_from_obj(record_type: Type[Record], obj: Any, path: str = "$") -> Record:
    """Build a record_type instance from a parsed JSON object."""
    if not isinstance(obj, dict):
        raise BinserError(ERR_SCHEMA, "{}: expected object".format(path))
    known = {f.name: f for f in record_type.FIELDS}
    unknown = sorted(k for k in obj if k not in known)
    if unknown:
        raise BinserError(ERR_SCHEMA, "{}: unknown key(s) {}".format(path, ", ".join(unknown)))
    values = {
        name: _value_from_obj(known[name], val, "{}.{}".format(path, name))
        for name, val in obj.items()
    }
    return record_type(**values)


def record_from_json(record_type: Type[Record], raw: bytes) -> Record:
    """Parse UTF-8 JSON bytes into a record."""
    if raw.startswith(b"\xef\xbb\xbf"):
        raise BinserError(ERR_SCHEMA, "BOM not allowed")
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise BinserError(ERR_SCHEMA, "JSON input is not valid UTF-8")
    try:
        obj = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise BinserError(ERR_SCHEMA, "invalid JSON: {}".format(e))
    return record_from_obj(record_type, obj)


def record_to_json(record: Record, indent: int = 2) -> str:
    return json.dumps(record_to_obj(record), indent=indent, ensure_ascii=False, allow_nan=False)
