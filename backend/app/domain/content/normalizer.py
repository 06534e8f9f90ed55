# app/domain/content/normalizer.py
from __future__ import annotations

import copy
from typing import Any, Dict, Mapping

from app.domain.schemas.components import (
    ITEM_KEY,
    LIST,
    OBJECT,
    FieldSchema,
    get_schema,
)


def normalize_content(
    component_type: str,
    existing_content: Any,
    *,
    normalize_list_items: bool = False,
) -> Any:
    """
    Reconcile a section's content with its component schema.

    Guarantees:
    - every schema field is present (missing or null -> schema default)
    - object fields with a nested schema carry every nested key
    - keys unknown to the schema are kept verbatim
    - present primitive values are never coerced or rejected

    Unknown component types pass through unchanged. List elements are left
    alone unless ``normalize_list_items`` is set.

    Pure and idempotent; the input is never mutated.
    """
    schema = get_schema(component_type)
    if schema is None:
        return existing_content

    if isinstance(existing_content, Mapping):
        content: Dict[str, Any] = copy.deepcopy(dict(existing_content))
    else:
        # Not a record at all (null, list, string): nothing to keep
        content = {}

    return _fill(content, schema, normalize_list_items)


def _fill(content: Dict[str, Any], schema: Mapping[str, FieldSchema], normalize_list_items: bool) -> Dict[str, Any]:
    for key, field_schema in schema.items():
        value = content.get(key)

        if value is None:
            content[key] = field_schema.default_value()
            continue

        if field_schema.kind == OBJECT and field_schema.nested is not None:
            if isinstance(value, dict):
                content[key] = _fill(value, field_schema.nested, normalize_list_items)
            continue

        if field_schema.kind == LIST and normalize_list_items and field_schema.nested is not None:
            if isinstance(value, list):
                content[key] = _fill_items(value, field_schema.nested, normalize_list_items)

    return content


def _fill_items(values: list, item_schema: Mapping[str, FieldSchema], normalize_list_items: bool) -> list:
    scalar = item_schema.get(ITEM_KEY)
    result = []
    for item in values:
        if scalar is not None:
            result.append(scalar.default_value() if item is None else item)
        elif isinstance(item, dict):
            result.append(_fill(item, item_schema, normalize_list_items))
        else:
            result.append(item)
    return result
