"""Best-effort merge of AI items onto authoritative anchor records."""
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from pydantic import BaseModel


def _get(item: Any, key: str) -> Any:
    if isinstance(item, BaseModel):
        return getattr(item, key, None)
    if isinstance(item, Mapping):
        return item.get(key)
    return getattr(item, key, None)


def _usable_text(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def merge_with_anchors(
    ai_items: Iterable[Any],
    anchors: Sequence[Any],
    index_field: str,
    fields: Mapping[str, str],
) -> List[Dict[str, Any]]:
    """Produce exactly one record per anchor, in anchor order.

    The first AI item whose `index_field` equals an anchor's index supplies
    that anchor's text; later duplicates and items with no matching anchor
    are dropped. Empty or missing AI text falls back to the anchor's field.

    Args:
        ai_items: Items recovered from the model (dicts or models)
        anchors: Authoritative records, each carrying `index_field`
        index_field: Name of the index on both sides
        fields: AI field name -> anchor field used when the AI value is unusable

    Returns:
        One dict per anchor: the anchor index plus every key of `fields`
    """
    by_index: Dict[int, Any] = {}
    for item in ai_items:
        idx = _get(item, index_field)
        if isinstance(idx, bool) or not isinstance(idx, int):
            continue
        by_index.setdefault(idx, item)

    merged = []
    for anchor in anchors:
        anchor_index = _get(anchor, index_field)
        match = by_index.get(anchor_index)
        record = {index_field: anchor_index}
        for ai_field, anchor_field in fields.items():
            value = _get(match, ai_field) if match is not None else None
            record[ai_field] = value if _usable_text(value) else _get(anchor, anchor_field)
        merged.append(record)

    return merged
