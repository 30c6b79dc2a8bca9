"""Property extractors for Notion page properties.

Each extractor takes one raw property object (or None) and returns a
canonical value. Dispatch is on the property's ``type`` discriminator.
Malformed or absent input degrades to None / an empty list; extractors
never raise.
"""

from __future__ import annotations

from typing import Any


def _typed(prop: Any, *types: str) -> str | None:
    """Return the property's type if it is a mapping of one of ``types``."""
    if not isinstance(prop, dict):
        return None
    prop_type = prop.get("type")
    if prop_type in types:
        return str(prop_type)
    return None


def _items(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _name(option: Any) -> str | None:
    if isinstance(option, dict) and isinstance(option.get("name"), str):
        return str(option["name"])
    return None


def extract_plain_text(prop: Any) -> str | None:
    """Concatenate the spans of a ``rich_text`` or ``title`` property."""
    prop_type = _typed(prop, "rich_text", "title")
    if prop_type is None:
        return None
    parts = [
        span["plain_text"]
        for span in _items(prop.get(prop_type))
        if isinstance(span, dict) and isinstance(span.get("plain_text"), str)
    ]
    return "".join(parts) or None


def extract_select(prop: Any) -> str | None:
    """Name of the chosen option of a ``select`` or ``status`` property."""
    prop_type = _typed(prop, "select", "status")
    if prop_type is None:
        return None
    return _name(prop.get(prop_type))


def extract_multi_select(prop: Any) -> list[str]:
    """Option names of a ``multi_select`` property.

    A property that was converted to ``select`` is read as a one-element list.
    """
    prop_type = _typed(prop, "multi_select", "select")
    if prop_type == "multi_select":
        names = (_name(option) for option in _items(prop.get("multi_select")))
        return [name for name in names if name is not None]
    if prop_type == "select":
        name = _name(prop.get("select"))
        return [name] if name else []
    return []


def extract_url(prop: Any) -> str | None:
    if _typed(prop, "url") is None:
        return None
    url = prop.get("url")
    return url if isinstance(url, str) and url else None


def extract_date(prop: Any) -> str | None:
    """Start of a ``date`` property."""
    if _typed(prop, "date") is None:
        return None
    date = prop.get("date")
    if not isinstance(date, dict):
        return None
    start = date.get("start")
    return start if isinstance(start, str) else None


def _ids(prop: Any, prop_type: str) -> list[str]:
    if _typed(prop, prop_type) is None:
        return []
    return [
        str(item["id"])
        for item in _items(prop.get(prop_type))
        if isinstance(item, dict) and item.get("id")
    ]


def extract_relation_ids(prop: Any) -> list[str]:
    """Related page ids of a ``relation`` property, in remote order."""
    return _ids(prop, "relation")


def extract_person_ids(prop: Any) -> list[str]:
    """User ids of a ``people`` property, in remote order."""
    return _ids(prop, "people")
