"""Dot-path access into free-form JSON documents.

Paths look like ``foodMenu.day1`` or ``guests.0.name``. Numeric segments
index into lists. Approval markers are tracked per *base field*, the first
segment of the path.
"""

from typing import Any

PATH_SEPARATOR = "."


def split_path(path: str) -> list[str]:
    """Split a dot path into its segments."""
    return path.split(PATH_SEPARATOR)


def base_field(path: str) -> str:
    """Return the first segment of a dot path (``foodMenu.day1`` -> ``foodMenu``)."""
    return split_path(path)[0]


def _list_index(key: str) -> int | None:
    if key.isascii() and key.isdigit():
        return int(key)
    return None


def _get_child(container: Any, key: str) -> Any:
    if isinstance(container, dict):
        return container.get(key)
    if isinstance(container, list):
        index = _list_index(key)
        if index is not None and index < len(container):
            return container[index]
    return None


def _set_child(container: dict[str, Any] | list[Any], key: str, value: Any) -> None:
    if isinstance(container, list):
        index = _list_index(key)
        # Writing past the end pads with nulls, like a sparse JSON array
        if index >= len(container):
            container.extend([None] * (index + 1 - len(container)))
        container[index] = value
    else:
        container[key] = value


def _holds(child: Any, key: str) -> bool:
    """Whether ``child`` can take ``key`` as its next segment without being replaced."""
    if isinstance(child, dict):
        return True
    return isinstance(child, list) and _list_index(key) is not None


def get_path(document: dict[str, Any] | None, path: str) -> Any:
    """Read the value at ``path``.

    Returns None as soon as an intermediate level is missing, null, a scalar,
    or a list indexed out of range or by a non-numeric segment. Never mutates
    ``document``.

    Args:
        document: Document to read from
        path: Dot-delimited path

    Returns:
        The stored value, or None when the path does not resolve
    """
    current: Any = document
    for key in split_path(path):
        if not isinstance(current, (dict, list)):
            return None
        current = _get_child(current, key)
    return current


def set_path(document: dict[str, Any], path: str, value: Any) -> dict[str, Any]:
    """Write ``value`` at ``path``, creating intermediate mappings.

    Mutates ``document`` in place. Lists are indexed by numeric segments. An
    intermediate that cannot take the next segment (a string, a number, a
    list followed by a non-numeric segment) is replaced by a fresh mapping,
    dropping whatever it held.

    Args:
        document: Document to write into
        path: Dot-delimited path
        value: Value to store at the last segment

    Returns:
        The same ``document``, for chaining
    """
    keys = split_path(path)
    current: Any = document
    for key, next_key in zip(keys, keys[1:]):
        child = _get_child(current, key)
        if not _holds(child, next_key):
            child = {}
            _set_child(current, key, child)
        current = child
    _set_child(current, keys[-1], value)
    return document
