"""Text renditions of cell values.

A cell value is one of None, bool, int, float, str, a list of values or a
mapping. Each consumer gets its own rendition:

- the grid cell shows a short label (`format_cell_value`);
- tooltips and the detail overlay show indented JSON for containers
  (`format_tooltip_value`, `format_detail_value`);
- substring filters match against `to_filter_text`;
- sorting compares with `compare_values`.
"""

import json
import locale
import re
import unicodedata
from typing import Any, Mapping, Tuple, Union

_NUMBER_CHUNKS = re.compile(r"\d+|\D+")


def is_number(value: Any) -> bool:
    """True for int and float values; bool is not a number here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_container(value: Any) -> bool:
    return isinstance(value, (list, tuple, Mapping))


def to_plain_text(value: Any) -> str:
    """Natural string form of a scalar.

    Booleans use their JSON spelling so that they read the same in the grid
    and in the JSON renditions of containers.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def to_compact_json(value: Any) -> str:
    return json.dumps(
        value, separators=(",", ":"), ensure_ascii=False, default=str
    )


def to_pretty_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def format_cell_value(value: Any) -> str:
    """Short label shown inside a grid cell.

    Lists whose first element is a number are presented as vectors and are
    not enumerated.

    Args:
        value: The cell value.

    Returns:
        The label.
    """
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        if len(value) > 0 and is_number(value[0]):
            return f"[Vector dim={len(value)}]"
        return f"[Array({len(value)})]"
    if isinstance(value, Mapping):
        return to_compact_json(value)
    return to_plain_text(value)


def _format_expanded(value: Any) -> str:
    if value is None:
        return ""
    if _is_container(value):
        return to_pretty_json(value)
    return to_plain_text(value)


def format_tooltip_value(value: Any) -> str:
    """Tooltip text; containers are shown as indented JSON."""
    return _format_expanded(value)


def format_detail_value(value: Any) -> str:
    """Text shown for one field in the row detail overlay."""
    return _format_expanded(value)


def to_filter_text(value: Any) -> str:
    """Lower-cased text that substring filters are matched against.

    Vectors and other containers are matched against their literal JSON,
    not against the label shown in the cell.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip().lower()
    if _is_container(value):
        return to_compact_json(value).lower()
    return to_plain_text(value).lower()


def to_sort_text(value: Any) -> str:
    """Text used when two values can not be compared as numbers."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if _is_container(value):
        return to_compact_json(value)
    return to_plain_text(value)


def fold_text(text: str) -> str:
    """Case and accent folded form of a text ("Éclair" becomes "eclair")."""
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def natural_key(text: str) -> Tuple[Tuple[int, Union[int, str]], ...]:
    """Case and accent insensitive key that orders digit runs by value.

    With this key "row9" sorts before "row10". Digit runs sort before
    other text at the same position. Text runs are folded first so the
    order of accented letters does not depend on the collation of the
    process locale, then collated with `locale.strxfrm`.
    """
    return tuple(
        (0, int(chunk)) if chunk.isdecimal() else (1, locale.strxfrm(chunk))
        for chunk in _NUMBER_CHUNKS.findall(fold_text(text))
    )


def compare_values(a: Any, b: Any) -> int:
    """Three-way comparison of two cell values.

    None sorts after every other value. Two numbers compare numerically;
    anything else compares by `natural_key` of `to_sort_text`.

    Args:
        a: Left value.
        b: Right value.

    Returns:
        -1 if a orders first, 1 if b orders first, 0 if they are
        equivalent.
    """
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1
    if is_number(a) and is_number(b):
        return (a > b) - (a < b)
    ka = natural_key(to_sort_text(a))
    kb = natural_key(to_sort_text(b))
    return (ka > kb) - (ka < kb)
