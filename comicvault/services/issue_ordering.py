"""
Alphanumeric ordering of issue-number labels.

Labels are free-form ("#1", "1.5", "Annual 1", "0"). Plain string order puts
"#10" before "#2", so labels are ordered by their numeric token first and by
the full label second:

    1. Drop every character that is not a digit or ".".
    2. Parse the leading decimal number of what remains (0 if none).
    3. Compare numbers; on a tie compare the original labels as strings.
"""

import re
from collections.abc import Callable, Iterable
from typing import TypeVar

T = TypeVar("T")

_NON_NUMERIC = re.compile(r"[^0-9.]")

# Leading decimal number: "12", "12.", "12.5", ".5"
_LEADING_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def numeric_token(label: str) -> float:
    """
    Numeric value of an issue label.

    Examples:
        "#12" -> 12.0, "1.5" -> 1.5, "Annual 1" -> 1.0, "1.2.3" -> 1.2,
        "Special" -> 0.0
    """
    stripped = _NON_NUMERIC.sub("", label)
    match = _LEADING_NUMBER.match(stripped)
    return float(match.group()) if match else 0.0


def issue_sort_key(label: str) -> tuple[float, str]:
    """Sort key equivalent to compare_issue_labels."""
    return (numeric_token(label), label)


def compare_issue_labels(a: str, b: str) -> int:
    """
    Compare two issue labels.

    Returns:
        -1 if a sorts before b, 0 if equal, 1 if after
    """
    key_a = issue_sort_key(a)
    key_b = issue_sort_key(b)
    if key_a < key_b:
        return -1
    if key_a > key_b:
        return 1
    return 0


def sort_issues(items: Iterable[T], label: Callable[[T], str]) -> list[T]:
    """Return items sorted by the alphanumeric order of their labels."""
    return sorted(items, key=lambda item: issue_sort_key(label(item)))
