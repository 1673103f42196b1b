"""Subway line ordering and the borough reference table used by the filter vocabulary."""

from __future__ import annotations

from typing import Iterable

# Lines that typically serve each borough, shown even before any listing uses them
BOROUGH_TYPICAL_LINES: dict[str, list[str]] = {
    "Manhattan": [
        "1", "2", "3", "4", "5", "6", "7",
        "A", "B", "C", "D", "E", "F", "J", "L", "M", "N", "Q", "R", "S", "W", "Z",
    ],
    "Brooklyn": [
        "2", "3", "4", "5",
        "A", "B", "C", "D", "F", "G", "J", "L", "M", "N", "Q", "R", "S", "W", "Z",
    ],
    "Queens": ["7", "A", "E", "F", "G", "J", "M", "N", "R", "S", "W", "Z"],
    "Bronx": ["1", "2", "4", "5", "6", "B", "D"],
    "Staten Island": ["SIR"],
}


def line_sort_key(code: str) -> tuple[int, int, str]:
    """Numeric codes first by value, then everything else lexicographically."""
    if code.isascii() and code.isdigit():
        return (0, int(code), "")
    return (1, 0, code)


def sort_line_codes(codes: Iterable[str]) -> list[str]:
    """
    De-duplicate and order line codes.

    Example:
        >>> sort_line_codes(["L", "10", "2", "A", "2"])
        ['2', '10', 'A', 'L']
    """
    return sorted(set(codes), key=line_sort_key)


def typical_lines_for(borough: str) -> list[str]:
    """Look up the reference lines for a borough name, ignoring case."""
    for name, lines in BOROUGH_TYPICAL_LINES.items():
        if name.lower() == borough.strip().lower():
            return list(lines)
    return []
