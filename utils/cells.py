"""
utils/cells.py

Helpers for comparing spreadsheet cell values.
Cells come back as int / float / str / datetime depending on how they were
written, while JSON payloads carry ints and strings, so ids and keys are
compared through these helpers.
"""

from datetime import date, datetime
from typing import Any, Optional, Union

Number = Union[int, float]


def cell_text(value: Any) -> str:
    """Text form of a cell: None -> "", 3.0 -> "3", dates -> ISO"""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if (value.hour, value.minute, value.second, value.microsecond) == (0, 0, 0, 0):
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def as_number(value: Any) -> Optional[Number]:
    """Numeric value of a cell, or None when it is not a number"""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        return int(number) if number.is_integer() else number
    return None


def loose_equal(a: Any, b: Any) -> bool:
    """`1 == "1"` style comparison used for id lookups"""
    na, nb = as_number(a), as_number(b)
    if na is not None and nb is not None:
        return na == nb
    return cell_text(a) == cell_text(b)


def numeric_or_text(value: Any) -> Any:
    """Keep numbers as numbers ("7" -> 7), everything else untouched"""
    number = as_number(value)
    return value if number is None else number
