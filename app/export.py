"""
CSV export of normalized rows.

Values are written raw (fractions, plain numbers), never the display strings
the table view shows.

Quoting: a field is quoted when it contains the delimiter, a quote or a line
break, or when it starts or ends with a space; embedded quotes are doubled.
`csv.QUOTE_MINIMAL` has no rule for edge spaces, so fields are encoded here.
"""

from __future__ import annotations

import io
import math
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from .models import Row
from .rules import EXPORT_DELIMITER, EXPORT_ENCODING, EXPORT_LINE_TERMINATOR, ROW_FIELDS

_QUOTE = '"'
_QUOTE_TRIGGERS = (EXPORT_DELIMITER, _QUOTE, "\n", "\r")


def format_number(value: Optional[float]) -> str:
    """
    Raw text form of a metric, spelled the way the dashboard runtime spells numbers.

    Shortest digits that read back to the same float; plain notation for
    1e-6 <= |value| < 1e21 ("0.42", "0.000001", "-1200"), exponent outside
    it ("1e-7", "1.5e+21"). None becomes an empty field.
    """
    if value is None:
        return ""
    if not math.isfinite(value):
        return repr(value)
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = exponent + k  # value == 0.<digits> * 10**n

    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        text = "0." + "0" * -n + digits
    else:
        e = n - 1
        mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
        text = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
    return sign + text


def quote_field(value: str) -> str:
    if value and (value[0] == " " or value[-1] == " " or any(t in value for t in _QUOTE_TRIGGERS)):
        return _QUOTE + value.replace(_QUOTE, _QUOTE * 2) + _QUOTE
    return value


def row_to_record(row: Row) -> list[str]:
    data = row.model_dump(by_alias=True)
    out = []
    for field in ROW_FIELDS:
        value = data[field]
        out.append(value if isinstance(value, str) else format_number(value))
    return out


def _write_record(outp: io.StringIO, record: Sequence[str]) -> None:
    outp.write(EXPORT_DELIMITER.join(quote_field(v) for v in record))
    outp.write(EXPORT_LINE_TERMINATOR)


def rows_to_csv_text(rows: Iterable[Row]) -> str:
    outp = io.StringIO(newline="")
    _write_record(outp, ROW_FIELDS)
    for row in rows:
        _write_record(outp, row_to_record(row))
    return outp.getvalue()


def rows_to_csv(rows: Iterable[Row]) -> bytes:
    """Serialize rows to CSV bytes (header first, UTF-8, CRLF line endings)."""
    return rows_to_csv_text(rows).encode(EXPORT_ENCODING)
