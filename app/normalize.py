"""
Core roster normalization.

Responsibilities:
- active-status filtering
- person resolution (employees block preferred over externals)
- display name construction
- total parsing of string-encoded metrics
- month lookup in the utilisation time series

Nothing here raises for a well-typed roster: bad metrics degrade to None
(or 0 for net earnings) and the pass continues.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Iterable, List, Optional, Sequence

from .models import (
    MonthlyUtilisation,
    NormalizationSummary,
    PersonBlock,
    ResolvedPerson,
    Row,
    SourceRecord,
    WorkforceUtilisation,
)
from .rules import ACTIVE_STATUS, EXTERNAL_JOB_TYPE, EXTERNAL_NAME_PREFIX, REPORTED_MONTHS

logger = logging.getLogger(__name__)

# Longest leading decimal literal, parseFloat-style: "12.5%" -> "12.5", "1e3x" -> "1e3".
_DECIMAL_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_decimal(value: Optional[str]) -> Optional[float]:
    """
    Parse a string-encoded decimal. Total: never raises.

    Rules:
    - None stays None.
    - Leading whitespace is skipped and the longest leading decimal literal is
      read; trailing text is ignored.
    - No literal at all, or a value that does not fit a finite float, yields None.
    """
    if value is None:
        return None
    match = _DECIMAL_PREFIX.match(str(value).lstrip())
    if match is None:
        return None
    number = float(match.group(0))
    if not math.isfinite(number):
        return None
    return number


def month_rate(util: Optional[WorkforceUtilisation], month: str) -> Optional[float]:
    """Rate of the first entry whose month equals `month` exactly, parsed."""
    if util is None:
        return None
    entry: Optional[MonthlyUtilisation] = next(
        (m for m in util.last_three_months_individually if m.month == month),
        None,
    )
    if entry is None:
        return None
    return parse_decimal(entry.utilisation_rate)


def is_active(record: SourceRecord) -> bool:
    employees_active = record.employees is not None and record.employees.status == ACTIVE_STATUS
    externals_active = record.externals is not None and record.externals.status == ACTIVE_STATUS
    return employees_active or externals_active


def resolve_person(record: SourceRecord) -> Optional[ResolvedPerson]:
    """
    Pick the person block a record normalizes to.

    `employees` wins whenever it is present, even if it was `externals` whose
    status made the record active. Kept as-is pending a product decision.
    """
    if record.employees is not None:
        return ResolvedPerson(kind="employees", block=record.employees)
    if record.externals is not None:
        return ResolvedPerson(kind="externals", block=record.externals)
    return None


def person_name(person: PersonBlock) -> str:
    # A missing lastname leaves a trailing space ("Ana "); see DESIGN.md.
    name = f"{person.firstname or ''} {person.lastname or ''}"
    if person.job_type == EXTERNAL_JOB_TYPE:
        return EXTERNAL_NAME_PREFIX + name
    return name


def _metric(raw: Optional[str], index: int, field: str) -> Optional[float]:
    number = parse_decimal(raw)
    if number is None and raw is not None:
        logger.warning(
            "Unparseable %s %r in record %d",
            field,
            raw,
            index,
            extra={"record_index": index, "field": field},
        )
    return number


def normalize_record(record: SourceRecord, index: int = 0) -> Row:
    """Map one active record to a Row."""
    resolved = resolve_person(record)
    person = resolved.block if resolved is not None else PersonBlock()
    util = person.workforce_utilisation

    past_12 = y2d = net = None
    if util is not None:
        past_12 = _metric(util.utilisation_rate_last_twelve_months, index, "utilisationRateLastTwelveMonths")
        y2d = _metric(util.utilisation_rate_year_to_date, index, "utilisationRateYearToDate")
        net = _metric(util.monthly_cost_difference, index, "monthlyCostDifference")

    may, june, july = (month_rate(util, month) for month in REPORTED_MONTHS)

    return Row(
        person=person_name(person),
        past_12_months=past_12,
        y2d=y2d,
        may=may,
        june=june,
        july=july,
        net_earnings_prev_month=net if net is not None else 0.0,
    )


def normalize_records(records: Iterable[SourceRecord]) -> List[Row]:
    """
    Filter active records and map each to a Row, preserving input order.
    """
    rows: List[Row] = []
    total = 0
    for index, record in enumerate(records):
        total += 1
        if not is_active(record):
            logger.debug("Dropping inactive record %d", index, extra={"record_index": index})
            continue
        rows.append(normalize_record(record, index))

    logger.info(
        "Normalized %d of %d roster records",
        len(rows),
        total,
        extra={"rows": len(rows)},
    )
    return rows


def summarize(records: Sequence[SourceRecord], rows: Sequence[Row]) -> NormalizationSummary:
    return NormalizationSummary(
        records=len(records),
        rows=len(rows),
        dropped=len(records) - len(rows),
    )
