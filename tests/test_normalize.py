import pytest
from pydantic import ValidationError

from app.models import PersonBlock, SourceRecord, WorkforceUtilisation
from app.normalize import (
    month_rate,
    normalize_records,
    parse_decimal,
    person_name,
    resolve_person,
    summarize,
)


def _record(**blocks):
    return SourceRecord.model_validate(blocks)


def _person(status="active", job_type="internal", firstname="Ana", lastname=None, util=None):
    block = {"status": status, "jobType": job_type, "firstname": firstname}
    if lastname is not None:
        block["lastname"] = lastname
    if util is not None:
        block["workforceUtilisation"] = util
    return block


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("12.5", 12.5),
        ("0.42", 0.42),
        ("-830", -830.0),
        ("  7", 7.0),
        ("12.5%", 12.5),
        (".5", 0.5),
        ("1e3", 1000.0),
    ],
)
def test_parse_decimal_reads_leading_literal(raw, expected):
    assert parse_decimal(raw) == expected


@pytest.mark.parametrize("raw", [None, "abc", "", ".", "-", "1e999", "Infinity", "\u0663", "\uff11\uff12"])
def test_parse_decimal_degrades_to_none(raw):
    assert parse_decimal(raw) is None


def test_month_lookup_is_first_match():
    util = WorkforceUtilisation.model_validate(
        {
            "lastThreeMonthsIndividually": [
                {"month": "May", "utilisationRate": "0.5"},
                {"month": "May", "utilisationRate": "0.9"},
            ]
        }
    )
    assert month_rate(util, "May") == 0.5


def test_month_lookup_is_exact_and_case_sensitive():
    util = WorkforceUtilisation.model_validate(
        {"lastThreeMonthsIndividually": [{"month": "june", "utilisationRate": "0.4"}]}
    )
    assert month_rate(util, "June") is None
    assert month_rate(None, "June") is None


def test_name_prefix_follows_job_type():
    external = PersonBlock.model_validate(_person(job_type="external", firstname="Jo", lastname="Lin"))
    internal = PersonBlock.model_validate(_person(firstname="Ana"))

    assert person_name(external) == "External Jo Lin"
    assert person_name(internal) == "Ana "


def test_external_prefix_applies_inside_employees_block():
    rows = normalize_records([_record(employees=_person(job_type="external", firstname="Jo", lastname="Lin"))])
    assert rows[0].person == "External Jo Lin"


def test_selection_keeps_active_and_drops_the_rest():
    records = [
        _record(employees=_person(firstname="A", lastname="One")),
        _record(employees=_person(status="inactive", firstname="B")),
        _record(externals=_person(job_type="external", firstname="C", lastname="Three")),
        _record(),
        _record(externals=_person(status="pending", firstname="D")),
    ]
    rows = normalize_records(records)
    assert [r.person for r in rows] == ["A One", "External C Three"]


def test_employees_block_wins_even_when_only_externals_is_active():
    record = _record(
        employees=_person(status="inactive", firstname="Emp", lastname="Loyee"),
        externals=_person(job_type="external", firstname="Ext", lastname="Ernal"),
    )
    resolved = resolve_person(record)
    assert resolved.kind == "employees"

    rows = normalize_records([record])
    assert len(rows) == 1
    assert rows[0].person == "Emp Loyee"


def test_record_with_both_blocks_active_yields_one_employees_row():
    record = _record(
        employees=_person(firstname="Emp", lastname="Loyee", util={"utilisationRateYearToDate": "0.4"}),
        externals=_person(job_type="external", firstname="Ext", lastname="Ernal", util={"utilisationRateYearToDate": "0.9"}),
    )
    rows = normalize_records([record])

    assert len(rows) == 1
    assert rows[0].person == "Emp Loyee"
    assert rows[0].y2d == 0.4


def test_resolve_person_falls_back_to_externals():
    record = _record(externals=_person(job_type="external", firstname="Jo"))
    assert resolve_person(record).kind == "externals"
    assert resolve_person(_record()) is None


def test_end_to_end_scenario():
    util = {
        "utilisationRateLastTwelveMonths": "0.8",
        "lastThreeMonthsIndividually": [{"month": "May", "utilisationRate": "0.33"}],
    }
    rows = normalize_records([_record(employees=_person(firstname="Ana", util=util))])

    assert len(rows) == 1
    row = rows[0]
    assert row.person == "Ana "
    assert row.past_12_months == 0.8
    assert row.y2d is None
    assert row.may == 0.33
    assert row.june is None
    assert row.july is None
    assert row.net_earnings_prev_month == 0


def test_bad_metrics_degrade_per_field(caplog):
    util = {
        "utilisationRateLastTwelveMonths": "n/a",
        "utilisationRateYearToDate": "0.6",
        "monthlyCostDifference": "oops",
        "lastThreeMonthsIndividually": [{"month": "July", "utilisationRate": "??"}],
    }
    with caplog.at_level("WARNING", logger="app.normalize"):
        rows = normalize_records([_record(employees=_person(util=util))])

    row = rows[0]
    assert row.past_12_months is None
    assert row.y2d == 0.6
    assert row.july is None
    assert row.net_earnings_prev_month == 0
    assert any("monthlyCostDifference" in m for m in caplog.messages)


def test_numeric_json_scalars_are_accepted():
    util = {"utilisationRateLastTwelveMonths": 0.7, "monthlyCostDifference": -12}
    row = normalize_records([_record(employees=_person(util=util))])[0]
    assert row.past_12_months == 0.7
    assert row.net_earnings_prev_month == -12


def test_order_is_preserved_and_rows_are_frozen():
    records = [_record(employees=_person(firstname=name, lastname="X")) for name in "CAB"]
    rows = normalize_records(records)
    assert [r.person for r in rows] == ["C X", "A X", "B X"]

    with pytest.raises(ValidationError):
        rows[0].person = "changed"


def test_summarize_counts_dropped_records():
    records = [
        _record(employees=_person()),
        _record(employees=_person(status="inactive")),
        _record(),
    ]
    rows = normalize_records(records)
    summary = summarize(records, rows)
    assert (summary.records, summary.rows, summary.dropped) == (3, 1, 2)
