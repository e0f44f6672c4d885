from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _scalar_to_text(value: Any) -> Any:
    # Metrics arrive as text; plain JSON numbers are accepted in their string form.
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return value


# -------------------------------
# Source roster
# -------------------------------
class MonthlyUtilisation(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    month: Optional[str] = None
    utilisation_rate: Optional[str] = Field(default=None, alias="utilisationRate")

    @field_validator("utilisation_rate", mode="before")
    @classmethod
    def rate_as_text(cls, value: Any) -> Any:
        return _scalar_to_text(value)


class WorkforceUtilisation(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    utilisation_rate_last_twelve_months: Optional[str] = Field(
        default=None, alias="utilisationRateLastTwelveMonths"
    )
    utilisation_rate_year_to_date: Optional[str] = Field(
        default=None, alias="utilisationRateYearToDate"
    )
    monthly_cost_difference: Optional[str] = Field(default=None, alias="monthlyCostDifference")
    last_three_months_individually: List[MonthlyUtilisation] = Field(
        default_factory=list, alias="lastThreeMonthsIndividually"
    )

    @field_validator(
        "utilisation_rate_last_twelve_months",
        "utilisation_rate_year_to_date",
        "monthly_cost_difference",
        mode="before",
    )
    @classmethod
    def metrics_as_text(cls, value: Any) -> Any:
        return _scalar_to_text(value)

    @field_validator("last_three_months_individually", mode="before")
    @classmethod
    def months_none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class PersonBlock(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    status: Optional[str] = None
    job_type: Optional[str] = Field(default=None, alias="jobType")
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    workforce_utilisation: Optional[WorkforceUtilisation] = Field(
        default=None, alias="workforceUtilisation"
    )


class SourceRecord(BaseModel):
    """One roster entry: an `employees` block, an `externals` block, or both."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    employees: Optional[PersonBlock] = None
    externals: Optional[PersonBlock] = None


@dataclass(frozen=True)
class ResolvedPerson:
    """The person block a record normalizes to, tagged with the key that held it."""

    kind: Literal["employees", "externals"]
    block: PersonBlock


# -------------------------------
# Normalized table
# -------------------------------
class Row(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    person: str
    past_12_months: Optional[float] = Field(default=None, alias="past12Months")
    y2d: Optional[float] = None
    may: Optional[float] = None
    june: Optional[float] = None
    july: Optional[float] = None
    net_earnings_prev_month: float = Field(default=0.0, alias="netEarningsPrevMonth")


class DisplayRow(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    person: str
    past_12_months: str = Field(alias="past12Months")
    y2d: str
    may: str
    june: str
    july: str
    net_earnings_prev_month: str = Field(alias="netEarningsPrevMonth")
    net_earnings_positive: bool = Field(alias="netEarningsPositive")


class NormalizationSummary(BaseModel):
    records: int = 0
    rows: int = 0
    dropped: int = 0


class RowsResponse(BaseModel):
    rows: List[Row] = Field(default_factory=list)
    count: int = 0


class DisplayRowsResponse(BaseModel):
    rows: List[DisplayRow] = Field(default_factory=list)
    count: int = 0


class RosterResponse(BaseModel):
    rows: List[Row] = Field(default_factory=list)
    summary: NormalizationSummary


class HealthResponse(BaseModel):
    ok: bool = True
