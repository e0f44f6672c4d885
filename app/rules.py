"""
Deterministic normalization and export rules.

This file exists to make the row schema and the fixed policies explicit.
"""

ACTIVE_STATUS = "active"
EXTERNAL_JOB_TYPE = "external"
EXTERNAL_NAME_PREFIX = "External "

# Months carried as individual columns, in column order.
REPORTED_MONTHS = ("May", "June", "July")

ROW_FIELDS = (
    "person",
    "past12Months",
    "y2d",
    "may",
    "june",
    "july",
    "netEarningsPrevMonth",
)

EXPORT_FILENAME = "workforce-dashboard.csv"
EXPORT_ENCODING = "utf-8"  # no BOM
EXPORT_DELIMITER = ","
EXPORT_LINE_TERMINATOR = "\r\n"
EXPORT_MEDIA_TYPE = "text/csv; charset=utf-8"
