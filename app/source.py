"""
Roster input: bytes or a file path -> validated SourceRecord list.

Rules:
- Detect encoding best-effort via charset-normalizer; a UTF-8 BOM is honoured.
- The document must be a JSON array of roster records.
- Any read / decode / schema failure raises RosterLoadError.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List

from charset_normalizer import from_bytes
from pydantic import TypeAdapter, ValidationError

from .errors import RosterLoadError
from .models import SourceRecord

logger = logging.getLogger(__name__)

_ROSTER_ADAPTER = TypeAdapter(List[SourceRecord])


def decode_roster_bytes(raw: bytes) -> str:
    if raw.startswith(b"\xef\xbb\xbf"):
        return raw.decode("utf-8-sig")

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass

    match = from_bytes(raw).best()
    if match is None:
        raise RosterLoadError("Roster is not decodable text")
    logger.info("Roster decoded as %s", match.encoding)
    return str(match)


def parse_roster(raw: bytes) -> List[SourceRecord]:
    text = decode_roster_bytes(raw)

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RosterLoadError(f"Roster is not valid JSON: {exc}") from exc

    if not isinstance(payload, list):
        raise RosterLoadError("Roster must be a JSON array of records")

    try:
        return _ROSTER_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise RosterLoadError(f"Roster does not match the record schema: {exc}") from exc


def load_roster(path: Path) -> List[SourceRecord]:
    """Read and validate a roster file."""
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise RosterLoadError(f"Cannot read roster file {path}: {exc}") from exc

    records = parse_roster(raw)
    logger.info("Loaded %d roster records from %s", len(records), path)
    return records
