"""
Tabular workout import parser.

Turns a delimited export (one line per performed set) into WorkoutDraft
objects: rows are grouped into sessions by (title, start_time), then into
exercises by name, and each exercise's sets are ordered by set_index.

Expected header columns (case-insensitive, any order, extras ignored):
title, start_time, end_time, description, exercise_title, exercise_notes,
set_index, set_type, weight (or weight_kg), reps, rpe

Import is best effort: bad numbers become null, bad dates fall back to a
generic parse and finally to "now", and over-long titles and notes are
truncated. Only input without a header and at least one data line is
rejected.
"""
import logging
import math
import re
from collections import OrderedDict
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from application.exceptions import MalformedInputError
from domain.models import DraftItem, DraftSet, ImportedSetRow, WorkoutDraft
from domain.models.workout import (
    SESSION_NOTES_MAX_LENGTH,
    SET_NOTES_MAX_LENGTH,
    TITLE_MAX_LENGTH,
)

logger = logging.getLogger(__name__)

DELIMITER = ","
QUOTE = '"'
DEFAULT_UNKNOWN_EXERCISE = "Unknown Exercise"

# Canonical field -> accepted header names, first match wins.
COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    "title": ("title",),
    "start_time": ("start_time",),
    "end_time": ("end_time",),
    "description": ("description",),
    "exercise_title": ("exercise_title",),
    "exercise_notes": ("exercise_notes",),
    "set_index": ("set_index",),
    "set_type": ("set_type",),
    "weight": ("weight", "weight_kg"),
    "reps": ("reps",),
    "rpe": ("rpe",),
}

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

# "28 Jan 2026, 14:12" / "3 january 2026 9:05"
START_TIME_PATTERN = re.compile(
    r"(\d{1,2})\s+([A-Za-z]+)\.?\s+(\d{4}),?\s+(\d{1,2}):(\d{2})"
)

GENERIC_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y",
    "%d %b %Y",
    "%b %d, %Y %H:%M",
    "%b %d, %Y",
)


# =============================================================================
# Tokenizing
# =============================================================================


def split_line(line: str, delimiter: str = DELIMITER) -> List[str]:
    """
    Split one line into fields.

    A field wrapped in quotes may contain the delimiter; a doubled quote
    inside a quoted field is a literal quote.
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        char = line[i]
        if char == QUOTE:
            if in_quotes and i + 1 < n and line[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current))
    return fields


class _RowView:
    """Header-indexed access to one tokenized line; every lookup is total."""

    def __init__(self, header_map: Dict[str, int], values: Sequence[str]):
        self._header_map = header_map
        self._values = values

    def get(self, field: str) -> str:
        for column in COLUMN_ALIASES.get(field, (field,)):
            idx = self._header_map.get(column)
            if idx is not None and idx < len(self._values):
                return self._values[idx].strip()
        return ""


def build_header_map(header_line: str) -> Dict[str, int]:
    """Map lowercased column names to their index."""
    header_map: Dict[str, int] = {}
    for idx, name in enumerate(split_line(header_line)):
        key = name.strip().lstrip("\ufeff").strip().lower()
        if key and key not in header_map:
            header_map[key] = idx
    return header_map


# =============================================================================
# Field parsing
# =============================================================================


def parse_optional_float(value: str) -> Optional[float]:
    """Parse a decimal field; empty, non-numeric or non-finite gives None."""
    if not value:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_optional_int(value: str) -> Optional[int]:
    """Parse an integer field, accepting integral decimals such as "8.0"."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        number = parse_optional_float(value)
        if number is None:
            return None
        return int(number)


def _to_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _parse_generic_datetime(value: str) -> Optional[datetime]:
    if not value:
        return None
    iso = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return _to_naive(datetime.fromisoformat(iso))
    except ValueError:
        pass
    for fmt in GENERIC_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    return _to_naive(parsed) if parsed is not None else None


def parse_timestamp(value: str) -> Optional[datetime]:
    """
    Parse an export timestamp, or return None.

    Tries the export's own "d MMM yyyy, HH:mm" shape first, then a handful
    of generic formats.
    """
    value = value.strip()
    match = START_TIME_PATTERN.search(value)
    if match:
        day, month_name, year, hour, minute = match.groups()
        month = MONTHS.get(month_name[:3].lower())
        if month is not None:
            try:
                return datetime(int(year), month, int(day), int(hour), int(minute))
            except ValueError:
                logger.debug(f"Out-of-range date parts in '{value}'")
    return _parse_generic_datetime(value)


def parse_start_time(
    value: str,
    *,
    now: Optional[Callable[[], datetime]] = None,
) -> datetime:
    """Parse a session start time. Never raises: falls back to now."""
    parsed = parse_timestamp(value)
    if parsed is not None:
        return parsed
    logger.warning(f"Unparseable start time '{value}', using current time")
    return (now or datetime.now)()


# =============================================================================
# Rows and grouping
# =============================================================================


def _row_from_view(view: _RowView) -> ImportedSetRow:
    weight = parse_optional_float(view.get("weight"))
    if weight is not None and weight < 0:
        weight = None

    rpe = parse_optional_float(view.get("rpe"))
    if rpe is not None and not 1 <= rpe <= 10:
        rpe = None

    return ImportedSetRow(
        title=view.get("title"),
        start_time=view.get("start_time"),
        end_time=view.get("end_time"),
        description=view.get("description"),
        exercise_title=view.get("exercise_title"),
        exercise_notes=view.get("exercise_notes"),
        set_index=parse_optional_int(view.get("set_index")) or 0,
        set_type=view.get("set_type") or "normal",
        weight=weight,
        reps=parse_optional_int(view.get("reps")),
        rpe=rpe,
    )


def read_rows(text: str) -> List[ImportedSetRow]:
    """
    Tokenize import text into rows.

    Raises:
        MalformedInputError: fewer than two non-blank lines.
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) < 2:
        raise MalformedInputError(
            "Import text is empty or missing a header or data rows",
            details={"non_blank_lines": len(lines)},
        )

    header_map = build_header_map(lines[0])
    return [_row_from_view(_RowView(header_map, split_line(line))) for line in lines[1:]]


def _clip(value: str, limit: int, field: str) -> Optional[str]:
    """Blank becomes None; text longer than ``limit`` is cut to ``limit``."""
    if not value:
        return None
    if len(value) > limit:
        logger.warning(f"Truncating {field} from {len(value)} to {limit} characters")
        return value[:limit]
    return value


def _draft_set(position: int, row: ImportedSetRow) -> DraftSet:
    reps = row.reps if row.reps is not None and row.reps >= 1 else 1
    return DraftSet(
        set_number=position,
        weight=row.weight,
        reps=reps,
        rpe=row.rpe,
        set_type=row.set_type,
        notes=_clip(row.exercise_notes, SET_NOTES_MAX_LENGTH, "exercise notes"),
    )


def group_rows(
    rows: Sequence[ImportedSetRow],
    *,
    now: Optional[Callable[[], datetime]] = None,
    unknown_exercise_name: str = DEFAULT_UNKNOWN_EXERCISE,
) -> List[WorkoutDraft]:
    """Group rows into sessions, exercises and 1-based sets."""
    sessions: "OrderedDict[Tuple[str, str], List[ImportedSetRow]]" = OrderedDict()
    for row in rows:
        sessions.setdefault((row.title, row.start_time), []).append(row)

    drafts: List[WorkoutDraft] = []
    for (title, start_time), session_rows in sessions.items():
        first = session_rows[0]

        by_exercise: "OrderedDict[str, List[ImportedSetRow]]" = OrderedDict()
        for row in session_rows:
            name = row.exercise_title or unknown_exercise_name
            by_exercise.setdefault(name, []).append(row)

        items = []
        for name, exercise_rows in by_exercise.items():
            ordered = sorted(exercise_rows, key=lambda r: r.set_index)
            items.append(DraftItem(
                exercise_name=name,
                sets=[_draft_set(pos, row) for pos, row in enumerate(ordered, start=1)],
            ))

        drafts.append(WorkoutDraft(
            date=parse_start_time(start_time, now=now),
            ended_at=parse_timestamp(first.end_time) if first.end_time else None,
            title=_clip(title, TITLE_MAX_LENGTH, "title"),
            notes=_clip(first.description, SESSION_NOTES_MAX_LENGTH, "description"),
            raw_start_time=start_time,
            items=items,
        ))

    return drafts


def parse_workout_csv(
    text: str,
    *,
    now: Optional[Callable[[], datetime]] = None,
    unknown_exercise_name: str = DEFAULT_UNKNOWN_EXERCISE,
) -> List[WorkoutDraft]:
    """
    Parse a workout export into session drafts.

    Sessions come out in first-seen order (not necessarily chronological).
    Items keep first-seen order; sets follow set_index order.

    Args:
        text: Raw export text
        now: Clock used when a start time cannot be parsed
        unknown_exercise_name: Name for rows with a blank exercise title

    Returns:
        List of WorkoutDraft

    Raises:
        MalformedInputError: fewer than two non-blank lines
    """
    rows = read_rows(text)
    drafts = group_rows(rows, now=now, unknown_exercise_name=unknown_exercise_name)
    logger.info(
        f"Parsed {len(rows)} rows into {len(drafts)} workout drafts"
    )
    return drafts
