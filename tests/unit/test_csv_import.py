"""
Unit tests for the workout export parser.

Tests cover:
- Line tokenizing with quoted fields
- Numeric and timestamp field parsing
- Grouping rows into sessions, exercises and numbered sets
- Malformed input rejection
- Truncation of over-long text fields
"""
from datetime import datetime

import pytest

from application.exceptions import ErrorKind, MalformedInputError
from backend.core.csv_import import (
    build_header_map,
    parse_optional_float,
    parse_optional_int,
    parse_start_time,
    parse_timestamp,
    parse_workout_csv,
    read_rows,
    split_line,
)

pytestmark = pytest.mark.unit


HEADER = (
    "title,start_time,end_time,description,exercise_title,superset_id,"
    "exercise_notes,set_index,set_type,weight_kg,reps,distance_km,duration_seconds,rpe"
)

FIXED_NOW = datetime(2026, 2, 1, 12, 0)


def _now():
    return FIXED_NOW


def _csv(*rows):
    return "\n".join((HEADER,) + rows)


# =============================================================================
# Tokenizing
# =============================================================================


class TestSplitLine:
    def test_plain_fields(self):
        assert split_line("a,b,c") == ["a", "b", "c"]

    def test_quoted_delimiter(self):
        assert split_line('"Push, Day",x') == ["Push, Day", "x"]

    def test_doubled_quote_is_literal(self):
        assert split_line('"He said ""go""",1') == ['He said "go"', "1"]

    def test_empty_fields_kept(self):
        assert split_line("a,,c,") == ["a", "", "c", ""]

    def test_build_header_map_lowercases_and_strips_bom(self):
        header_map = build_header_map("\ufeffTitle, Start_Time ,REPS")
        assert header_map == {"title": 0, "start_time": 1, "reps": 2}


# =============================================================================
# Field parsing
# =============================================================================


class TestFieldParsing:
    def test_float_values(self):
        assert parse_optional_float("82.5") == 82.5
        assert parse_optional_float("") is None
        assert parse_optional_float("heavy") is None

    def test_non_finite_float_is_none(self):
        assert parse_optional_float("nan") is None
        assert parse_optional_float("inf") is None

    def test_int_values(self):
        assert parse_optional_int("8") == 8
        assert parse_optional_int("8.0") == 8
        assert parse_optional_int("") is None
        assert parse_optional_int("x") is None

    def test_export_timestamp_shape(self):
        assert parse_timestamp("28 Jan 2026, 14:12") == datetime(2026, 1, 28, 14, 12)

    def test_full_month_name(self):
        assert parse_timestamp("3 January 2026 9:05") == datetime(2026, 1, 3, 9, 5)

    def test_iso_timestamp(self):
        assert parse_timestamp("2026-01-28T14:12:00") == datetime(2026, 1, 28, 14, 12)

    def test_aware_timestamp_becomes_naive_utc(self):
        assert parse_timestamp("2026-01-28T14:12:00Z") == datetime(2026, 1, 28, 14, 12)
        assert parse_timestamp("2026-01-28T16:12:00+02:00") == datetime(2026, 1, 28, 14, 12)

    def test_unparseable_timestamp_is_none(self):
        assert parse_timestamp("sometime last week") is None
        assert parse_timestamp("") is None

    def test_start_time_falls_back_to_now(self):
        assert parse_start_time("not a date", now=_now) == FIXED_NOW


# =============================================================================
# Rows
# =============================================================================


class TestReadRows:
    def test_header_only_is_malformed(self):
        with pytest.raises(MalformedInputError) as exc_info:
            read_rows(HEADER)
        assert exc_info.value.kind == ErrorKind.MALFORMED_INPUT
        assert exc_info.value.details == {"non_blank_lines": 1}

    def test_empty_text_is_malformed(self):
        with pytest.raises(MalformedInputError):
            parse_workout_csv("   \n\n")

    def test_blank_lines_ignored(self):
        rows = read_rows(_csv("", 'Push,"28 Jan 2026, 14:12",,,Bench Press,,,0,normal,100,5,,,', ""))
        assert len(rows) == 1

    def test_weight_column_alias(self):
        text = "title,start_time,exercise_title,weight,reps\nA,2026-01-01,Squat,120,3"
        rows = read_rows(text)
        assert rows[0].weight == 120.0
        assert rows[0].reps == 3

    def test_missing_columns_default(self):
        rows = read_rows("exercise_title\nDeadlift")
        row = rows[0]
        assert row.exercise_title == "Deadlift"
        assert row.set_index == 0
        assert row.set_type == "normal"
        assert row.weight is None
        assert row.reps is None

    def test_bad_values_degrade_to_none(self):
        rows = read_rows(_csv('Push,"28 Jan 2026, 14:12",,,Bench Press,,,0,normal,-5,abc,,,12'))
        row = rows[0]
        assert row.weight is None
        assert row.reps is None
        assert row.rpe is None

    def test_short_line_is_padded(self):
        rows = read_rows(_csv("Push,2026-01-01"))
        assert rows[0].title == "Push"
        assert rows[0].exercise_title == ""


# =============================================================================
# Grouping
# =============================================================================


class TestParseWorkoutCsv:
    def test_groups_sessions_exercises_and_sets(self):
        text = _csv(
            'Push,"28 Jan 2026, 14:12","28 Jan 2026, 15:00",Felt good,Bench Press,,,1,normal,100,5,,,8',
            'Push,"28 Jan 2026, 14:12","28 Jan 2026, 15:00",Felt good,Bench Press,,,0,normal,80,8,,,',
            'Push,"28 Jan 2026, 14:12","28 Jan 2026, 15:00",Felt good,Overhead Press,,,0,normal,50,6,,,',
            'Legs,"30 Jan 2026, 09:00",,,Squat,,,0,normal,120,5,,,',
        )
        drafts = parse_workout_csv(text, now=_now)

        assert len(drafts) == 2
        push, legs = drafts
        assert push.title == "Push"
        assert push.date == datetime(2026, 1, 28, 14, 12)
        assert push.ended_at == datetime(2026, 1, 28, 15, 0)
        assert push.notes == "Felt good"
        assert [item.exercise_name for item in push.items] == ["Bench Press", "Overhead Press"]

        bench = push.items[0]
        assert [s.set_number for s in bench.sets] == [1, 2]
        assert [s.weight for s in bench.sets] == [80.0, 100.0]
        assert bench.sets[1].rpe == 8.0

        assert legs.ended_at is None
        assert legs.total_sets == 1

    def test_same_title_different_start_is_two_sessions(self):
        text = _csv(
            "Push,2026-01-01 10:00,,,Bench Press,,,0,normal,100,5,,,",
            "Push,2026-01-03 10:00,,,Bench Press,,,0,normal,100,5,,,",
        )
        assert len(parse_workout_csv(text, now=_now)) == 2

    def test_sessions_keep_first_seen_order(self):
        text = _csv(
            "Later,2026-03-01 10:00,,,Squat,,,0,normal,100,5,,,",
            "Earlier,2026-01-01 10:00,,,Squat,,,0,normal,100,5,,,",
        )
        assert [d.title for d in parse_workout_csv(text, now=_now)] == ["Later", "Earlier"]

    def test_blank_exercise_title_uses_unknown_name(self):
        text = _csv("Push,2026-01-01 10:00,,,,,,0,normal,20,10,,,")
        drafts = parse_workout_csv(text, now=_now, unknown_exercise_name="Mystery Lift")
        assert drafts[0].items[0].exercise_name == "Mystery Lift"

    def test_missing_reps_become_one(self):
        text = _csv("Push,2026-01-01 10:00,,,Plank,,,0,normal,,,,60,")
        draft_set = parse_workout_csv(text, now=_now)[0].items[0].sets[0]
        assert draft_set.reps == 1
        assert draft_set.weight is None

    def test_zero_reps_become_one(self):
        text = _csv("Push,2026-01-01 10:00,,,Bench Press,,,0,normal,100,0,,,")
        assert parse_workout_csv(text, now=_now)[0].items[0].sets[0].reps == 1

    def test_unparseable_start_time_uses_now(self):
        text = _csv("Push,yesterday-ish,,,Bench Press,,,0,normal,100,5,,,")
        draft = parse_workout_csv(text, now=_now)[0]
        assert draft.date == FIXED_NOW
        assert draft.raw_start_time == "yesterday-ish"

    def test_blank_title_is_none(self):
        text = _csv(",2026-01-01 10:00,,,Bench Press,,,0,normal,100,5,,,")
        assert parse_workout_csv(text, now=_now)[0].title is None

    def test_set_type_and_notes_carried(self):
        text = _csv('Push,2026-01-01 10:00,,,Bench Press,,"Pause, 2s",0,warmup,40,10,,,')
        draft_set = parse_workout_csv(text, now=_now)[0].items[0].sets[0]
        assert draft_set.set_type == "warmup"
        assert draft_set.notes == "Pause, 2s"

    def test_long_set_notes_are_truncated(self):
        notes = "n" * 250
        text = _csv(f"Push,2026-01-01 10:00,,,Bench Press,,{notes},0,normal,100,5,,,")
        draft_set = parse_workout_csv(text, now=_now)[0].items[0].sets[0]
        assert draft_set.notes == "n" * 200

    def test_long_title_and_description_are_truncated(self):
        title = "T" * 90
        description = "d" * 600
        text = _csv(f"{title},2026-01-01 10:00,,{description},Bench Press,,,0,normal,100,5,,,")
        draft = parse_workout_csv(text, now=_now)[0]
        assert draft.title == "T" * 80
        assert draft.notes == "d" * 500
        assert draft.total_sets == 1

    def test_text_at_the_limit_is_kept(self):
        notes = "n" * 200
        text = _csv(f"Push,2026-01-01 10:00,,,Bench Press,,{notes},0,normal,100,5,,,")
        assert parse_workout_csv(text, now=_now)[0].items[0].sets[0].notes == notes

    def test_unused_export_columns_are_ignored(self):
        text = _csv("Push,2026-01-01 10:00,,,Run,7,,0,normal,,,5.2,1800,")
        row = read_rows(text)[0]
        assert not hasattr(row, "superset_id")
        assert not hasattr(row, "distance_km")
        assert parse_workout_csv(text, now=_now)[0].items[0].sets[0].reps == 1
