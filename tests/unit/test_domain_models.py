"""
Unit tests for domain models.

These tests verify:
- Model validation
- Tagged exercise references
- Model serialization/deserialization
- Computed properties
"""

import pytest
from datetime import date, datetime

from pydantic import TypeAdapter, ValidationError


@pytest.mark.unit
class TestExerciseRef:
    """Tests for the catalog/custom exercise reference union."""

    def test_discriminated_by_kind(self):
        """The kind tag picks the variant."""
        from domain.models import CustomExercise, ExerciseRef

        ref = TypeAdapter(ExerciseRef).validate_python(
            {"kind": "custom", "id": "c-1", "owner_id": "u-1", "name": "Sled Push"}
        )
        assert isinstance(ref, CustomExercise)

    def test_unknown_kind_rejected(self):
        from domain.models import ExerciseRef

        with pytest.raises(ValidationError):
            TypeAdapter(ExerciseRef).validate_python({"kind": "both", "id": "x", "name": "X"})

    def test_custom_requires_owner(self):
        from domain.models import ExerciseRef

        with pytest.raises(ValidationError):
            TypeAdapter(ExerciseRef).validate_python({"kind": "custom", "id": "c", "name": "X"})

    def test_refs_are_frozen(self):
        from domain.models import CatalogExercise

        ref = CatalogExercise(id="bench", name="Bench")
        with pytest.raises(ValidationError):
            ref.name = "Other"

    def test_ref_key(self):
        from domain.models import CatalogExercise, CustomExercise, ref_key

        assert ref_key(CatalogExercise(id="x", name="X")) == ("catalog", "x")
        assert ref_key(CustomExercise(id="x", owner_id="u", name="X")) == ("custom", "x")


@pytest.mark.unit
class TestPlannedWorkout:
    """Tests for write-side validation."""

    def _item(self, numbers):
        from domain.models import CatalogExercise, PlannedItem, PlannedSet

        return PlannedItem(
            exercise=CatalogExercise(id="bench", name="Bench"),
            sets=[PlannedSet(set_number=n, weight=100, reps=5) for n in numbers],
        )

    def test_contiguous_numbering_required(self):
        with pytest.raises(ValidationError):
            self._item([1, 3])

    def test_numbering_starts_at_one(self):
        with pytest.raises(ValidationError):
            self._item([0, 1])

    def test_valid_item(self):
        assert len(self._item([1, 2, 3]).sets) == 3

    def test_negative_weight_rejected(self):
        from domain.models import PlannedSet

        with pytest.raises(ValidationError):
            PlannedSet(set_number=1, weight=-1, reps=5)

    def test_zero_reps_rejected(self):
        from domain.models import PlannedSet

        with pytest.raises(ValidationError):
            PlannedSet(set_number=1, weight=10, reps=0)

    def test_rpe_range(self):
        from domain.models import PlannedSet

        with pytest.raises(ValidationError):
            PlannedSet(set_number=1, reps=5, rpe=11)

    def test_title_length(self):
        from domain.models import PlannedWorkout

        with pytest.raises(ValidationError):
            PlannedWorkout(owner_id="u", date=datetime(2026, 1, 1), title="x" * 81,
                           items=[self._item([1])])

    def test_requires_items(self):
        from domain.models import PlannedWorkout

        with pytest.raises(ValidationError):
            PlannedWorkout(owner_id="u", date=datetime(2026, 1, 1), items=[])


@pytest.mark.unit
class TestWorkoutSession:
    """Tests for the persisted aggregate."""

    def _session(self):
        from domain.models import CatalogExercise, WorkoutItem, WorkoutSession, WorkoutSet

        return WorkoutSession(
            id="s1",
            owner_id="u",
            date="2026-01-28T14:12:00",
            items=[
                WorkoutItem(
                    id="i1",
                    exercise=CatalogExercise(id="bench", name="Bench"),
                    sets=[
                        WorkoutSet(id="a", set_number=1, weight=60, reps=10),
                        WorkoutSet(id="b", set_number=2, weight=80, reps=5),
                    ],
                ),
                WorkoutItem(
                    id="i2",
                    order_index=1,
                    exercise=CatalogExercise(id="row", name="Row"),
                    sets=[WorkoutSet(id="c", set_number=1, weight=70, reps=8)],
                ),
            ],
        )

    def test_total_sets(self):
        assert self._session().total_sets == 3

    def test_iter_sets_order(self):
        assert [s.id for _, s in self._session().iter_sets()] == ["a", "b", "c"]

    def test_json_round_trip_keeps_variant(self):
        from domain.models import CatalogExercise, WorkoutSession

        session = self._session()
        restored = WorkoutSession.model_validate_json(session.model_dump_json())
        assert restored == session
        assert isinstance(restored.items[0].exercise, CatalogExercise)


@pytest.mark.unit
class TestPersonalBestRecord:
    def test_reps_record_requires_weight(self):
        from domain.models import CatalogExercise, PersonalBestRecord, RecordKind

        with pytest.raises(ValidationError):
            PersonalBestRecord(
                id="r", owner_id="u", exercise=CatalogExercise(id="b", name="B"),
                kind=RecordKind.REPS_AT_WEIGHT, value=5, set_id="s",
                recorded_at=datetime(2026, 1, 1),
            )

    def test_kind_values(self):
        from domain.models import RecordKind

        assert RecordKind("reps-at-weight") is RecordKind.REPS_AT_WEIGHT

    def test_lineage_key(self):
        from domain.models import CatalogExercise, CustomExercise, RecordKind, lineage_key

        bench = CatalogExercise(id="bench", name="Bench")
        sled = CustomExercise(id="c-1", owner_id="u", name="Sled Push")

        assert lineage_key(bench, RecordKind.WEIGHT) == "catalog:bench:weight"
        assert lineage_key(bench, RecordKind.WEIGHT, 10000) == "catalog:bench:weight"
        assert lineage_key(sled, RecordKind.REPS_AT_WEIGHT, 4000) == "custom:c-1:reps-at-weight:4000"

    def test_record_lineage_uses_bucket(self):
        from domain.models import CatalogExercise, PersonalBestRecord, RecordKind

        record = PersonalBestRecord(
            id="r", owner_id="u", exercise=CatalogExercise(id="b", name="B"),
            kind=RecordKind.REPS_AT_WEIGHT, weight=100.0, bucket=10000, value=5, set_id="s",
            recorded_at=datetime(2026, 1, 1),
        )
        assert record.lineage == "catalog:b:reps-at-weight:10000"


@pytest.mark.unit
class TestGoal:
    def test_integer_metric_needs_target_int(self):
        from domain.models import Goal

        with pytest.raises(ValidationError):
            Goal(id="g", owner_id="u", metric="STEPS", period="DAILY", target_dec=1.5)

    def test_decimal_metric_needs_target_dec(self):
        from domain.models import Goal

        with pytest.raises(ValidationError):
            Goal(id="g", owner_id="u", metric="DISTANCE", period="WEEKLY", target_int=5)

    def test_target(self):
        from domain.models import Goal

        assert Goal(id="g", owner_id="u", metric="CALORIES", period="DAILY", target_dec=450.5).target == 450.5
        assert Goal(id="g", owner_id="u", metric="WORKOUTS", period="WEEKLY", target_int=3).target == 3.0


@pytest.mark.unit
class TestActivity:
    def test_aggregate_addition(self):
        from domain.models import ActivityAggregate

        total = ActivityAggregate(steps=10, distance_km=1.0) + ActivityAggregate(steps=5, calories=20)
        assert total == ActivityAggregate(steps=15, distance_km=1.0, calories=20)

    def test_negative_sample_rejected(self):
        from domain.models import ActivitySample

        with pytest.raises(ValidationError):
            ActivitySample(owner_id="u", date=date(2026, 1, 1), steps=-1)

    def test_period_contains(self):
        from domain.models import PeriodBounds

        bounds = PeriodBounds(start=date(2026, 1, 1), end=date(2026, 1, 7))
        assert bounds.contains(date(2026, 1, 7))
        assert not bounds.contains(date(2026, 1, 8))
