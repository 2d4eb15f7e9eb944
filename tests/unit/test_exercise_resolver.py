"""
Unit tests for ExerciseResolver.

Tests cover:
- Tier order: catalog exact, catalog substring, custom existing, custom created
- Deterministic substring choice
- Per-owner custom exercises, created once across resolver instances
- Cross-matching references by normalized name
"""
import time
import uuid
from concurrent.futures import ThreadPoolExecutor

import pytest

from backend.core.exercise_resolver import (
    CUSTOM_EXERCISE_LOCKS,
    ExerciseResolver,
    ResolveMethod,
    same_exercise,
)
from domain.models import CatalogExercise, CustomExercise
from tests.fakes import FakeCustomExerciseRepository

pytestmark = pytest.mark.unit


class UnguardedCustomExerciseRepository(FakeCustomExerciseRepository):
    """Creates a new row on every call and answers lookups slowly."""

    def find_by_name(self, owner_id, name):
        time.sleep(0.01)
        return super().find_by_name(owner_id, name)

    def create(self, owner_id, name, body_part=None):
        exercise = CustomExercise(
            id=str(uuid.uuid4()), owner_id=owner_id, name=name, body_part=body_part,
        )
        self._exercises[exercise.id] = exercise
        self.created.append(exercise)
        return exercise


class TestResolveTiers:
    def test_exact_match_is_case_insensitive(self, resolver):
        resolution = resolver.resolve_with_details("user-1", "barbell BENCH press")
        assert resolution.method == ResolveMethod.CATALOG_EXACT
        assert resolution.exercise.id == "barbell-bench-press"

    def test_exact_match_wins_over_substring(self, resolver):
        resolution = resolver.resolve_with_details("user-1", "Overhead Press")
        assert resolution.method == ResolveMethod.CATALOG_EXACT

    def test_substring_prefers_shortest_name(self, resolver):
        resolution = resolver.resolve_with_details("user-1", "Deadlift")
        assert resolution.method == ResolveMethod.CATALOG_SUBSTRING
        assert resolution.exercise.name == "Romanian Deadlift"

    def test_substring_ties_break_alphabetically(self, catalog_repo, custom_repo):
        catalog_repo.reset()
        catalog_repo.seed([
            CatalogExercise(id="b", name="Cable Row"),
            CatalogExercise(id="a", name="Barbl Row"),
        ])
        resolver = ExerciseResolver(catalog_repo, custom_repo)
        assert resolver.resolve("user-1", "row").id == "a"

    def test_substring_is_deterministic(self, resolver):
        first = resolver.resolve("user-1", "Bench Press")
        second = resolver.resolve("user-1", "Bench Press")
        assert first.id == second.id == "barbell-bench-press"

    def test_unknown_name_creates_custom(self, resolver, custom_repo):
        resolution = resolver.resolve_with_details("user-1", "Zercher Squat")
        assert resolution.method == ResolveMethod.CUSTOM_CREATED
        assert resolution.created
        assert isinstance(resolution.exercise, CustomExercise)
        assert resolution.exercise.owner_id == "user-1"
        assert resolution.exercise.name == "Zercher Squat"
        assert len(custom_repo.created) == 1

    def test_existing_custom_is_reused(self, resolver, custom_repo):
        created = resolver.resolve("user-1", "Zercher Squat")
        resolution = resolver.resolve_with_details("user-1", "zercher squat")
        assert resolution.method == ResolveMethod.CUSTOM_EXISTING
        assert resolution.exercise.id == created.id
        assert len(custom_repo.created) == 1

    def test_custom_exercises_are_per_owner(self, resolver, custom_repo):
        mine = resolver.resolve("user-1", "Zercher Squat")
        theirs = resolver.resolve("user-2", "Zercher Squat")
        assert mine.id != theirs.id
        assert theirs.owner_id == "user-2"

    def test_blank_name_uses_unknown_exercise(self, catalog_repo, custom_repo):
        resolver = ExerciseResolver(catalog_repo, custom_repo, unknown_exercise_name="Unlabelled")
        exercise = resolver.resolve("user-1", "   ")
        assert exercise.name == "Unlabelled"

    def test_name_is_trimmed(self, resolver):
        assert resolver.resolve("user-1", "  Pull Up  ").id == "pull-up"

    def test_concurrent_creation_makes_one_custom(self, resolver, custom_repo):
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: resolver.resolve("user-1", "Sled Push"), range(16)))
        assert len({r.id for r in results}) == 1
        assert len(custom_repo.created) == 1

    def test_separate_resolvers_make_one_custom(self, catalog_repo):
        custom_repo = UnguardedCustomExerciseRepository()
        resolvers = [ExerciseResolver(catalog_repo, custom_repo) for _ in range(8)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda r: r.resolve("user-1", "Sled Push"), resolvers))
        assert len({r.id for r in results}) == 1
        assert len(custom_repo.created) == 1

    def test_creation_lock_is_released(self, resolver):
        resolver.resolve("user-1", "Sled Push")
        assert len(CUSTOM_EXERCISE_LOCKS) == 0


class TestCrossMatching:
    def test_equivalent_refs_include_custom_spelling(self, resolver, catalog_repo, custom_repo):
        custom = CustomExercise(id="c-1", owner_id="user-1", name="Bench Press (Barbell)")
        custom_repo.seed([custom])
        bench = catalog_repo.get_by_id("barbell-bench-press")

        refs = resolver.equivalent_refs(bench, "user-1")

        assert refs[0] == bench
        assert custom in refs
        assert len(refs) == 2

    def test_equivalent_refs_from_custom_side(self, resolver, catalog_repo, custom_repo):
        custom = CustomExercise(id="c-1", owner_id="user-1", name="Bench Press (Barbell)")
        custom_repo.seed([custom])

        refs = resolver.equivalent_refs(custom, "user-1")

        assert refs[0] == custom
        assert [r.id for r in refs[1:]] == ["barbell-bench-press"]

    def test_other_owners_customs_are_ignored(self, resolver, catalog_repo, custom_repo):
        custom_repo.seed([CustomExercise(id="c-9", owner_id="user-2", name="Bench Press Barbell")])
        bench = catalog_repo.get_by_id("barbell-bench-press")
        assert resolver.equivalent_refs(bench, "user-1") == [bench]

    def test_same_exercise(self):
        catalog = CatalogExercise(id="bench", name="Barbell Bench Press")
        custom = CustomExercise(id="c-1", owner_id="u", name="bench press (barbell)")
        other = CatalogExercise(id="db", name="Dumbbell Bench Press")
        assert same_exercise(catalog, custom)
        assert same_exercise(catalog, catalog)
        assert not same_exercise(catalog, other)
