"""Shared fixtures for unit tests: in-memory repositories and wired services."""
import pytest

from backend.core.exercise_resolver import ExerciseResolver
from backend.core.personal_best_service import PersonalBestService
from tests.fakes import (
    FakeCustomExerciseRepository,
    FakeExerciseCatalogRepository,
    FakePersonalBestRepository,
    FakeWorkoutRepository,
)


@pytest.fixture
def catalog_repo():
    return FakeExerciseCatalogRepository()


@pytest.fixture
def custom_repo():
    return FakeCustomExerciseRepository()


@pytest.fixture
def workout_repo():
    return FakeWorkoutRepository()


@pytest.fixture
def pb_repo():
    return FakePersonalBestRepository()


@pytest.fixture
def resolver(catalog_repo, custom_repo):
    return ExerciseResolver(catalog_repo, custom_repo)


@pytest.fixture
def pb_service(workout_repo, pb_repo):
    return PersonalBestService(workout_repo, pb_repo, weight_tolerance=0.01)
