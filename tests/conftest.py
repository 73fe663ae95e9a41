"""Shared fixtures."""

import pytest

from entity_checker.checker import Checker
from entity_checker.registries.memory import InMemoryRegistry
from tests.schema import make_registry


@pytest.fixture
def registry() -> InMemoryRegistry:
    return make_registry()


@pytest.fixture
def checker(registry: InMemoryRegistry) -> Checker:
    return Checker.of(registry)
