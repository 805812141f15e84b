"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from fakes import InMemoryCatalog, InMemoryEventStore


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def catalog() -> InMemoryCatalog:
    return InMemoryCatalog()
