from __future__ import annotations

import pytest

from tests.fakes import FakeSession, InMemoryTicketStore


@pytest.fixture
def store() -> InMemoryTicketStore:
    return InMemoryTicketStore()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()
