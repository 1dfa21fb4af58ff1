import os
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

os.environ.setdefault("APP_ENV", "testing")

from tests.fakes import SAO_PAULO, InMemoryStore, local


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def tz() -> ZoneInfo:
    return SAO_PAULO


@pytest.fixture
def fixed_now() -> datetime:
    return local(2024, 3, 1, 8, 0)
