import os
from datetime import date, timedelta

# Must be set before namhae_welfare.main builds its middleware stack.
os.environ["RATE_LIMIT_PER_MINUTE"] = "0"

import pytest

from namhae_welfare.config import get_settings
from namhae_welfare.core import database
from namhae_welfare.services import (
    recommendation_service,
    survey_service,
    user_registry,
    welfare_catalog,
)


def _years_ago(years: int, today: date | None = None) -> date:
    today = today or date.today()
    try:
        return today.replace(year=today.year - years)
    except ValueError:  # today is Feb 29
        return today.replace(year=today.year - years, day=28)


@pytest.fixture(autouse=True)
def isolated_storage(tmp_path, monkeypatch):
    """Every test gets its own SQLite file and fresh service singletons."""
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "welfare.sqlite3"))
    get_settings.cache_clear()
    monkeypatch.setattr(database, "_database", None)
    monkeypatch.setattr(user_registry, "_registry", None)
    monkeypatch.setattr(survey_service, "_manager", None)
    monkeypatch.setattr(welfare_catalog, "_catalog", None)
    monkeypatch.setattr(recommendation_service, "_selector", None)
    yield
    get_settings.cache_clear()


@pytest.fixture
def birth_date_for_age():
    """Birth date (ISO string) for someone who is exactly `age` today.

    days_until_birthday=1 gives someone whose next birthday is tomorrow,
    i.e. still age - 1.
    """
    def _make(age: int, days_until_birthday: int = 0) -> str:
        return (_years_ago(age) + timedelta(days=days_until_birthday)).isoformat()
    return _make
