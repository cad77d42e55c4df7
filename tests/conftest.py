from __future__ import annotations

import itertools
from datetime import date, datetime, timedelta

import pytest

from journey_engine.core.config import Settings
from journey_engine.schemas.leg import Leg

AS_OF = date(2024, 1, 10)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def make_leg():
    """Leg factory: ids and created_at increase with every call."""
    counter = itertools.count(1)

    def _make(leg_type: str, status: str = "PENDING", container_id: str | None = "C1", **kwargs) -> Leg:
        n = next(counter)
        kwargs.setdefault("id", f"leg-{n}")
        kwargs.setdefault("created_at", datetime(2024, 1, 1, 8, 0) + timedelta(minutes=n))
        return Leg(leg_type=leg_type, status=status, container_id=container_id, **kwargs)

    return _make
