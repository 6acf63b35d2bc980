from datetime import UTC, datetime

import pytest

from missionboard.app import AppMode, MissionBoardApp
from missionboard.dates import FixedClock
from missionboard.state import AppState
from missionboard.store import MemoryStore


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 3, 15, 9, 30, tzinfo=UTC))


@pytest.fixture
def state() -> AppState:
    return AppState(current_month_id="2024-03", last_reset_date="2024-03-15")


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def app(store: MemoryStore, clock: FixedClock) -> MissionBoardApp:
    return MissionBoardApp(store=store, clock=clock)


@pytest.fixture
def parent_app(app: MissionBoardApp) -> MissionBoardApp:
    app.request_parent_mode()
    app.enter_pin("1234")
    assert app.mode == AppMode.PARENT
    return app
