"""Key-value persistence for the Mission Board state."""

import logging
from pathlib import Path
from typing import Any, Protocol

from missionboard_shared.documents import StoreKey, decode_value, encode_value

from .state import AppState

logger = logging.getLogger(__name__)

# AppState attribute holding the value for each store key.
STATE_FIELDS: dict[StoreKey, str] = {
    StoreKey.MISSIONS: "missions",
    StoreKey.STICKERS: "stickers",
    StoreKey.BONUS_BALANCE: "bonus_stickers",
    StoreKey.ARCHIVES: "archives",
    StoreKey.CURRENT_MONTH_ID: "current_month_id",
    StoreKey.LAST_RESET_DATE: "last_reset_date",
    StoreKey.PRESETS: "presets",
    StoreKey.REWARD_CONFIG: "reward_config",
    StoreKey.PROFILE: "profile",
    StoreKey.MISSION_LOGS: "mission_logs",
    StoreKey.PIN: "pin",
}


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-process store, mostly for tests and dry runs."""

    def __init__(self, data: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """One JSON file per key inside a directory."""

    def __init__(self, data_dir: Path):
        self._data_dir = data_dir
        self._data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self._data_dir / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)


class StateRepository:
    """Loads AppState from a store and commits changed keys back."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def _get(self, key: StoreKey) -> str | None:
        try:
            return self._store.get(key.value)
        except (OSError, UnicodeDecodeError):
            logger.exception("Failed to read %s from store", key)
            return None

    def exists(self, key: StoreKey) -> bool:
        return self._get(key) is not None

    def read(self, key: StoreKey) -> Any:
        return decode_value(key, self._get(key))

    def load(self) -> AppState:
        state = AppState()
        for key, attr in STATE_FIELDS.items():
            setattr(state, attr, self.read(key))
        logger.debug(
            "Loaded state: %d missions, %d stickers, %d archives",
            len(state.missions),
            len(state.stickers),
            len(state.archives),
        )
        return state

    def commit(self, state: AppState, *keys: StoreKey) -> None:
        """Write the given keys (all keys if none given). Failures are logged."""
        for key in keys or tuple(STATE_FIELDS):
            value = getattr(state, STATE_FIELDS[key])
            try:
                self._store.set(key.value, encode_value(key, value))
            except OSError:
                logger.exception("Failed to write %s to store", key)
