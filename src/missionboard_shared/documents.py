"""Key-value document serialization helpers.

Handles conversion between Python snake_case and stored camelCase, and wraps
every stored value in a versioned envelope:

    {"schema": 1, "data": <camelCase JSON value>}

Decoding never raises. An absent key, malformed JSON, an unknown schema
version or a shape mismatch all yield the key's default value.
"""

import json
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .models import (
    DEFAULT_PIN,
    ArchiveEntry,
    BonusBalance,
    ChildProfile,
    Mission,
    MissionLog,
    MissionPreset,
    Pin,
    RewardConfig,
    StickerDay,
)

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class StoreKey(StrEnum):
    MISSIONS = "missions"
    STICKERS = "stickers"
    BONUS_BALANCE = "bonus-balance"
    ARCHIVES = "archives"
    CURRENT_MONTH_ID = "current-month-id"
    LAST_RESET_DATE = "last-reset-date"
    PRESETS = "presets"
    REWARD_CONFIG = "reward-config"
    PROFILE = "profile"
    MISSION_LOGS = "mission-logs"
    PIN = "pin"


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


def to_snake(string: str) -> str:
    """Convert camelCase to snake_case."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", string).lower()


def _convert_keys(data: Any, convert: Callable[[str], str]) -> Any:
    if isinstance(data, dict):
        return {convert(key): _convert_keys(value, convert) for key, value in data.items()}
    if isinstance(data, list):
        return [_convert_keys(item, convert) for item in data]
    return data


@dataclass(frozen=True)
class KeySchema:
    """How the value under one store key is validated and defaulted."""

    adapter: TypeAdapter
    default: Callable[[], Any]


KEY_SCHEMAS: dict[StoreKey, KeySchema] = {
    StoreKey.MISSIONS: KeySchema(TypeAdapter(list[Mission]), list),
    StoreKey.STICKERS: KeySchema(TypeAdapter(list[StickerDay]), list),
    StoreKey.BONUS_BALANCE: KeySchema(TypeAdapter(BonusBalance), lambda: 0),
    StoreKey.ARCHIVES: KeySchema(TypeAdapter(list[ArchiveEntry]), list),
    StoreKey.CURRENT_MONTH_ID: KeySchema(TypeAdapter(str), str),
    StoreKey.LAST_RESET_DATE: KeySchema(TypeAdapter(str), str),
    StoreKey.PRESETS: KeySchema(TypeAdapter(list[MissionPreset]), list),
    StoreKey.REWARD_CONFIG: KeySchema(TypeAdapter(RewardConfig), RewardConfig),
    StoreKey.PROFILE: KeySchema(TypeAdapter(ChildProfile), ChildProfile),
    StoreKey.MISSION_LOGS: KeySchema(TypeAdapter(list[MissionLog]), list),
    StoreKey.PIN: KeySchema(TypeAdapter(Pin), lambda: DEFAULT_PIN),
}


def encode_value(key: StoreKey, value: Any) -> str:
    """Serialize a value for storage under ``key``.

    - Dumps pydantic models to JSON-compatible data
    - Converts field names from snake_case to camelCase
    - Drops unset optional fields (None) so documents stay compact
    """
    schema = KEY_SCHEMAS[key]
    data = schema.adapter.dump_python(value, mode="json", exclude_none=True)
    envelope = {"schema": SCHEMA_VERSION, "data": _convert_keys(data, to_camel)}
    return json.dumps(envelope, ensure_ascii=False)


def decode_value(key: StoreKey, raw: str | None) -> Any:
    """Parse a stored value, substituting the key's default when unusable."""
    schema = KEY_SCHEMAS[key]
    if raw is None:
        return schema.default()
    try:
        envelope = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Stored value for %s is not valid JSON, using default", key)
        return schema.default()

    if not isinstance(envelope, dict) or envelope.get("schema") != SCHEMA_VERSION:
        logger.warning("Stored value for %s has unsupported schema, using default", key)
        return schema.default()

    try:
        return schema.adapter.validate_python(_convert_keys(envelope.get("data"), to_snake))
    except ValidationError as exc:
        logger.warning(
            "Stored value for %s failed validation (%d errors), using default",
            key,
            exc.error_count(),
        )
        return schema.default()
