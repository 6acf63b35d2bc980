"""Configuration for the Mission Board client."""

from pathlib import Path

from pydantic import BaseModel, Field

from missionboard_shared.models import DEFAULT_PIN


class Config(BaseModel):
    """Local configuration for this household."""

    data_dir: Path = Field(default_factory=lambda: Path.home() / ".missionboard" / "data")
    default_pin: str = Field(default=DEFAULT_PIN, pattern=r"^\d{4}$")
    tick_seconds: float = Field(default=1.0, gt=0)
    log_file: Path | None = None
    verbose: bool = False


def load_config(path: Path | None) -> Config:
    """Load configuration from a JSON file, or defaults if there is none."""
    if path is None or not path.exists():
        return Config()
    return Config.model_validate_json(path.read_text())
