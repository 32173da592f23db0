"""Configuration management."""

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, model_validator


class RulesConfig(BaseModel):
    """Table rules.

    Seats not listed in human_seats are played by computer agents.
    """

    player_count: int = Field(default=2, ge=2, le=4)
    hand_size: int = Field(default=7, ge=1, le=15)
    human_seats: List[int] = Field(default_factory=lambda: [0])

    # House rules
    jump_in_enabled: bool = False
    draw_stacking_enabled: bool = True
    uno_penalty: int = Field(default=2, ge=0)

    @model_validator(mode="after")
    def _check_seats(self) -> "RulesConfig":
        for seat in self.human_seats:
            if not 0 <= seat < self.player_count:
                raise ValueError(f"Human seat {seat} is outside 0..{self.player_count - 1}")
        if len(set(self.human_seats)) != len(self.human_seats):
            raise ValueError("Duplicate human seat")
        return self

    def is_computer(self, seat: int) -> bool:
        return seat not in self.human_seats


class LLMConfig(BaseModel):
    """Settings for LLM-driven opponents."""

    provider: str = "openrouter"
    model: str = "openai/gpt-4o-mini"
    timeout: float = 30.0
    rate_limit: Optional[float] = None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"


class Config(BaseModel):
    """Root configuration."""

    rules: RulesConfig = RulesConfig()
    llm: LLMConfig = LLMConfig()
    logging: LoggingConfig = LoggingConfig()


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from YAML file.

    Args:
        path: Path to config file. If None or missing, uses default config.

    Returns:
        Config object.
    """
    if path is None:
        return Config()

    config_path = Path(path)
    if not config_path.exists():
        return Config()

    with open(config_path) as f:
        data = yaml.safe_load(f)

    return Config(**data) if data else Config()
