"""Runtime settings for the calculator engine."""
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

ANGLE_MODES = ("rad", "deg")


@dataclass(frozen=True)
class EngineSettings:
    angle_mode: str = "rad"   # "rad" or "deg"
    history_limit: int = 10
    log_level: str = "WARNING"

    def validate(self) -> None:
        if self.angle_mode not in ANGLE_MODES:
            raise ValueError("angle_mode must be 'rad' or 'deg'")
        if not isinstance(self.history_limit, int) or isinstance(self.history_limit, bool):
            raise ValueError("history_limit must be an integer")
        if self.history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        """
        Build settings from CALC_ANGLE_MODE, CALC_HISTORY_LIMIT and CALC_LOG_LEVEL.
        Missing variables fall back to the defaults; invalid ones raise ValueError.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        try:
            history_limit = int(env.get("CALC_HISTORY_LIMIT", defaults.history_limit))
        except ValueError:
            raise ValueError(f"CALC_HISTORY_LIMIT is not an integer: {env['CALC_HISTORY_LIMIT']!r}")
        settings = cls(
            angle_mode=env.get("CALC_ANGLE_MODE", defaults.angle_mode).lower(),
            history_limit=history_limit,
            log_level=env.get("CALC_LOG_LEVEL", defaults.log_level).upper(),
        )
        settings.validate()
        return settings
