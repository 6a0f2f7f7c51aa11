import logging
import os
from dataclasses import dataclass
from typing import Optional


def _optional_int(name: str) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return None
    try:
        return int(raw)
    except ValueError:
        logging.getLogger(__name__).warning(f"Ignoring non-integer {name}={raw!r}")
        return None


@dataclass
class Config:
    """Process-level configuration for the drone AI engine"""

    # Tuning profile (JSON under configs/). Empty = packaged normal profile.
    PROFILE_PATH: str = os.environ.get('DRONE_AI_PROFILE', '')

    # Logging
    LOG_LEVEL: str = os.environ.get('DRONE_AI_LOG_LEVEL', 'INFO')
    LOG_FORMAT: str = '%(asctime)s %(levelname)s %(name)s: %(message)s'

    # Decision audit log. Empty = audit records stay in memory/handlers only.
    DECISION_LOG_PATH: str = os.environ.get('DRONE_AI_DECISION_LOG', '')

    # Fixed seed for replayable tie-breaks. None = fresh entropy per game.
    SEED: Optional[int] = _optional_int('DRONE_AI_SEED')

    # Paths
    BASE_DIR: str = os.path.dirname(os.path.abspath(__file__))
    CONFIG_DIR: str = os.path.join(BASE_DIR, 'configs')

    @property
    def profile_path(self) -> Optional[str]:
        return self.PROFILE_PATH or None

    def configure_logging(self):
        """Apply log level and attach the decision log handler if configured"""
        level = getattr(logging, self.LOG_LEVEL.upper(), logging.INFO)
        logging.basicConfig(level=level, format=self.LOG_FORMAT)

        if self.DECISION_LOG_PATH:
            from drone_ai.decision_log import attach_file_handler
            attach_file_handler(self.DECISION_LOG_PATH)


# Create global config instance
config = Config()
