"""Settings, read from the environment once at import."""

import os


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


DATABASE_URL = os.getenv("OTHELLO_DATABASE_URL", "sqlite:///./othello.db")
DATABASE_ECHO = _env_flag("OTHELLO_DATABASE_ECHO")
LOG_LEVEL = os.getenv("OTHELLO_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
