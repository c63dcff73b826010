import logging
import os
from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def load_env() -> str:
    """
    Load the .env that lives in apps/api/.env deterministically.
    Returns the absolute env path used (useful for debug).
    """
    # dreamlog/core/config.py -> dreamlog/core -> dreamlog -> (apps/api)
    api_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
    env_path = os.path.join(api_root, ".env")
    load_dotenv(dotenv_path=env_path, override=True)
    return env_path


def getenv_required(key: str) -> str:
    val = os.getenv(key)
    if not val:
        raise RuntimeError(f"{key} missing. Put it in apps/api/.env")
    return val


def getenv_default(key: str, default: str) -> str:
    return os.getenv(key, default)


def getenv_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be an integer, got {raw!r}")


def configure_logging(level: str | None = None) -> None:
    level_name = (level or getenv_default("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
