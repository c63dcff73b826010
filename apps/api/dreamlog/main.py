import logging
from urllib.parse import urlparse

from fastapi import FastAPI

from dreamlog.core.config import configure_logging, getenv_int, getenv_required, load_env
from dreamlog.core.db import make_engine
from dreamlog.routes.health import router as health_router
from dreamlog.routes.patterns import router as patterns_router
from dreamlog.services.aggregation_service import DEFAULT_WORD_LIMIT
from dreamlog.services.eligibility_service import MIN_ENTRIES
from dreamlog.wiring.pattern_analyzer import build_pattern_analyzer

logger = logging.getLogger(__name__)


def create_app(engine=None, analyzer=None) -> FastAPI:
    env_path = load_env()
    configure_logging()

    if engine is None:
        db_url = getenv_required("DATABASE_URL")
        engine = make_engine(db_url)

        # Safe debug (no password)
        u = urlparse(db_url)
        logger.info("env file: %s", env_path)
        logger.info("db host: %s user: %s", u.hostname, u.username)

    app = FastAPI(title="Dreamlog API", version="0.1.0")

    app.state.engine = engine
    app.state.pattern_analyzer = analyzer if analyzer is not None else build_pattern_analyzer()
    app.state.pattern_min_entries = getenv_int("PATTERN_MIN_ENTRIES", MIN_ENTRIES)
    app.state.pattern_word_limit = getenv_int("PATTERN_WORD_LIMIT", DEFAULT_WORD_LIMIT)

    app.include_router(health_router)
    app.include_router(patterns_router)

    return app
