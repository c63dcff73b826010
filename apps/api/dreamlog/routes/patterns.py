# apps/api/dreamlog/routes/patterns.py

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, Request

from dreamlog.core.errors import (
    AnalysisUnavailableError,
    InsufficientDataError,
    MalformedAnalysisError,
)
from dreamlog.schemas.patterns import PatternReport
from dreamlog.services.patterns_service import DEFAULT_TIME_RANGE, analyze_patterns

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["patterns"])


@router.get("/users/{user_id}/patterns/analyze", response_model=PatternReport)
def analyze_patterns_route(
    user_id: int,
    request: Request,
    time_range: str = Query(DEFAULT_TIME_RANGE, alias="timeRange"),
    limit: int = Query(0, ge=0),
):
    """
    Deep pattern analysis over a user's dreams and shared journal entries.
    timeRange is a display label; it does not narrow the entries.
    limit (optional) caps how many of the most recent dreams are sent.
    """
    try:
        analyzer = getattr(request.app.state, "pattern_analyzer", None)
        if not callable(analyzer):
            raise HTTPException(status_code=500, detail="pattern analyzer not configured on backend")

        return analyze_patterns(
            request.app.state.engine,
            user_id=user_id,
            analyzer=analyzer,
            time_range=time_range,
            limit=limit,
            min_entries=getattr(request.app.state, "pattern_min_entries", 3),
            word_limit=getattr(request.app.state, "pattern_word_limit", 30),
        )

    except InsufficientDataError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "message": "not enough entries",
                "details": str(e),
                "total": e.total,
                "required": e.required,
            },
        )
    except MalformedAnalysisError as e:
        logger.warning("malformed pattern analysis for user=%s: %s", user_id, e.detail)
        raise HTTPException(
            status_code=502,
            detail={"message": "pattern analysis returned an unusable result, please retry", "details": e.detail},
        )
    except AnalysisUnavailableError as e:
        logger.warning("pattern analyzer unavailable for user=%s: %s", user_id, e)
        raise HTTPException(
            status_code=503,
            detail={"message": "pattern analysis service unavailable, please retry", "details": str(e)},
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("pattern analysis failed")
        raise HTTPException(status_code=500, detail=f"{type(e).__name__}: {str(e)}")
