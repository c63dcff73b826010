from fastapi import APIRouter, HTTPException, Request
from sqlalchemy import text

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request):
    analyzer = getattr(request.app.state, "pattern_analyzer", None)
    return {"ok": True, "project": "dreamlog", "pattern_analyzer": callable(analyzer)}


@router.get("/health/db")
def health_db(request: Request):
    """Checks the connection AND that the tables the pattern pipeline reads exist."""
    engine = request.app.state.engine
    try:
        with engine.connect() as conn:
            conn.execute(text("select 1 from dreams limit 1"))
            conn.execute(text("select 1 from journal_entries limit 1"))
        return {"db": "ok"}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"{type(e).__name__}: {str(e)}")
