from urllib.parse import urlparse, parse_qsl, urlencode, urlunparse
from sqlalchemy import create_engine


def normalize_db_url(db_url: str) -> str:
    """
    Postgres URLs: use the psycopg (v3) driver and ensure sslmode=require
    for hosted databases. Other backends (sqlite for local runs) are returned untouched.
    """
    u = urlparse(db_url)
    if u.scheme not in ("postgres", "postgresql", "postgresql+psycopg"):
        return db_url

    q = dict(parse_qsl(u.query, keep_blank_values=True))
    if "sslmode" not in q:
        q["sslmode"] = "require"
    return urlunparse(u._replace(scheme="postgresql+psycopg", query=urlencode(q)))


def make_engine(db_url: str):
    db_url = normalize_db_url(db_url)
    return create_engine(db_url, pool_pre_ping=True)
