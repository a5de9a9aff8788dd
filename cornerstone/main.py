import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from .api import budget, work_items
from .database import engine, ensure_runtime_schema

# Create tables and seed the default category catalog
ensure_runtime_schema()


def _parse_cors_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOW_ORIGINS", "http://localhost:8000,http://127.0.0.1:8000")
    origins: list[str] = []
    for item in raw.split(","):
        origin = item.strip()
        if origin and origin not in origins:
            origins.append(origin)
    return origins or ["http://localhost:8000", "http://127.0.0.1:8000"]


cors_origins = _parse_cors_origins()

app = FastAPI(title="Cornerstone Budget API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials="*" not in cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)
app.include_router(budget.router)
app.include_router(work_items.router)


@app.get("/health")
def health_check():
    return {"status": "healthy"}


def _db_health() -> dict:
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return {"healthy": True}
    except Exception as exc:  # noqa: BLE001
        return {"healthy": False, "error": str(exc)}


@app.get("/health/detail")
def health_detail():
    db_status = _db_health()
    return {
        "status": "healthy" if db_status["healthy"] else "degraded",
        "dependencies": {"db": {"required": True, **db_status}},
    }
