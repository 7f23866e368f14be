import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from puppy_spa import __version__
from puppy_spa.database import init_db
from puppy_spa.routes import entries, search, waiting_lists

APP_NAME = "Puppy Spa API"

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=APP_NAME,
    description="Day-based waiting lists for a puppy grooming salon",
    version=__version__,
)

_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    _cors_origins.extend(o.strip() for o in _extra.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(waiting_lists.router, prefix="/api", tags=["waiting-lists"])
app.include_router(entries.router, prefix="/api", tags=["waiting-list-entries"])
app.include_router(search.router, prefix="/api", tags=["search"])


@app.on_event("startup")
def on_startup():
    init_db()  # Imports models and creates any missing tables

    for r in app.routes:
        methods = getattr(r, "methods", None)
        path = getattr(r, "path", None)
        if path:
            logger.debug("%-20s %s", ", ".join(sorted(methods)) if methods else "N/A", path)


@app.get("/api/health")
def health_check():
    """Liveness probe"""
    return {"app_name": APP_NAME, "version": __version__, "status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "puppy_spa.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
