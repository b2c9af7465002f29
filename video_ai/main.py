import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from video_ai.api.content import router as content_router
from video_ai.core.config import settings
from video_ai.db.session import get_db
from video_ai.services.content_store import count_content

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Video AI Generator API", version="0.1.0")
app.include_router(content_router)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"success": False, "errors": errors})


class HealthResponse(BaseModel):
    ok: bool
    service: str
    version: str
    db_ok: bool
    cached_items: int | None = None


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    # lightweight DB check
    db_ok = False
    cached_items = None
    db_gen = get_db()
    try:
        db: Session = next(db_gen)
        db.execute(text("SELECT 1"))
        cached_items = count_content(db)
        db_ok = True
    except Exception:
        logger.exception("Health check: database unavailable")
        db_ok = False
    finally:
        db_gen.close()

    return HealthResponse(ok=True, service="api", version=app.version, db_ok=db_ok, cached_items=cached_items)
