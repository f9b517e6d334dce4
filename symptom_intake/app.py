# --- imports (top of symptom_intake/app.py) ---
import json
import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv

# Load env vars before importing modules that read them at import time
BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from symptom_intake.middleware.tracing import TracingMiddleware, TRACE_ID_CTX_VAR
from symptom_intake.models import init_db
from symptom_intake.routes import auth_routes, history_routes, predict_routes, search_history_routes
from symptom_intake.utils.exceptions import error_body, handle_http_exception, handle_unhandled_exception
from symptom_intake.utils.rate_limit import limiter


# --- logging setup ---
class JsonFormatter(logging.Formatter):
    def format(self, record):  # type: ignore[override]
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "level": record.levelname,
            "function": record.funcName,
            "message": record.getMessage(),
        }
        trace_id = TRACE_ID_CTX_VAR.get()
        if trace_id:
            payload["trace_id"] = trace_id
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging() -> logging.Logger:
    logger = logging.getLogger("symptom_intake")
    logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    return logger


logger = configure_logging()

app = FastAPI(title="Symptom Intake API", version="0.1.0")
app.state.limiter = limiter
app.add_middleware(TracingMiddleware)

CORS_ORIGINS = [
    o.strip()
    for o in (os.getenv("CORS_ORIGINS") or "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if o.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, handle_http_exception)
app.add_exception_handler(Exception, handle_unhandled_exception)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    try:
        retry_after = max(1, int(getattr(exc, "reset_time", time.time()) - time.time()))
    except (TypeError, ValueError):
        retry_after = 60
    logger.info({
        "function": "rate_limit",
        "path": str(request.url.path),
        "client": get_remote_address(request),
    })
    return JSONResponse(
        status_code=429,
        headers={"Retry-After": str(retry_after)},
        content=error_body(429, "Too many requests. Please wait a bit and try again."),
    )


@app.on_event("startup")
def _init_db():
    init_db()
    logger.info({"function": "startup", "status": "tables ready"})


app.include_router(auth_routes.router)
app.include_router(predict_routes.router)
app.include_router(search_history_routes.router)
app.include_router(history_routes.router)


@app.get("/api/health")
def health():
    return {"status": "ok", "message": "Backend server is running"}
