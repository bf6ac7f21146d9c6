"""FastAPI application entry point."""
import os

# Force UTC before any module caches timezone information; task days are UTC calendar days
os.environ['TZ'] = 'UTC'

import time
import sys

if hasattr(time, "tzset"):
    time.tzset()

# Ensure console streams can emit Unicode on Windows
for stream in (sys.stdout, sys.stderr):
    if hasattr(stream, "reconfigure"):
        stream.reconfigure(encoding="utf-8", errors="backslashreplace")

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from contextlib import asynccontextmanager

from coinledger.config import get_settings
from coinledger.version import APP_VERSION
from coinledger.services.task_seeder import seed_default_tasks
from coinledger.routers import coins, health, notifications, streak, subscription, tasks

logs_dir = Path("logs")
logs_dir.mkdir(exist_ok=True)

log_file = logs_dir / "coinledger.log"
sql_log_file = logs_dir / "coinledger_sql.log"
api_log_file = logs_dir / "coinledger_api.log"

# Rotating handler for general logs (1MB max size, keep 5 backup files)
rotating_handler = RotatingFileHandler(
    log_file,
    maxBytes=1024 * 1024,
    backupCount=5,
    encoding='utf-8',
)
rotating_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

sql_rotating_handler = RotatingFileHandler(
    sql_log_file,
    maxBytes=1024 * 1024,
    backupCount=5,
    encoding='utf-8',
)
sql_rotating_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

# API request logs (2MB max size, keep 10 backup files)
api_rotating_handler = RotatingFileHandler(api_log_file, maxBytes=2 * 1024 * 1024, backupCount=10, encoding='utf-8')
api_rotating_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))

# force=True overrides any configuration uvicorn installed first
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
        rotating_handler,
    ],
    force=True,
)

logger = logging.getLogger(__name__)

api_logger = logging.getLogger("coinledger.api")
api_logger.handlers.clear()
api_logger.addHandler(api_rotating_handler)
api_logger.setLevel(logging.INFO)
api_logger.propagate = False

uvicorn_access_logger = logging.getLogger("uvicorn.access")
uvicorn_access_logger.setLevel(logging.INFO)
if rotating_handler not in uvicorn_access_logger.handlers:
    uvicorn_access_logger.addHandler(rotating_handler)

sqlalchemy_logger = logging.getLogger("sqlalchemy.engine.Engine")
sqlalchemy_logger.handlers.clear()
sqlalchemy_logger.addHandler(sql_rotating_handler)
sqlalchemy_logger.setLevel(logging.INFO)
sqlalchemy_logger.propagate = False


class SQLTransactionFilter(logging.Filter):
    def filter(self, record):
        if record.levelno == logging.INFO and hasattr(record, 'getMessage'):
            message = record.getMessage()

            # Transaction boundaries are noise; the ledger log already records commits
            if any(keyword in message for keyword in ['ROLLBACK', 'BEGIN', 'COMMIT', 'generated in']):
                return False

            if any(kw in message for kw in ['SELECT', 'UPDATE', 'INSERT']):
                record.msg = ' '.join(message.split())
                record.args = ()

        return True


sqlalchemy_logger.addFilter(SQLTransactionFilter())

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: seed the daily task catalogue."""
    logger.info(f"Coin Ledger API starting (version {APP_VERSION}, environment {settings.environment})")

    if settings.seed_default_tasks:
        try:
            await seed_default_tasks()
        except Exception as e:
            logger.error(f"Failed to seed default daily tasks: {e}")
            logger.error("Run: alembic upgrade head")

    yield

    logger.info("Coin Ledger API shutting down")


app = FastAPI(
    title="Coin Ledger API",
    description="Coins, daily tasks and streaks for the chatbot platform",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors with user-friendly messages."""
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")

    errors = []
    for error in exc.errors():
        loc = error.get("loc", [])
        field_path = " -> ".join(str(x) for x in loc[1:]) if len(loc) > 1 else "unknown field"
        errors.append({
            "field": field_path,
            "message": error.get("msg", "Validation error"),
            "type": error.get("type", "unknown"),
        })

    return JSONResponse(
        status_code=422,
        content={
            "detail": "Request validation failed",
            "errors": errors
        }
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request and response with timing to the API log file."""
    start_time = time.time()

    client_ip = request.client.host if request.client else "unknown"
    method = request.method
    path = request.url.path
    user_id = request.headers.get("x-user-id", "-")

    request_id = f"{method}:{path}:{int(start_time * 1000) % 100000}"

    api_logger.info(f">> {request_id} | START | {method} {path} | user: {user_id} | IP: {client_ip}")
    if request.query_params:
        api_logger.info(f">> {request_id} | QUERY | {request.query_params}")

    try:
        response = await call_next(request)
    except Exception as e:
        process_time = time.time() - start_time
        api_logger.error(
            f"<< {request_id} | EXCEPTION | {method} {path} | "
            f"Error: {str(e)[:100]} | "
            f"Time: {process_time:.3f}s"
        )
        raise

    process_time = time.time() - start_time
    api_logger.info(
        f"<< {request_id} | COMPLETE | {method} {path} | "
        f"Status: {response.status_code} | "
        f"Time: {process_time:.3f}s"
    )
    if response.status_code >= 400:
        api_logger.warning(f"<< {request_id} | ERROR_RESPONSE | Status: {response.status_code}")

    return response


allowed_origins = os.getenv("ALLOWED_ORIGINS", "").split(",")
if not allowed_origins or allowed_origins == [""]:
    allowed_origins = [
        settings.frontend_url,
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(coins.router, prefix="/coins", tags=["coins"])
app.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
app.include_router(streak.router, prefix="/streak", tags=["streak"])
app.include_router(subscription.router, prefix="/subscription", tags=["subscription"])
app.include_router(notifications.router, prefix="/notifications", tags=["notifications"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Coin Ledger API",
        "version": APP_VERSION,
        "environment": settings.environment,
        "docs": "/docs",
    }
