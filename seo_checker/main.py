import json
import logging
import logging.config
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from seo_checker.routers.audit import limiter, router as audit_router

LOG_LEVEL_ENV = "SEO_CHECKER_LOG_LEVEL"

# Record attributes every LogRecord carries; anything else came in via ``extra=``
_RECORD_FIELDS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonLineFormatter(logging.Formatter):
    """One JSON object per line, including any ``extra=`` fields of the record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, value) for key, value in vars(record).items() if key not in _RECORD_FIELDS
        )
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: str = "") -> None:
    """Send every log record to stderr as a JSON line.

    *level* falls back to ``$SEO_CHECKER_LOG_LEVEL`` and then ``INFO``.
    """
    level = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"json_line": {"()": JsonLineFormatter}},
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "formatter": "json_line",
                },
            },
            "root": {"level": level, "handlers": ["stderr"]},
        }
    )


configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="SEO Checker",
    description="Audits and repairs the SEO metadata of a built static site.",
    version="1.0.0",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(audit_router)


@app.get("/", summary="Health check")
async def health() -> dict:
    return {"status": "ok", "service": "seo-checker", "version": app.version}
