"""
Structured logging configuration

Every log line can carry three correlation fields:
- request_id: set by the HTTP middleware from X-Request-ID
- run_id: set by the PipelineController for one submit-to-terminal run
- pipeline_stage: the stage the controller is currently driving

Console output is colourised for development or JSON when JSON_LOGS is set;
the optional rotating file log is always JSON.
"""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, UTC
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

SENSITIVE_KEY_TOKENS = ("password", "secret", "token", "api_key", "apikey", "authorization")
REDACTED = "***REDACTED***"

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
run_id_var: ContextVar[Optional[str]] = ContextVar("run_id", default=None)
pipeline_stage_var: ContextVar[Optional[str]] = ContextVar("pipeline_stage", default=None)

_CONTEXT_VARS = (("request_id", request_id_var), ("run_id", run_id_var), ("pipeline_stage", pipeline_stage_var))

# Attributes every LogRecord carries; anything else came in through `extra`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def correlation_context() -> Dict[str, str]:
    """The correlation fields that are currently set"""
    return {name: var.get() for name, var in _CONTEXT_VARS if var.get()}


def _redact(key: str, value: Any) -> Any:
    if any(token in key.lower() for token in SENSITIVE_KEY_TOKENS):
        return REDACTED if isinstance(value, str) else value
    if isinstance(value, dict):
        return {k: _redact(str(k), v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(_redact(key, item) for item in value)
    return value


def _record_extra(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS
        and not key.startswith("_")
        and key not in dict(_CONTEXT_VARS)
    }


class StructuredFormatter(logging.Formatter):
    """One JSON object per line"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            **correlation_context(),
        }

        if record.exc_info:
            exc_type, exc, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc),
                "traceback": self.formatException(record.exc_info),
            }

        extra = {key: _redact(key, value) for key, value in _record_extra(record).items()}
        if extra:
            entry["extra"] = extra

        return json.dumps(entry, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Coloured single-line output with short correlation IDs"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"
    PREFIXES = {"request_id": "req", "run_id": "run", "pipeline_stage": "stage"}

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]

        tags = [
            f"{self.PREFIXES[name]}:{value if name == 'pipeline_stage' else value[:8]}"
            for name, value in correlation_context().items()
        ]
        context = f" [{', '.join(tags)}]" if tags else ""

        line = f"{color}{clock} {record.levelname:8s}{self.RESET} {record.name:30s}{context} {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class LoggerAdapter(logging.LoggerAdapter):
    """Adds the bound fields and the current correlation context to each record"""

    def process(self, msg: str, kwargs: Any) -> tuple:
        kwargs["extra"] = {**(self.extra or {}), **(kwargs.get("extra") or {}), **correlation_context()}
        return msg, kwargs


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    use_json: bool = False,
) -> None:
    """
    Configure the root logger.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (unknown names mean INFO)
        log_file: Optional rotating JSON log (LOG_MAX_BYTES, LOG_BACKUP_COUNT)
        use_json: JSON console output instead of the development format
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(StructuredFormatter() if use_json else DevelopmentFormatter())
    handlers = [console]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            log_file,
            maxBytes=int(os.getenv("LOG_MAX_BYTES", str(20 * 1024 * 1024))),
            backupCount=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            encoding="utf-8",
        )
        rotating.setFormatter(StructuredFormatter())
        handlers.append(rotating)

    for handler in handlers:
        handler.setLevel(numeric_level)
        root.addHandler(handler)

    # SDK and transport chatter
    for name in ("urllib3", "httpx", "httpcore", "asyncio", "google_genai"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str, **extra: Any) -> LoggerAdapter:
    """
    Logger with fields bound to every record.

    Example:
        logger = get_logger(__name__, stage="content_extraction")
        logger.info("Extracting", extra={"source_count": 4})
    """
    return LoggerAdapter(logging.getLogger(name), extra)


def set_request_id(request_id: Optional[str]) -> None:
    request_id_var.set(request_id)


def set_run_id(run_id: Optional[str]) -> None:
    run_id_var.set(run_id)


def set_pipeline_stage(stage: Optional[str]) -> None:
    pipeline_stage_var.set(stage)


def clear_context() -> None:
    for _, var in _CONTEXT_VARS:
        var.set(None)


class LogTimer:
    """Logs the start, completion or failure of a block with its duration"""

    def __init__(self, logger: logging.LoggerAdapter, operation: str, level: int = logging.INFO):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.start_time: Optional[float] = None
        self.duration: Optional[float] = None

    def __enter__(self) -> "LogTimer":
        self.start_time = datetime.now().timestamp()
        self.logger.log(self.level, f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb) -> None:
        self.duration = datetime.now().timestamp() - self.start_time
        if exc_type:
            self.logger.error(
                f"Failed: {self.operation}",
                extra={"duration_seconds": self.duration, "error": str(exc_val)},
            )
        else:
            self.logger.log(
                self.level,
                f"Completed: {self.operation}",
                extra={"duration_seconds": self.duration},
            )
