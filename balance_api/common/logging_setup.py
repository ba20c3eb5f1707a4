import json
import logging
import os
import hashlib
from datetime import datetime, timezone
from logging.handlers import TimedRotatingFileHandler
from typing import Any, Dict, Optional, Sequence
from . import config

# Per-record fields and their defaults; empty values are dropped from the output
OPERATION_FIELDS = {
    "component": None,
    "operation": None,
    "params_hash": "",
    "status": "info",
    "duration_ms": 0,
    "error": "",
}

# Request context attached to balance log lines
REQUEST_FIELDS = ("app_id", "network", "strategy")


class StructuredJsonFormatter(logging.Formatter):
    """One JSON object per line: operation fields, request context, level and message"""

    def format(self, record: logging.LogRecord) -> str:
        data: Dict[str, Any] = {"ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")}

        for name, default in OPERATION_FIELDS.items():
            data[name] = getattr(record, name, default)
        data["component"] = data["component"] or record.name
        data["operation"] = data["operation"] or record.funcName or "unknown"

        for name in REQUEST_FIELDS:
            data[name] = getattr(record, name, "")

        data["level"] = record.levelname
        data["message"] = record.getMessage()

        if record.exc_info:
            data["error"] = self.formatException(record.exc_info)
            data["status"] = "error"

        return json.dumps({k: v for k, v in data.items() if v != "" and v is not None})


def _hash_params(params: Optional[Dict[str, Any]]) -> str:
    # Addresses and other request params are logged by hash only
    if not params:
        return ""
    return hashlib.md5(json.dumps(params, sort_keys=True).encode()).hexdigest()[:8]


class StructuredLogger:
    """Logger wrapper with an operation-level structured call"""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def log_operation(self,
                      operation: str,
                      params: Optional[Dict[str, Any]] = None,
                      status: str = "started",
                      duration_ms: int = 0,
                      error: str = "",
                      message: str = "",
                      **context: str) -> None:
        """Log one operation step.

        Args:
            operation: Operation name, e.g. "get_balances"
            params: Request parameters, hashed before logging
            status: started / completed / failed
            duration_ms: Elapsed time of the operation
            error: Error text; logs at ERROR level when set
            message: Human readable message
            **context: Request context (app_id, network, strategy)
        """
        extra = {
            "component": self._logger.name,
            "operation": operation,
            "params_hash": _hash_params(params),
            "status": status,
            "duration_ms": duration_ms,
            "error": error,
        }
        extra.update({name: context.get(name, "") for name in REQUEST_FIELDS})

        if error:
            self._logger.error(message or f"{operation} failed", extra=extra)
        else:
            self._logger.info(message or f"{operation} {status}", extra=extra)

    def __getattr__(self, name):
        """Plain logging calls go to the wrapped logger"""
        return getattr(self._logger, name)


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(logging.getLogger(name))


def _json_handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(StructuredJsonFormatter())
    return handler


def setup_logging(log_file_prefix: str = "balances") -> None:
    """Send JSON logs to the console and to a file rotated at midnight"""
    settings = config.settings
    os.makedirs(settings.log_dir, exist_ok=True)

    root = logging.getLogger()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    root.setLevel(level)
    root.handlers = []

    log_filename = os.path.join(
        settings.log_dir,
        f"{log_file_prefix}_{datetime.now().strftime('%Y%m%d')}.log"
    )
    file_handler = TimedRotatingFileHandler(
        filename=log_filename,
        when="midnight",
        interval=1,
        backupCount=30,
        encoding="utf-8"
    )
    file_handler.suffix = "%Y%m%d.log"

    root.addHandler(_json_handler(logging.StreamHandler(), level))
    root.addHandler(_json_handler(file_handler, level))


def log_request_summary(app_id: str,
                        network: str,
                        addresses: Sequence[str],
                        failures: int,
                        duration_seconds: float,
                        strategy: str = "") -> None:
    """Summary line written once per balance request"""
    get_logger("balance_service").log_operation(
        operation="get_balances",
        params={"addresses": list(addresses)},
        status="completed",
        duration_ms=int(duration_seconds * 1000),
        message=(
            f"Resolved {len(addresses)} addresses for {app_id} on {network} "
            f"({strategy or 'unknown'} strategy, {failures} failures)"
        ),
        app_id=app_id,
        network=network,
        strategy=strategy,
    )
