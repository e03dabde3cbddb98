#!/usr/bin/env python3
"""
Run logging for pagescribe.

Structured logging with keyword context:
- JSONL file per stage (optional, created lazily on first message)
- Human-readable console output (optional)
- Context preserved on every record (run_id, stage, image, cost, ...)

USAGE:
  with create_logger('run-20240101', 'transcribe', log_dir=path) as logger:
      logger.info('Processing...', image='page_001.jpg')

  A logger without log_dir and without console output is silent, which is
  what library components fall back to when no logger is supplied.

THREAD SAFETY:
  Logging calls go through the stdlib logging module and are safe to make
  from worker threads.
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


class FlushingFileHandler(logging.FileHandler):
    """FileHandler that flushes after every emit for real-time log visibility."""
    def emit(self, record):
        super().emit(record)
        self.flush()


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for machine parsing."""

    CONTEXT_FIELDS = (
        'run_id', 'stage', 'image', 'attempt', 'attempts',
        'cost_usd', 'duration_seconds', 'status_code', 'error',
    )

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now().astimezone().isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        for field in self.CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """Format log records for console output."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime('%H:%M:%S')
        parts = [f"[{timestamp}]", f"{record.levelname}:"]

        if hasattr(record, 'image'):
            parts.append(f"[{record.image}]")

        parts.append(record.getMessage())

        if hasattr(record, 'cost_usd'):
            parts.append(f"(${record.cost_usd:.4f})")

        return ' '.join(parts)


class PipelineLogger:
    """Logger that writes to a single append-only JSONL file per stage.

    File handlers are created lazily on first log message to avoid
    creating empty log files when nothing is logged.
    """
    def __init__(
        self,
        run_id: str,
        stage: str,
        log_dir: Optional[Path] = None,
        console_output: bool = False,
        json_output: bool = True,
        level: str = "INFO",
        filename: str = None
    ):
        self.run_id = run_id
        self.stage = stage
        self.log_dir = Path(log_dir) if log_dir is not None else None
        self.console_output = console_output
        self.json_output = json_output and self.log_dir is not None
        self.level = level
        self.filename = filename or f"{stage}.jsonl"

        self._logger = None
        self._initialized = False
        self.log_file = None

    def _ensure_initialized(self):
        if self._initialized:
            return

        logger_name = f"pagescribe.{self.run_id}.{self.stage}.{id(self)}"
        self._logger = logging.getLogger(logger_name)
        self._logger.setLevel(getattr(logging, self.level.upper()))
        self._logger.propagate = False

        if self.console_output:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(HumanFormatter())
            self._logger.addHandler(console_handler)

        if self.json_output:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            json_file = self.log_dir / self.filename
            json_handler = FlushingFileHandler(json_file, mode='a', encoding='utf-8')
            json_handler.setFormatter(JSONFormatter())
            self._logger.addHandler(json_handler)
            self.log_file = json_file

        if not self._logger.handlers:
            self._logger.addHandler(logging.NullHandler())

        self._initialized = True

    @property
    def logger(self):
        self._ensure_initialized()
        return self._logger

    def _log(self, level: str, message: str, **kwargs):
        reserved_params = {}
        for param in ['exc_info', 'stack_info', 'stacklevel', 'extra']:
            if param in kwargs:
                reserved_params[param] = kwargs.pop(param)

        extra = {
            'run_id': self.run_id,
            'stage': self.stage,
            **kwargs
        }
        if 'extra' in reserved_params:
            extra.update(reserved_params.pop('extra'))

        self.logger.log(
            getattr(logging, level.upper()),
            message,
            extra=extra,
            **reserved_params
        )

    def debug(self, message: str, **kwargs):
        self._log('DEBUG', message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log('INFO', message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log('WARNING', message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log('ERROR', message, **kwargs)

    def child(self, stage: str) -> 'PipelineLogger':
        """Logger for another stage of the same run, sharing outputs."""
        return PipelineLogger(
            self.run_id,
            stage,
            log_dir=self.log_dir,
            console_output=self.console_output,
            json_output=self.json_output,
            level=self.level,
            filename=self.filename,
        )

    def close(self):
        if self._initialized and self._logger:
            for handler in self._logger.handlers[:]:
                handler.close()
                self._logger.removeHandler(handler)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def create_logger(run_id: str, stage: str, **kwargs) -> PipelineLogger:
    return PipelineLogger(run_id, stage, **kwargs)
