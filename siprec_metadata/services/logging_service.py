"""
Structured logging for siprec-metadata.

This module provides JSON-structured logging with timestamps, operation
types, log rotation and retention. Library modules log through
``logging.getLogger(__name__)``; their records propagate to the
``siprec_metadata`` logger configured here.
"""

import logging
import logging.handlers
import os
import json
import sys
import time
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path
from enum import Enum


class OperationType(Enum):
    """Enumeration of operation types for structured logging."""
    ENCODE = "encode"
    DECODE = "decode"
    VALIDATION = "validation"
    EXPORT = "export"
    SYSTEM = "system"
    CONFIGURATION = "configuration"
    ERROR = "error"


class LogLevel(Enum):
    """Log level enumeration."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured logging with JSON output."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if hasattr(record, 'operation_type'):
            log_entry['operation_type'] = record.operation_type

        # Communication session ID if present
        if hasattr(record, 'session_id'):
            log_entry['session_id'] = record.session_id

        if hasattr(record, 'stream_id'):
            log_entry['stream_id'] = record.stream_id

        if hasattr(record, 'context'):
            log_entry['context'] = record.context

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False)


class LoggingService:
    """
    Structured logging service with rotation and retention.

    Features:
    - Structured JSON logging with timestamps and operation types
    - One rotating log file per operation type, plus an error log
    - Console output for the main library logger
    - Context-aware logging with session and stream IDs
    """

    def __init__(self,
                 log_dir: str = "logs",
                 log_level: str = "INFO",
                 log_to_file: bool = True,
                 max_file_size: int = 10 * 1024 * 1024,  # 10MB
                 backup_count: int = 5,
                 retention_days: int = 30):
        """
        Initialize the logging service.

        Args:
            log_dir: Directory for log files
            log_level: Default log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_to_file: Write rotating log files in addition to the console
            max_file_size: Maximum size of each log file in bytes
            backup_count: Number of backup files to keep
            retention_days: Number of days to retain log files
        """
        self.log_dir = Path(log_dir)
        self.log_level = getattr(logging, log_level.upper())
        self.log_to_file = log_to_file
        self.max_file_size = max_file_size
        self.backup_count = backup_count
        self.retention_days = retention_days

        if self.log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self._setup_loggers()

    def _setup_loggers(self):
        """Set up structured loggers with rotation and formatting."""
        structured_formatter = StructuredFormatter()
        console_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        # Main library logger; module loggers propagate here
        self.app_logger = self._create_logger(
            'siprec_metadata',
            'application.log',
            structured_formatter,
            console_formatter
        )

        self.codec_logger = self._create_logger(
            'siprec_metadata.codec',
            'codec.log',
            structured_formatter
        )

        self.validation_logger = self._create_logger(
            'siprec_metadata.validation',
            'validation.log',
            structured_formatter
        )

        self.export_logger = self._create_logger(
            'siprec_metadata.export',
            'export.log',
            structured_formatter
        )

        self.system_logger = self._create_logger(
            'siprec_metadata.system',
            'system.log',
            structured_formatter
        )

        self.error_logger = self._create_logger(
            'siprec_metadata.errors',
            'errors.log',
            structured_formatter,
            min_level=logging.ERROR
        )

    def _create_logger(self,
                       name: str,
                       filename: str,
                       file_formatter: logging.Formatter,
                       console_formatter: Optional[logging.Formatter] = None,
                       min_level: Optional[int] = None) -> logging.Logger:
        """Create a logger with file and console handlers."""
        logger = logging.getLogger(name)
        logger.setLevel(min_level or self.log_level)

        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        if self.log_to_file:
            file_handler = logging.handlers.RotatingFileHandler(
                self.log_dir / filename,
                maxBytes=self.max_file_size,
                backupCount=self.backup_count,
                encoding='utf-8'
            )
            file_handler.setFormatter(file_formatter)
            file_handler.setLevel(min_level or self.log_level)
            logger.addHandler(file_handler)

        if console_formatter:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(console_formatter)
            console_handler.setLevel(self.log_level)
            logger.addHandler(console_handler)

        # Operation loggers must not double-log through the main logger
        logger.propagate = name == 'siprec_metadata'

        return logger

    def log_operation(self,
                      operation_type: OperationType,
                      message: str,
                      level: LogLevel = LogLevel.INFO,
                      session_id: Optional[str] = None,
                      stream_id: Optional[str] = None,
                      context: Optional[Dict[str, Any]] = None,
                      exc_info: Optional[bool] = None):
        """
        Log a structured operation with context.

        Args:
            operation_type: Type of operation being logged
            message: Log message
            level: Log level
            session_id: Communication session ID if applicable
            stream_id: Media stream ID if applicable
            context: Additional context dictionary
            exc_info: Include exception information
        """
        logger_map = {
            OperationType.ENCODE: self.codec_logger,
            OperationType.DECODE: self.codec_logger,
            OperationType.VALIDATION: self.validation_logger,
            OperationType.EXPORT: self.export_logger,
            OperationType.SYSTEM: self.system_logger,
            OperationType.CONFIGURATION: self.app_logger,
            OperationType.ERROR: self.error_logger
        }

        logger = logger_map.get(operation_type, self.app_logger)

        extra = {
            'operation_type': operation_type.value,
        }

        if session_id:
            extra['session_id'] = session_id

        if stream_id:
            extra['stream_id'] = stream_id

        if context:
            extra['context'] = context

        logger.log(level.value, message, extra=extra, exc_info=exc_info)

        # Also log errors to the error logger if not already an error logger
        if level in [LogLevel.ERROR, LogLevel.CRITICAL] and logger != self.error_logger:
            self.error_logger.log(level.value, message, extra=extra, exc_info=exc_info)

    def log_document_encoded(self, recording_session, size_bytes: int):
        """Log a successful document encode."""
        self.log_operation(
            OperationType.ENCODE,
            "Recording metadata encoded",
            LogLevel.INFO,
            context={
                'action': 'encode',
                'sessions': len(recording_session.comm_sessions),
                'participants': len(recording_session.participants),
                'streams': len(recording_session.media_streams),
                'size_bytes': size_bytes
            }
        )

    def log_document_decoded(self, recording_session, source: Optional[str] = None):
        """Log a successful document decode."""
        self.log_operation(
            OperationType.DECODE,
            "Recording metadata decoded",
            LogLevel.INFO,
            context={
                'action': 'decode',
                'source': source,
                'data_mode': recording_session.data_mode,
                'sessions': len(recording_session.comm_sessions),
                'participants': len(recording_session.participants),
                'streams': len(recording_session.media_streams)
            }
        )

    def log_decode_failure(self, error: str, source: Optional[str] = None):
        """Log a document that could not be decoded."""
        self.log_operation(
            OperationType.DECODE,
            f"Recording metadata decode failed: {error}",
            LogLevel.ERROR,
            context={'action': 'error', 'source': source, 'error': error}
        )

    def log_integrity_result(self, report, source: Optional[str] = None):
        """Log the outcome of an integrity check."""
        self.log_operation(
            OperationType.VALIDATION,
            "Integrity check passed" if report.is_valid else "Integrity check failed",
            LogLevel.INFO if report.is_valid else LogLevel.WARNING,
            context={
                'action': 'check',
                'source': source,
                'errors': len(report.errors),
                'warnings': len(report.warnings)
            }
        )

    def log_system_startup(self):
        """Log startup."""
        self.log_operation(
            OperationType.SYSTEM,
            "siprec-metadata started",
            LogLevel.INFO,
            context={'action': 'startup'}
        )

    def log_system_shutdown(self):
        """Log shutdown."""
        self.log_operation(
            OperationType.SYSTEM,
            "siprec-metadata shutting down",
            LogLevel.INFO,
            context={'action': 'shutdown'}
        )

    def cleanup_old_logs(self) -> int:
        """Remove log files older than the retention period; returns how many were removed."""
        removed = 0
        if not self.log_dir.exists():
            return removed

        retention_seconds = self.retention_days * 24 * 60 * 60
        cutoff = time.time() - retention_seconds

        for log_file in self.log_dir.glob("*.log*"):
            try:
                if log_file.stat().st_mtime < cutoff:
                    log_file.unlink()
                    removed += 1
                    self.log_operation(
                        OperationType.SYSTEM,
                        f"Cleaned up old log file: {log_file.name}",
                        LogLevel.INFO,
                        context={'action': 'cleanup', 'file': str(log_file)}
                    )
            except OSError as e:
                self.log_operation(
                    OperationType.SYSTEM,
                    f"Error during log cleanup: {str(e)}",
                    LogLevel.ERROR,
                    context={'action': 'cleanup_error', 'file': str(log_file)},
                    exc_info=True
                )
        return removed

    def get_recent_logs(self, operation_type: Optional[OperationType] = None,
                        limit: int = 100) -> list:
        """
        Get recent log entries, optionally filtered by operation type.

        Args:
            operation_type: Filter by operation type (None for all)
            limit: Maximum number of log entries to return

        Returns:
            List of log entries as dictionaries
        """
        logs = []

        if operation_type:
            log_files = {
                OperationType.ENCODE: ['codec.log'],
                OperationType.DECODE: ['codec.log'],
                OperationType.VALIDATION: ['validation.log'],
                OperationType.EXPORT: ['export.log'],
                OperationType.SYSTEM: ['system.log'],
                OperationType.ERROR: ['errors.log']
            }.get(operation_type, ['application.log'])
        else:
            log_files = ['application.log', 'codec.log', 'validation.log',
                         'export.log', 'system.log']

        for log_file in log_files:
            file_path = self.log_dir / log_file
            if not file_path.exists():
                continue
            with open(file_path, 'r', encoding='utf-8') as f:
                lines = f.readlines()
            for line in lines[-limit:]:
                line = line.strip()
                if not line:
                    continue
                try:
                    log_entry = json.loads(line)
                except json.JSONDecodeError:
                    # Skip malformed log entries
                    continue
                # errors.log collects errors of every operation type
                if operation_type not in (None, OperationType.ERROR) \
                        and log_entry.get('operation_type') != operation_type.value:
                    continue
                logs.append(log_entry)

        logs.sort(key=lambda x: x.get('timestamp', ''), reverse=True)
        return logs[:limit]


# Global logging service instance
_logging_service: Optional[LoggingService] = None


def get_logging_service() -> LoggingService:
    """Get the global logging service instance."""
    global _logging_service
    if _logging_service is None:
        log_dir = os.getenv('SIPREC_LOG_DIR', 'logs')
        log_level = os.getenv('SIPREC_LOG_LEVEL', 'INFO')
        log_to_file = os.getenv('SIPREC_LOG_TO_FILE', 'false').lower() == 'true'
        _logging_service = LoggingService(log_dir=log_dir, log_level=log_level, log_to_file=log_to_file)
    return _logging_service


def init_logging_service(log_dir: str = "logs",
                         log_level: str = "INFO",
                         log_to_file: bool = True) -> LoggingService:
    """Initialize the global logging service."""
    global _logging_service
    _logging_service = LoggingService(log_dir=log_dir, log_level=log_level, log_to_file=log_to_file)
    return _logging_service
