"""Console and JSON-lines logging with per-operation context fields."""

import logging
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_LOG_DIR = Path('.neutron/logs')

# Record attributes promoted to top-level keys in the JSON log
STRUCTURED_FIELDS = ('resource_id', 'resource_type', 'operation', 'region', 'duration')

# SDK and transport loggers that are only useful when debugging the SDK
QUIET_LOGGERS = ('openstack', 'keystoneauth', 'stevedore', 'urllib3')

LEVEL_COLORS = {
    'DEBUG': '\033[36m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
    'CRITICAL': '\033[35m',
}
RESET = '\033[0m'


def structured_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Context fields carried by a record, skipping unset ones."""
    fields = {}
    for name in STRUCTURED_FIELDS:
        value = getattr(record, name, None)
        if value is not None:
            fields[name] = value
    return fields


class JSONFormatter(logging.Formatter):
    """One JSON object per line, stamped with the record's creation time."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        entry.update(structured_fields(record))

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Coloured single-line output.

    The resource address prefixes the message, and a timed operation is
    suffixed with its duration, e.g. ``[openstack_networking_subnetpool_v2.a] Applied create (2.4s)``.
    """

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        fields = structured_fields(record)

        level = f"{record.levelname:8}"
        if self.use_color:
            level = f"{LEVEL_COLORS.get(record.levelname, '')}{level}{RESET}"

        message = record.getMessage()
        if 'resource_id' in fields:
            message = f"[{fields['resource_id']}] {message}"
        if isinstance(fields.get('duration'), (int, float)):
            message = f"{message} ({fields['duration']:.1f}s)"

        timestamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')
        line = f"{timestamp} {level} {message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(log_level: str = 'info', log_dir: Optional[Path] = None) -> Path:
    """Route records to the console at ``log_level`` and to a daily JSON-lines file.

    The file always receives DEBUG records.

    Args:
        log_level: Console level (debug, info, warning, error)
        log_dir: Directory for the log files (default: .neutron/logs)

    Returns:
        Path of the JSON-lines log file
    """
    log_dir = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"neutron-{datetime.now(timezone.utc):%Y%m%d}.jsonl"

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, log_level.upper()))
    console_handler.setFormatter(ConsoleFormatter(use_color=sys.stdout.isatty()))

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(JSONFormatter())

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file


def get_logger(name: str) -> logging.Logger:
    """Module logger; call with ``__name__``."""
    return logging.getLogger(name)


class LogContext:
    """Attach context fields to every record created inside the block.

    Contexts nest: an inner block sees the outer block's fields unless it
    overrides them.
    """

    def __init__(self, logger: logging.Logger, **fields: Any):
        self.logger = logger
        self.fields = {k: v for k, v in fields.items() if v is not None}
        self._previous_factory = None

    def __enter__(self):
        previous = logging.getLogRecordFactory()
        fields = self.fields

        def record_factory(*args, **kwargs):
            record = previous(*args, **kwargs)
            for key, value in fields.items():
                setattr(record, key, value)
            return record

        self._previous_factory = previous
        logging.setLogRecordFactory(record_factory)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._previous_factory is not None:
            logging.setLogRecordFactory(self._previous_factory)
            self._previous_factory = None
