"""
Logging setup for the archiedoc command line.

Modules log through `get_logger(__name__)`. The CLI calls LoggingManager once
to attach a stderr handler, optionally a file handler, and optionally swap
plain text output for one JSON object per line.
"""

import logging
import sys
import json
from typing import Optional

PLAIN_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class JsonFormatter(logging.Formatter):
    """
    Custom formatter to output logs in JSON format.
    """
    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record['exc_info'] = self.formatException(record.exc_info)
        if hasattr(record, 'details'):
            log_record['details'] = record.details
        return json.dumps(log_record, ensure_ascii=False)


class LoggingManager:
    """
    Configures the `archiedoc` logger hierarchy.
    """
    _instance = None

    def __new__(cls, *args, **kwargs):
        if not cls._instance:
            cls._instance = super(LoggingManager, cls).__new__(cls)
        return cls._instance

    def __init__(self, log_level: str = "INFO", log_file: Optional[str] = None, json_format: bool = False):
        if hasattr(self, '_initialized') and self._initialized:
            return

        self.log_level = log_level.upper()
        self.log_file = log_file
        self.json_format = json_format
        self.logger = logging.getLogger("archiedoc")
        self.logger.setLevel(self.log_level)
        self.logger.propagate = False  # root has a basicConfig handler

        if self.logger.hasHandlers():
            self.logger.handlers.clear()

        formatter = JsonFormatter() if json_format else logging.Formatter(PLAIN_FORMAT)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if self.log_file:
            file_handler = logging.FileHandler(self.log_file)
            file_handler.setLevel(self.log_level)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

        # Module loggers pin themselves to INFO in get_logger
        for name, child in logging.Logger.manager.loggerDict.items():
            if name.startswith("archiedoc.") and isinstance(child, logging.Logger):
                child.setLevel(self.log_level)

        self._initialized = True

    @classmethod
    def reset(cls):
        """Drop the configured instance so the next call reconfigures logging."""
        if cls._instance is not None:
            for handler in cls._instance.logger.handlers:
                handler.close()
            cls._instance.logger.handlers.clear()
            cls._instance.logger.propagate = True
            cls._instance._initialized = False
        cls._instance = None
