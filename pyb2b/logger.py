# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging configuration for pyb2b

Every module logs through ``logging.getLogger(__name__)`` so the whole
package hangs below the ``pyb2b`` logger. The helpers here attach handlers
to that tree and adjust per-module levels, e.g. to trace a single stream
reader while keeping the correction engine quiet.
"""

import copy
import logging
import sys
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, Optional

ROOT_LOGGER = "pyb2b"


class LogLevel(Enum):
    """Log levels for the package"""
    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


logging.addLevelName(LogLevel.TRACE.value, "TRACE")


def _logger_trace(self, message, *args, **kwargs):
    if self.isEnabledFor(LogLevel.TRACE.value):
        self._log(LogLevel.TRACE.value, message, args, **kwargs)


logging.Logger.trace = _logger_trace


def _level_value(level: str) -> int:
    try:
        return LogLevel[level.upper()].value
    except KeyError:
        raise ValueError(f"Unknown log level: {level}") from None


class ColoredFormatter(logging.Formatter):
    """Console formatter coloring the level name"""

    COLORS = {
        'TRACE': '\033[36m',     # Cyan
        'DEBUG': '\033[34m',     # Blue
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        # other handlers share the record
        record = copy.copy(record)
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logger(name: str = ROOT_LOGGER,
                 level: str = "INFO",
                 log_file: Optional[str] = None,
                 console: bool = True) -> logging.Logger:
    """
    Attach console and/or file handlers to a logger

    Parameters:
    -----------
    name : str
        Logger name, ``pyb2b`` or a module path below it
    level : str
        Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_file : Optional[str]
        Log file path (if None, no file logging)
    console : bool
        Enable console output

    Returns:
    --------
    logging.Logger
        Configured logger
    """
    value = _level_value(level)
    logger = logging.getLogger(name)
    logger.setLevel(value)
    logger.handlers = []

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(value)
        console_handler.setFormatter(ColoredFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        ))
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(value)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    # a configured sub-logger must not print twice through the root tree
    if name != ROOT_LOGGER and logger.handlers:
        logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get logger by name"""
    return logging.getLogger(name)


class LogContext:
    """Context manager for temporary log level change"""

    def __init__(self, logger: logging.Logger, level: str):
        self.logger = logger
        self.new_level = _level_value(level)
        self.old_level = None

    def __enter__(self):
        self.old_level = self.logger.level
        self.logger.setLevel(self.new_level)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.setLevel(self.old_level)


@dataclass
class LoggerConfig:
    """
    Package and per-module log levels

    ``module_levels`` maps a module logger (``pyb2b.ssr.b2b_reader``) to its
    own level; every other module follows ``default_level`` through the
    ``pyb2b`` logger.
    """
    default_level: str = "INFO"
    log_file: Optional[str] = None
    console: bool = True
    module_levels: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        for level in [self.default_level, *self.module_levels.values()]:
            _level_value(level)

    @classmethod
    def from_dict(cls, config: dict) -> "LoggerConfig":
        """Build a configuration, unknown keys are rejected

        Example config:
        {
            'default_level': 'INFO',
            'log_file': 'b2b.log',
            'module_levels': {'pyb2b.ssr.b2b_reader': 'TRACE'},
        }
        """
        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            raise ValueError(f"Unknown logger option(s): {', '.join(sorted(unknown))}")
        return cls(**config)

    def level_for(self, module_name: str) -> str:
        return self.module_levels.get(module_name, self.default_level)

    def apply(self) -> logging.Logger:
        """Configure the package logger, then each listed module logger"""
        root = setup_logger(ROOT_LOGGER, self.default_level, self.log_file, self.console)
        for module, level in self.module_levels.items():
            setup_logger(module, level, self.log_file, self.console)
        return root


def setup_logger_from_config(config: dict) -> LoggerConfig:
    """Apply a ``LoggerConfig.from_dict`` mapping and return the configuration"""
    config = LoggerConfig.from_dict(config)
    config.apply()
    return config
