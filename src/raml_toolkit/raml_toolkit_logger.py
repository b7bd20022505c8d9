"""
Logger for raml_toolkit.

Every record is written as a single JSON line so that warnings about
assets that could not be fetched automatically carry their remediation
hint in a machine readable way.
"""

import inspect
import logging
from datetime import datetime
from typing import Protocol

from pydantic import BaseModel


class LogLine(BaseModel):
    """
    Represents a line in the raml_toolkit log
    """

    time: str
    level: str
    caller_file: str
    caller_name: str
    caller_line: int
    message: str
    hint: str = ""


class WarningSink(Protocol):
    """Anything that accepts a warning plus a manual remediation hint."""

    def warn(self, message: str, hint: str) -> None:
        ...


class RamlToolLogger:
    """
    Logger class
    """

    def __init__(self, name: str = "raml_toolkit") -> None:
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

    def log(self, debug_message: str, level: int, hint: str = "") -> None:
        """
        Log the debug message with the caller location attached
        """
        debug_message = debug_message.replace("\n", " ")

        caller = inspect.stack()[1]
        if caller.function == "warn":
            caller = inspect.stack()[2]

        self.logger.log(
            level=level,
            msg=LogLine(
                time=str(datetime.now()),
                level=logging.getLevelName(level),
                caller_file=caller.filename,
                caller_name=caller.function,
                caller_line=caller.lineno,
                message=debug_message,
                hint=hint,
            ).model_dump_json(),
        )

    def warn(self, message: str, hint: str) -> None:
        self.log(message, logging.WARNING, hint)
