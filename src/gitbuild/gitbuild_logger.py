"""
Logger for the gitbuild framework.
"""

import inspect
import logging
from typing import Optional

LOGGER_NAME = "gitbuild"


class GitbuildLogger:
    """
    Logger class used by every gitbuild component.

    Wraps the standard logging module and attaches the calling module and
    function to each record so they can be shown with a verbose formatter.
    """

    def __init__(self, name: str = LOGGER_NAME) -> None:
        self.logger = logging.getLogger(name)

    def log(self, message: str, level: int) -> None:
        """
        Log the message at the given level, recording where it came from.
        """
        if not self.logger.isEnabledFor(level):
            return
        caller = inspect.currentframe().f_back
        self.logger.log(
            level=level,
            msg=message,
            extra={
                "caller_file": caller.f_code.co_filename.replace("\\", "/").split("/")[-1],
                "caller_name": caller.f_code.co_name,
            },
        )

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def configure_console(self, level: int = logging.INFO, fmt: Optional[str] = None) -> None:
        """
        Attach a plain console handler, used by the command line entry point.

        Calling this more than once does not stack handlers.
        """
        if not any(getattr(h, "_gitbuild_console", False) for h in self.logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(fmt or "%(message)s"))
            handler._gitbuild_console = True
            self.logger.addHandler(handler)
        self.logger.setLevel(level)
