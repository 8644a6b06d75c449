"""Logging formatters and filters for stream routing."""

import logging


class BrowserFormatter(logging.Formatter):
    """Logging formatter that prepends the browser label from the extra parameter."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with browser prefix if present.

        Parameters
        ----------
        record : logging.LogRecord
            Log record to format

        Returns
        -------
        str
            Formatted log message with optional browser prefix
        """
        msg = super().format(record)
        browser = getattr(record, "browser", None)

        if browser:
            return f"[{browser}] {msg}"

        return msg


class StreamRoutingFilter(logging.Filter):
    """Route records to stdout or stderr by level.

    Parameters
    ----------
    stream : str
        Either ``"stdout"`` (below WARNING) or ``"stderr"`` (WARNING and above)
    """

    def __init__(self, stream: str) -> None:
        super().__init__()
        if stream not in ("stdout", "stderr"):
            raise ValueError(f"stream must be 'stdout' or 'stderr', got {stream!r}")
        self.stream = stream

    def filter(self, record: logging.LogRecord) -> bool:
        if self.stream == "stderr":
            return record.levelno >= logging.WARNING
        return record.levelno < logging.WARNING
