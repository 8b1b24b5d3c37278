import logging
import sys

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# pdfminer logs every parsed object at DEBUG; keep third-party chatter out of ours
_QUIET_LOGGERS = ("pdfminer", "PIL", "httpx", "openai")


class Log:
    """Process-wide logging facade for the ingestion pipeline."""

    _logger: logging.Logger = logging.getLogger("docchat")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Set the level and attach a stderr handler (stdout is left to the CLI output)."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter(_LOG_FORMAT))
            cls._logger.addHandler(handler)
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)


def preview(text: str, limit: int = 100) -> str:
    """Shorten *text* for log lines: the first *limit* chars followed by '...'."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
