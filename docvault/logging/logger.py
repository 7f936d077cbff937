import logging
import sys


class Log:
    """Centralized logging with structured format.

    Keyword arguments are appended to the message as ``key=value`` pairs so
    that per-document and per-job context survives plain-text log shipping.
    """

    _logger: logging.Logger = logging.getLogger("docvault")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **context: object) -> None:
        cls._emit(logging.INFO, message, context)

    @classmethod
    def error(cls, message: str, **context: object) -> None:
        cls._emit(logging.ERROR, message, context)

    @classmethod
    def warning(cls, message: str, **context: object) -> None:
        cls._emit(logging.WARNING, message, context)

    @classmethod
    def debug(cls, message: str, **context: object) -> None:
        cls._emit(logging.DEBUG, message, context)

    @classmethod
    def _emit(cls, level: int, message: str, context: dict[str, object]) -> None:
        if not cls._logger.isEnabledFor(level):
            return
        cls._logger.log(level, cls.render(message, context))

    @staticmethod
    def render(message: str, context: dict[str, object]) -> str:
        """Append context as sorted key=value pairs."""
        if not context:
            return message
        pairs = " ".join(f"{key}={context[key]!r}" for key in sorted(context))
        return f"{message} [{pairs}]"
