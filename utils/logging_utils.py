import logging
import structlog
from structlog.stdlib import add_log_level, add_logger_name


def parse_level(level: int | str) -> int:
    """Translate ``"debug"``/``"INFO"``/``20`` style values into a logging level."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(level: int | str = logging.INFO, json: bool = False) -> None:
    """Configure structlog and standard logging with the given level.

    ``json=True`` swaps the coloured console renderer for one JSON object per
    line, which is easier to grep when a long headless run is piped to a file.
    """
    level = parse_level(level)
    logging.basicConfig(level=level, format="%(message)s")
    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_logger_name,
            add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=False),
            structlog.processors.format_exc_info if json else structlog.processors.StackInfoRenderer(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
