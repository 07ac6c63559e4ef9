import logging
import sys

# Library use: stay silent unless the application configures logging.
_mwlink_root_logger = logging.getLogger("mwlink")

if not _mwlink_root_logger.hasHandlers():
    _mwlink_root_logger.addHandler(logging.NullHandler())

CONSOLE_LOG_FORMAT = "%(levelname)s: %(message)s"
_logging_configured_by_tool = False

DEFAULT_SILENCED_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "hpack": logging.WARNING,
}


def setup_console_logging(
    level=logging.WARNING,
    stream=sys.stderr,
    log_format=CONSOLE_LOG_FORMAT,
    silence_loggers=None,
):
    """
    Configures console logging for applications embedding mwlink.

    Sets up a StreamHandler for the 'mwlink' package logger and raises the
    level of chatty HTTP loggers.

    Args:
        level: The minimum logging level for the 'mwlink' logger, as int or name.
        stream: The output stream (default: sys.stderr).
        log_format: The format string for log messages.
        silence_loggers (dict): Logger names mapped to their minimum level.
            Defaults to DEFAULT_SILENCED_LOGGERS.
    """
    global _logging_configured_by_tool
    silence_loggers = silence_loggers or DEFAULT_SILENCED_LOGGERS
    if _logging_configured_by_tool:
        _mwlink_root_logger.debug("Console logging already configured. Skipping setup.")
        return

    package_logger = _mwlink_root_logger

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
            package_logger.warning("Invalid mwlink log level string provided. Defaulting to WARNING.")

    package_logger.setLevel(level)

    for handler in package_logger.handlers[:]:
        if isinstance(handler, logging.NullHandler):
            package_logger.removeHandler(handler)

    has_stream_handler = any(
        isinstance(h, logging.StreamHandler) and h.stream == stream for h in package_logger.handlers
    )
    if not has_stream_handler:
        console_handler = logging.StreamHandler(stream)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(log_format))
        package_logger.addHandler(console_handler)

    package_logger.propagate = False

    for logger_name, silenced_level in silence_loggers.items():
        logger_to_silence = logging.getLogger(logger_name)
        effective_silence_level = max(silenced_level, level)
        current_level = logger_to_silence.getEffectiveLevel()
        if current_level < effective_silence_level or current_level == logging.NOTSET:
            logger_to_silence.setLevel(effective_silence_level)

    _logging_configured_by_tool = True
    package_logger.debug(
        f"mwlink console logging configured to level {logging.getLevelName(level)}."
    )
