import logging
import sys

# Centralized logger name
LOGGER_NAME = "ShaderNodes"

def get_logger() -> logging.Logger:
    """Get the standard logger for Shader Nodes."""
    return logging.getLogger(LOGGER_NAME)

def setup_logger(level=logging.INFO):
    """
    Configure the Shader Nodes logger.

    Module loggers (``shader_nodes.*``) are separate from the named logger,
    so the handler is attached to both.

    Args:
        level: Logging level or level name (default: INFO)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    formatter = logging.Formatter(f'[{LOGGER_NAME}] [%(levelname)s] %(message)s')

    for name in (LOGGER_NAME, 'shader_nodes'):
        logger = logging.getLogger(name)
        logger.setLevel(level)

        # Remove existing handlers to prevent duplicates
        if logger.handlers:
            logger.handlers.clear()

        ch = logging.StreamHandler(sys.stdout)
        ch.setLevel(level)
        ch.setFormatter(formatter)
        logger.addHandler(ch)

    return get_logger()
