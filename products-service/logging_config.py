import sys

from loguru import logger


def setup_logging(level: str = "INFO", sink: str = "logs.json", to_stderr: bool = False) -> None:
    """Install the JSON file sink (and optionally stderr) on the loguru logger.

    Any previously installed handler is removed first, so calling this
    again simply replaces the configuration.
    """
    logger.remove()  # Supprime le handler par défaut
    logger.add(
        sink=sink,
        format="{time:YYYY-MM-DDTHH:mm:ss.SSSZ} | {level} | {message} | {extra}",
        level=level.upper(),
        serialize=True,  # Format JSON
        rotation="1 day",  # Rotation quotidienne
    )
    if to_stderr:
        logger.add(sys.stderr, level=level.upper())
