# agent_sandbox/logging_utils.py
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

NOISY_LOGGERS = ("litellm", "LiteLLM", "httpx", "httpcore")


def configure_logging(debug: bool = False, console: Optional[Console] = None):
    """Route log records through rich. WARNING by default, DEBUG with --debug."""
    level = logging.DEBUG if debug else logging.WARNING
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=debug,
        rich_tracebacks=True,
        markup=False,
    )
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler], force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
