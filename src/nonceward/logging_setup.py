"""Console logging with Rich."""

import logging

from rich.console import Console
from rich.logging import RichHandler

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Route the root logger through a RichHandler on stderr.

    Safe to call more than once; later calls only change the level.
    """
    global _configured

    root = logging.getLogger()
    root.setLevel(level.upper())
    if _configured:
        return

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)

    # uvicorn installs its own handlers; keep its access log quiet
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    _configured = True
