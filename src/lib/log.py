"""
Verbosity-gated logging for the injection pipeline

LOG() writes through a single Loguru sink on stderr, but only when the
ProgramState bound to the current context asks for that much detail.
The injector core logs through LOG() too; used as a library (no state
bound) it stays silent.

Verbosity comes from the CLI's -v count, which starts at 1:

    fileinjector in/ out/ --inputFile a.html        1  run summary
    fileinjector in/ out/ --inputFile a.html -v     2  + every injected file
    fileinjector in/ out/ --inputFile a.html -vv    3  + every match and fragment count

Usage:
    from fileinjector.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)
    LOG("Unfolding index.html", level=1)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# ProgramState of the run in progress, if any
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{module}.{function}</cyan>:<cyan>{line}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Bind a ProgramState to the logging context.

    Args:
        state: Anything with a verbosity attribute (normally ProgramState)
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if the bound state's verbosity reaches level.

    Args:
        message: Log message to display
        level: 1 = summary, 2 = per injected file (-v), 3 = per match (-vv)
        **kwargs: Additional loguru metadata

    Example:
        LOG("Wrote dist/page.html", level=1)
        LOG("Injecting partials/nav.html into index.html:2", level=2)
        LOG("Match '$file(nav.html)' at index.html:2:0", level=3)
    """
    state = _program_state.get()

    if state and getattr(state, 'verbosity', 0) >= level:
        # depth=1 reports the caller's module/function/line
        logger.opt(depth=1).debug(message, **kwargs)
