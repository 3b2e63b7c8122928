"""
Centralized logging using Loguru with context-aware verbosity.

This module provides a LOG() function that respects the current caller's
verbosity level without requiring explicit state passing through every
encoder, scanner and resolver call.

Features:
- Context-aware logging tied to ProgramState (or any object with verbosity)
- Rich formatting with timestamps, colors, and metadata
- Safe across threads and asyncio tasks using contextvars, so documents
  processed concurrently never see each other's verbosity

Usage:
    from hidemark.lib.log import LOG, state_connectToLogger

    # At start of a pipeline function:
    state_connectToLogger(state)

    # Anywhere in that context:
    LOG("Encoded 3 hidden regions", level=1)
    LOG("Dropped attribute pair 'a:b'", level=2)
    LOG("Scanner SCANNING -> COLLECTING", level=3)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

# Configure loguru with hidemark-specific format
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="TRACE")

# Verbosity level -> loguru level name
_levels = {1: "INFO", 2: "DEBUG", 3: "TRACE"}


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Call this at the start of each pipeline function to make the state's
    verbosity setting available to LOG() calls throughout that context.
    Passing None disconnects the context and silences LOG().

    Args:
        state: ProgramState instance (or any object) with verbosity attribute
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Verbosity levels:
        1 = Normal output (default)
        2 = Verbose (-v)
        3 = Debug (-vv or higher)

    Messages are emitted at loguru level INFO, DEBUG or TRACE matching
    the level they were logged at.
    """
    state = _program_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).log(_levels.get(level, "TRACE"), message, **kwargs)
