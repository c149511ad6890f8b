"""
Gatekeep - Utils Package
========================

Helpers shared by the services and cogs.

Available Utilities:
    TaskScheduler: delayed actions with cancellable handles
    InteractionReplier: at-most-one reply per interaction
"""

# =============================================================================
# Utility Imports
# =============================================================================

from .async_utils import (
    DelayedTask,
    TaskScheduler,
    safe_async_operation,
)
from .interaction import InteractionReplier


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    # Async
    "DelayedTask",
    "TaskScheduler",
    "safe_async_operation",
    # Interaction
    "InteractionReplier",
]
