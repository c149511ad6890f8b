"""
Gatekeep - Core Package
=======================

Configuration, logging, constants and the status server.

DESIGN:
    The logger is a module-level instance shared by every module.
    Configuration is NOT global: load_config() builds one frozen Config
    at startup and it is handed to the bot and services explicitly.
"""

# =============================================================================
# Core Imports
# =============================================================================

from .config import (
    Config,
    ConfigValidationError,
    EmbedColors,
    load_config,
    log_config,
)

from .logger import logger, TreeLogger

from .health import StatusServer


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    # Config
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "load_config",
    "log_config",
    # Logger
    "logger",
    "TreeLogger",
    # Status
    "StatusServer",
]
