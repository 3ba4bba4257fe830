"""
Process-wide facade installation.
"""

from __future__ import annotations

from typing import Any

from .config import LoggingSettings
from .facade import LogFacade

# =============================================================================
# Global State
# =============================================================================

_facade: LogFacade | None = None


def get_logger() -> LogFacade:
    """Return the installed facade, configuring one from the environment on first use."""
    if _facade is None:
        return configure_logging()
    return _facade


def configure_logging(settings: LoggingSettings | None = None, **overrides: Any) -> LogFacade:
    """
    Build and install the process-wide facade.

    Args:
        settings: Explicit options; defaults are read from the environment
        **overrides: Field overrides applied on top of ``settings``
        (console, filename, raw_json, symlink, log_root, ...)

    The previously installed facade is not closed here; call
    ``shutdown_logging()`` first when replacing a configured facade.
    """
    global _facade

    base = settings or LoggingSettings()
    if overrides:
        base = LoggingSettings(**{**base.model_dump(), **overrides})

    facade = LogFacade(base)

    if base.capture_stdlib:
        from .interceptors import intercept_stdlib

        intercept_stdlib(facade)

    _facade = facade
    return facade


async def shutdown_logging() -> None:
    """Drain and close the installed facade."""
    global _facade

    facade, _facade = _facade, None
    if facade is not None:
        await facade.close()
