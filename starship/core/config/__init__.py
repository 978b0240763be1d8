"""
Static configuration for Starship Commander.

All values are loaded from environment variables (with `.env` support) by
`Config.load()` at import time.

    from starship.core.config import Config

    if Config.is_production():
        ...
"""

from starship.core.config.config import Config, Environment

__all__ = ["Config", "Environment"]
