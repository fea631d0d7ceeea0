from .settings import LOG_LEVELS, Settings, settings

__all__ = ["LOG_LEVELS", "Settings", "settings"]
