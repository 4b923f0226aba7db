"""Configuration adapters."""

from commute_optimizer.adapters.config.app_config import AppConfig

__all__ = ["AppConfig"]
