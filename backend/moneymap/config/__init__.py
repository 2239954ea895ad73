"""Configuration package for the MoneyMap service."""

from .settings import AppSettings, get_settings

__all__ = ["AppSettings", "get_settings"]
