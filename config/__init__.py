"""Configuration package for the interview practice service."""
from .app_config import AppConfig, LlmRoute, SamplingSettings, load_config, resolve_route
from .settings import Settings, settings

__all__ = [
    "AppConfig",
    "LlmRoute",
    "SamplingSettings",
    "load_config",
    "resolve_route",
    "Settings",
    "settings",
]
