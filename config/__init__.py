"""Configuration package for the interview coaching engine."""
from .randomness import resolve_rng
from .registry import FEEDBACK_KEY, OPENING_KEY, bind_model, get_model, unbind_model
from .routes import AppConfig, LlmRoute, load_config
from .settings import Settings, settings

__all__ = [
    "AppConfig",
    "LlmRoute",
    "load_config",
    "FEEDBACK_KEY",
    "OPENING_KEY",
    "bind_model",
    "get_model",
    "unbind_model",
    "resolve_rng",
    "Settings",
    "settings",
]
