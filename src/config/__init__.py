"""Configuration package -- ``Settings`` (env / .env) and ``load_config`` (YAML merge)."""

from src.config.loader import load_config
from src.config.settings import Settings

__all__ = ["Settings", "load_config"]
