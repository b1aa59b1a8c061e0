"""
JSON configuration handling.
"""

from .config_manager import ConfigManager, SEED_ENV_VAR

__all__ = ['ConfigManager', 'SEED_ENV_VAR']
