"""
Configuration package for daylog.
Provides the validated LogConfig model and the environment loader.
"""

from . import loader
from .loader import LogConfig, load_config

__all__ = [
    'loader',
    'LogConfig',
    'load_config',
]
