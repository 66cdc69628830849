"""
Utility modules - configuration and logging

This module should NEVER import from other google_apps modules (auth, core)
to keep the import hierarchy acyclic.
"""
from .config import (
    AuthMap,
    ConfigDefaults,
    GoogleContext,
    as_context,
    load_config,
    save_auth_map,
    get_application_credentials_path,
)
from .logger import setup_logger

__all__ = [
    'AuthMap',
    'ConfigDefaults',
    'GoogleContext',
    'as_context',
    'load_config',
    'save_auth_map',
    'get_application_credentials_path',
    'setup_logger',
]
