"""
Authentication module - OAuth flow, credential construction and transport
"""
from .credentials import (
    get_google_secret,
    get_auth_map,
    get_token_response,
    credential_with_scopes,
    credential_from_json_stream,
    credential_from_json,
    default_credential,
    build_credential,
    refresh_credential,
)
from .transport import build_http, http_for_context

__all__ = [
    'get_google_secret',
    'get_auth_map',
    'get_token_response',
    'credential_with_scopes',
    'credential_from_json_stream',
    'credential_from_json',
    'default_credential',
    'build_credential',
    'refresh_credential',
    'build_http',
    'http_for_context',
]
