"""
google_apps - convenience layer over Google's OAuth2, Calendar, Drive and Sheets SDKs
"""
from .auth import (
    build_credential,
    credential_from_json,
    credential_from_json_stream,
    credential_with_scopes,
    default_credential,
    get_auth_map,
    get_google_secret,
    get_token_response,
)
from .core import ClientFactory, GoogleCalendarClient, GoogleDriveClient, GoogleSheetsClient
from .exceptions import AuthorizationError, CredentialError, GoogleAppsError
from .utils import GoogleContext, load_config

__version__ = "0.5.0"

__all__ = [
    'build_credential',
    'credential_from_json',
    'credential_from_json_stream',
    'credential_with_scopes',
    'default_credential',
    'get_auth_map',
    'get_google_secret',
    'get_token_response',
    'ClientFactory',
    'GoogleCalendarClient',
    'GoogleDriveClient',
    'GoogleSheetsClient',
    'AuthorizationError',
    'CredentialError',
    'GoogleAppsError',
    'GoogleContext',
    'load_config',
]
