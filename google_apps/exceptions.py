"""
Core Exceptions
"""

class GoogleAppsError(Exception):
    """Base exception for google_apps"""
    pass

class CredentialError(GoogleAppsError):
    """Raised when a credential cannot be built from the given configuration"""
    pass

class AuthorizationError(GoogleAppsError):
    """Raised when the interactive authorization flow yields no code, URL or token"""
    pass
