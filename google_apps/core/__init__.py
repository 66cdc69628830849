"""
Core modules - Google API clients built on google-ctx credentials
"""
from .base import BaseGoogleAPIClient
from .calendar import GoogleCalendarClient
from .drive import GoogleDriveClient
from .sheets import GoogleSheetsClient
from .client_factory import ClientFactory

__all__ = [
    'BaseGoogleAPIClient',
    'GoogleCalendarClient',
    'GoogleDriveClient',
    'GoogleSheetsClient',
    'ClientFactory',
]
