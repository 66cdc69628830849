"""
Factory for Google API clients sharing one credential

Usage:
    factory = ClientFactory(load_config('config/google-creds.yaml'))
    calendar = factory.create_calendar_client()
    drive = factory.create_client('drive')
"""
from typing import Union

from google.auth.credentials import Credentials as BaseCredentials

from ..auth.transport import http_for_context
from ..utils.config import ContextLike
from ..utils.logger import setup_logger
from .base import BaseGoogleAPIClient
from .calendar.google_client import GoogleCalendarClient
from .drive.google_client import GoogleDriveClient
from .sheets.google_client import GoogleSheetsClient

logger = setup_logger(__name__)


class ClientFactory:
    """
    Creates Calendar, Drive and Sheets clients over a single authorized
    transport, so a token refresh seen by one client is seen by all.
    """

    CLIENT_TYPES = {
        'calendar': GoogleCalendarClient,
        'drive': GoogleDriveClient,
        'sheets': GoogleSheetsClient,
    }

    def __init__(self, google_ctx: Union[ContextLike, BaseCredentials]):
        """
        Args:
            google_ctx: google-ctx configuration map, or a ready credential
        """
        self.google_ctx = google_ctx
        self.http = http_for_context(google_ctx)

    @property
    def credentials(self) -> BaseCredentials:
        return self.http.credentials

    def create_calendar_client(self) -> GoogleCalendarClient:
        return GoogleCalendarClient(self.google_ctx, http=self.http)

    def create_drive_client(self) -> GoogleDriveClient:
        return GoogleDriveClient(self.google_ctx, http=self.http)

    def create_sheets_client(self) -> GoogleSheetsClient:
        return GoogleSheetsClient(self.google_ctx, http=self.http)

    def create_client(self, client_type: str) -> BaseGoogleAPIClient:
        """
        Create a client by name

        Raises:
            ValueError: If client_type is unknown
        """
        client_class = self.CLIENT_TYPES.get(client_type.lower())
        if client_class is None:
            raise ValueError(
                f"Unknown client type: {client_type}. "
                f"Valid types: {', '.join(sorted(self.CLIENT_TYPES))}"
            )
        logger.debug("Creating client", client_type=client_type.lower())
        return client_class(self.google_ctx, http=self.http)
