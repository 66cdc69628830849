"""
Base Google API Client
Provides common functionality for all Google API clients (Calendar, Drive, Sheets)
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Union

import google_auth_httplib2
from google.auth.credentials import Credentials as BaseCredentials
from google.oauth2.credentials import Credentials as UserCredentials

from ...auth.credentials import refresh_credential
from ...auth.transport import http_for_context
from ...utils.config import ContextLike
from ...utils.logger import setup_logger

logger = setup_logger(__name__)


class BaseGoogleAPIClient(ABC):
    """
    Abstract base class for all Google API clients

    Provides common functionality:
    - Credential construction from a google-ctx or a ready credential
    - Authorized transport honouring the configured timeouts
    - Service initialization
    - Scope validation
    - Page-following for list calls

    Subclasses must implement:
    - _build_service(): Build the specific Google API service
    - _get_required_scopes(): Return required OAuth scopes
    - _get_service_name(): Return the service name for logging
    """

    def __init__(
        self,
        google_ctx: Union[ContextLike, BaseCredentials],
        http: Optional[google_auth_httplib2.AuthorizedHttp] = None
    ):
        """
        Initialize Google API client

        Args:
            google_ctx: google-ctx configuration map, or a credential to use as is
            http: Authorized transport (built from google_ctx if None)
        """
        self.http = http or http_for_context(google_ctx)
        self.credentials = self.http.credentials
        self.service = self._build_service()
        logger.info(f"[OK] {self._get_service_name()} API service initialized")

    @abstractmethod
    def _build_service(self) -> Any:
        """
        Build the specific Google API service

        Example:
            return build('drive', 'v3', http=self.http, cache_discovery=False)
        """
        pass

    @abstractmethod
    def _get_required_scopes(self) -> List[str]:
        """Get required OAuth scopes for this service"""
        pass

    @abstractmethod
    def _get_service_name(self) -> str:
        """Get the service name for logging"""
        pass

    def is_available(self) -> bool:
        """
        Check if service is available and has proper scopes

        Credentials that do not report scopes are assumed to be sufficient.
        """
        if self.service is None:
            return False

        scopes = getattr(self.credentials, 'scopes', None)
        if scopes:
            required_scopes = self._get_required_scopes()
            if not any(scope in scopes for scope in required_scopes):
                logger.error(
                    f"[ALERT] {self._get_service_name()} credentials missing required scopes",
                    current_scopes=list(scopes),
                    required_scopes=required_scopes,
                )
                return False

        return True

    def refresh_credentials(self) -> bool:
        """
        Refresh OAuth credentials if expired

        The transport holds the same credential object, so the service
        picks up the new token without being rebuilt.

        Returns:
            True if a refresh happened, False if none was needed or possible
        """
        if isinstance(self.credentials, UserCredentials) and not self.credentials.refresh_token:
            logger.warning(f"No refresh token available for {self._get_service_name()}")
            return False

        if self.credentials.valid:
            logger.debug(f"Credentials still valid for {self._get_service_name()}, skipping refresh")
            return False

        refresh_credential(self.credentials)
        return True

    def _list_all(
        self,
        list_method: Callable[..., Any],
        items_key: str,
        **params: Any
    ) -> List[Dict[str, Any]]:
        """
        Call a list method repeatedly, following nextPageToken

        Args:
            list_method: e.g. self.service.files().list
            items_key: Key holding the items in each page ('files', 'items', ...)
            **params: Request parameters passed on every page

        Returns:
            Items from every page, in order
        """
        items: List[Dict[str, Any]] = []
        page_token = None
        while True:
            if page_token:
                params['pageToken'] = page_token
            response = list_method(**params).execute()
            items.extend(response.get(items_key, []))
            page_token = response.get('nextPageToken')
            if not page_token:
                break

        logger.debug(f"[{self._get_service_name()}] Listed {len(items)} {items_key}")
        return items

    def get_service_info(self) -> dict:
        """
        Get information about the service

        Returns:
            Dictionary with service status and information
        """
        return {
            "service_name": self._get_service_name(),
            "available": self.is_available(),
            "has_credentials": self.credentials is not None,
            "credentials_valid": bool(getattr(self.credentials, 'valid', False)),
            "required_scopes": self._get_required_scopes(),
            "current_scopes": list(getattr(self.credentials, 'scopes', None) or []),
        }
