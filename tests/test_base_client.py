"""
Tests for BaseGoogleAPIClient
"""
from unittest.mock import MagicMock, Mock, patch

import pytest
from google.oauth2.credentials import Credentials

from google_apps.core.base import BaseGoogleAPIClient

DRIVE_SCOPE = "https://www.googleapis.com/auth/drive"


class DummyClient(BaseGoogleAPIClient):
    """Minimal concrete client over a mocked service"""

    def _build_service(self):
        return MagicMock()

    def _get_required_scopes(self):
        return [DRIVE_SCOPE, "https://www.googleapis.com/auth/drive.readonly"]

    def _get_service_name(self):
        return "Dummy"


def make_client(credentials):
    http = Mock()
    http.credentials = credentials
    return DummyClient(credentials, http=http)


class TestInitialization:

    def test_builds_transport_from_context(self, google_ctx):
        client = DummyClient(google_ctx)

        assert client.credentials is client.http.credentials
        assert client.credentials.token == "ya29.test-access-token"
        assert client.http.http.timeout == 5.0
        assert client.service is not None

    def test_shared_transport_is_reused(self):
        credentials = Credentials(token="t")
        client = make_client(credentials)
        assert client.credentials is credentials


class TestIsAvailable:

    def test_available_with_matching_scope(self):
        client = make_client(Credentials(token="t", scopes=[DRIVE_SCOPE]))
        assert client.is_available() is True

    def test_unavailable_without_required_scope(self):
        client = make_client(Credentials(token="t", scopes=["https://www.googleapis.com/auth/calendar"]))
        assert client.is_available() is False

    def test_unknown_scopes_assumed_sufficient(self):
        client = make_client(Credentials(token="t"))
        assert client.is_available() is True

    def test_unavailable_without_service(self):
        client = make_client(Credentials(token="t"))
        client.service = None
        assert client.is_available() is False


class TestRefreshCredentials:

    def test_no_refresh_token(self):
        client = make_client(Credentials(token=None))

        with patch("google_apps.core.base.google_api_client.refresh_credential") as mock_refresh:
            assert client.refresh_credentials() is False

        mock_refresh.assert_not_called()

    def test_valid_credentials_skip_refresh(self):
        client = make_client(Credentials(token="t", refresh_token="r"))

        with patch("google_apps.core.base.google_api_client.refresh_credential") as mock_refresh:
            assert client.refresh_credentials() is False

        mock_refresh.assert_not_called()

    def test_invalid_credentials_refreshed(self):
        credentials = Credentials(
            token=None,
            refresh_token="r",
            token_uri="https://oauth2.googleapis.com/token",
            client_id="id",
            client_secret="secret",
        )
        client = make_client(credentials)

        with patch("google_apps.core.base.google_api_client.refresh_credential") as mock_refresh:
            assert client.refresh_credentials() is True

        mock_refresh.assert_called_once_with(credentials)

    def test_refresh_errors_propagate(self):
        client = make_client(Credentials(token=None, refresh_token="r"))

        with patch(
            "google_apps.core.base.google_api_client.refresh_credential",
            side_effect=RuntimeError("invalid_grant"),
        ):
            with pytest.raises(RuntimeError):
                client.refresh_credentials()


class TestListAll:

    def test_follows_page_tokens(self):
        client = make_client(Credentials(token="t"))
        list_method = Mock()
        list_method.return_value.execute.side_effect = [
            {"files": [{"id": "1"}, {"id": "2"}], "nextPageToken": "p2"},
            {"files": [{"id": "3"}], "nextPageToken": "p3"},
            {"files": []},
        ]

        items = client._list_all(list_method, "files", q="trashed = false")

        assert [item["id"] for item in items] == ["1", "2", "3"]
        assert list_method.call_count == 3
        assert list_method.call_args_list[0].kwargs == {"q": "trashed = false"}
        assert list_method.call_args_list[1].kwargs == {"q": "trashed = false", "pageToken": "p2"}
        assert list_method.call_args_list[2].kwargs == {"q": "trashed = false", "pageToken": "p3"}

    def test_missing_items_key(self):
        client = make_client(Credentials(token="t"))
        list_method = Mock()
        list_method.return_value.execute.return_value = {}

        assert client._list_all(list_method, "items") == []


class TestServiceInfo:

    def test_reports_state(self):
        client = make_client(Credentials(token="t", scopes=[DRIVE_SCOPE]))

        info = client.get_service_info()

        assert info["service_name"] == "Dummy"
        assert info["available"] is True
        assert info["has_credentials"] is True
        assert info["credentials_valid"] is True
        assert info["current_scopes"] == [DRIVE_SCOPE]
        assert DRIVE_SCOPE in info["required_scopes"]
