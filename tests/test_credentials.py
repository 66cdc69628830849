"""
Tests for credential acquisition and construction
"""
import io
import json
from unittest.mock import MagicMock, Mock, patch

import pytest
from google.auth.credentials import Credentials as BaseCredentials, Scoped
from google.oauth2.credentials import Credentials

from google_apps.auth.credentials import (
    build_credential,
    credential_from_json,
    credential_from_json_stream,
    credential_with_scopes,
    default_credential,
    get_auth_map,
    get_google_secret,
    get_token_response,
    refresh_credential,
)
from google_apps.exceptions import AuthorizationError, CredentialError
from google_apps.utils.config import ConfigDefaults, load_config, save_auth_map

DRIVE_SCOPE = "https://www.googleapis.com/auth/drive"
CALENDAR_SCOPE = "https://www.googleapis.com/auth/calendar"


# ============================================
# CLIENT SECRET / TOKEN RESPONSE
# ============================================

class TestGoogleSecret:

    def test_fields_copied_from_config(self, ctx_dict):
        secret = get_google_secret(ctx_dict)

        installed = secret["installed"]
        assert installed["client_id"] == "test-client-id.apps.googleusercontent.com"
        assert installed["client_secret"] == "test-client-secret"
        assert installed["redirect_uris"] == ["urn:ietf:wg:oauth:2.0:oob", "http://localhost"]
        assert installed["auth_uri"] == ConfigDefaults.AUTH_URI
        assert installed["token_uri"] == ConfigDefaults.TOKEN_URI


class TestTokenResponse:

    def test_reads_auth_map(self, ctx_dict):
        token_response = get_token_response(ctx_dict)

        assert token_response.access_token == "ya29.test-access-token"
        assert token_response.refresh_token == "1//test-refresh-token"
        assert token_response.token_type == "Bearer"

    def test_missing_auth_map_raises(self):
        with pytest.raises(CredentialError):
            get_token_response({"client-id": "id", "client-secret": "secret"})


# ============================================
# INTERACTIVE FLOW
# ============================================

class TestGetAuthMap:

    @pytest.fixture
    def flow(self):
        with patch("google_apps.auth.credentials.Flow") as mock_flow_class:
            flow = MagicMock()
            flow.authorization_url.return_value = ("https://accounts.google.com/o/oauth2/auth?client_id=x", "state-1")
            flow.fetch_token.return_value = {
                "access_token": "ya29.new",
                "refresh_token": "1//new",
                "token_type": "Bearer",
                "expires_in": 3599,
                "scope": DRIVE_SCOPE,
            }
            mock_flow_class.from_client_config.return_value = flow
            flow.flow_class = mock_flow_class
            yield flow

    def test_prints_url_reads_code_and_exchanges_it(self, ctx_dict, flow):
        printed = []

        auth_map = get_auth_map(
            ctx_dict,
            [DRIVE_SCOPE],
            input_func=lambda: "  4/auth-code \n",
            echo=printed.append,
        )

        flow.flow_class.from_client_config.assert_called_once_with(
            get_google_secret(ctx_dict),
            scopes=[DRIVE_SCOPE],
            redirect_uri=ConfigDefaults.OOB_REDIRECT_URI,
        )
        flow.authorization_url.assert_called_once_with(access_type="offline")
        flow.fetch_token.assert_called_once_with(code="4/auth-code")

        assert len(printed) == 1
        assert "https://accounts.google.com/o/oauth2/auth?client_id=x" in printed[0]
        assert auth_map["access_token"] == "ya29.new"
        assert auth_map["refresh_token"] == "1//new"

    def test_empty_code_raises_before_exchange(self, ctx_dict, flow):
        with pytest.raises(AuthorizationError):
            get_auth_map(ctx_dict, [DRIVE_SCOPE], input_func=lambda: "   ", echo=lambda *_: None)

        flow.fetch_token.assert_not_called()

    def test_empty_token_response_raises(self, ctx_dict, flow):
        flow.fetch_token.return_value = {}

        with pytest.raises(AuthorizationError):
            get_auth_map(ctx_dict, [DRIVE_SCOPE], input_func=lambda: "code", echo=lambda *_: None)

    def test_real_token_exchange_can_be_saved(self, ctx_dict, tmp_path):
        response = Mock()
        response.status_code = 200
        response.headers = {"Content-Type": "application/json"}
        response.text = json.dumps({
            "access_token": "ya29.exchanged",
            "refresh_token": "1//exchanged",
            "token_type": "Bearer",
            "expires_in": 3599,
            "scope": DRIVE_SCOPE,
        })

        with patch("requests.Session.request", return_value=response):
            auth_map = get_auth_map(ctx_dict, [DRIVE_SCOPE], input_func=lambda: "4/code", echo=lambda *_: None)

        config_file = tmp_path / "google-creds.yaml"
        save_auth_map(str(config_file), auth_map)

        saved = load_config(str(config_file)).auth_map
        assert saved.access_token == "ya29.exchanged"
        assert saved.refresh_token == "1//exchanged"
        assert saved.scope == DRIVE_SCOPE

    def test_token_endpoint_errors_propagate(self, ctx_dict, flow):
        flow.fetch_token.side_effect = RuntimeError("invalid_grant")

        with pytest.raises(RuntimeError, match="invalid_grant"):
            get_auth_map(ctx_dict, [DRIVE_SCOPE], input_func=lambda: "code", echo=lambda *_: None)


# ============================================
# CREDENTIAL CONSTRUCTION
# ============================================

class TestBuildCredential:

    def test_builds_user_credential_from_config(self, google_ctx):
        credentials = build_credential(google_ctx)

        assert isinstance(credentials, Credentials)
        assert credentials.token == "ya29.test-access-token"
        assert credentials.refresh_token == "1//test-refresh-token"
        assert credentials.client_id == "test-client-id.apps.googleusercontent.com"
        assert credentials.client_secret == "test-client-secret"
        assert credentials.token_uri == ConfigDefaults.TOKEN_URI
        assert credentials.scopes == [DRIVE_SCOPE, CALENDAR_SCOPE]

    def test_accepts_plain_mapping(self, ctx_dict):
        credentials = build_credential(ctx_dict)

        assert credentials.token == "ya29.test-access-token"
        assert credentials.scopes is None

    def test_credentials_pass_through(self):
        existing = Credentials(token="already-built")
        assert build_credential(existing) is existing

    def test_refresh_token_only_is_enough(self, ctx_dict):
        ctx_dict["auth-map"] = {"refresh-token": "1//only-refresh"}

        credentials = build_credential(ctx_dict)

        assert credentials.token is None
        assert credentials.refresh_token == "1//only-refresh"
        assert not credentials.valid

    def test_empty_auth_map_raises(self, ctx_dict):
        ctx_dict["auth-map"] = {}

        with pytest.raises(CredentialError):
            build_credential(ctx_dict)


class TestCredentialWithScopes:

    def test_scoped_credential_gets_deduplicated_scopes(self):
        scoped = Mock(spec=Scoped)
        scoped.with_scopes.return_value = "rescoped"

        result = credential_with_scopes(scoped, [DRIVE_SCOPE, CALENDAR_SCOPE, DRIVE_SCOPE])

        assert result == "rescoped"
        scoped.with_scopes.assert_called_once_with(sorted({DRIVE_SCOPE, CALENDAR_SCOPE}))

    def test_user_credential_returned_unchanged(self):
        credentials = Credentials(token="t")
        assert credential_with_scopes(credentials, [DRIVE_SCOPE]) is credentials


# ============================================
# JSON / APPLICATION DEFAULT CREDENTIALS
# ============================================

class TestCredentialFromJson:

    def _assert_adc_user(self, credentials):
        assert isinstance(credentials, Credentials)
        assert credentials.client_id == "adc-client-id.apps.googleusercontent.com"
        assert credentials.client_secret == "adc-client-secret"
        assert credentials.refresh_token == "1//adc-refresh-token"

    def test_from_json_string(self, authorized_user_info):
        self._assert_adc_user(credential_from_json(json.dumps(authorized_user_info)))

    def test_from_path(self, authorized_user_file):
        self._assert_adc_user(credential_from_json_stream(str(authorized_user_file)))

    def test_from_pathlike(self, authorized_user_file):
        self._assert_adc_user(credential_from_json_stream(authorized_user_file))

    def test_from_binary_stream(self, authorized_user_info):
        stream = io.BytesIO(json.dumps(authorized_user_info).encode("utf-8"))
        self._assert_adc_user(credential_from_json_stream(stream))

    def test_from_raw_bytes(self, authorized_user_info):
        self._assert_adc_user(credential_from_json_stream(json.dumps(authorized_user_info).encode("utf-8")))

    def test_from_text_stream_left_open(self, authorized_user_info):
        stream = io.StringIO(json.dumps(authorized_user_info))

        self._assert_adc_user(credential_from_json_stream(stream))

        assert not stream.closed

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError):
            credential_from_json("{not json")


class TestDefaultCredential:

    def test_env_var_path_wins(self, monkeypatch, authorized_user_file):
        monkeypatch.setenv("GOOGLE_APPLICATION_CREDENTIALS", str(authorized_user_file))

        with patch("google.auth.default") as mock_default:
            credentials = default_credential()

        mock_default.assert_not_called()
        assert credentials.refresh_token == "1//adc-refresh-token"

    def test_falls_back_to_google_auth_default(self):
        ambient = Mock(spec=BaseCredentials)

        with patch("google.auth.default", return_value=(ambient, "my-project")) as mock_default:
            credentials = default_credential()

        mock_default.assert_called_once_with()
        assert credentials is ambient

    def test_scopes_are_attached(self):
        ambient = Mock(spec=Scoped)
        ambient.with_scopes.return_value = "scoped-ambient"

        with patch("google.auth.default", return_value=(ambient, None)):
            credentials = default_credential([CALENDAR_SCOPE])

        assert credentials == "scoped-ambient"
        ambient.with_scopes.assert_called_once_with([CALENDAR_SCOPE])


class TestRefreshCredential:

    def test_delegates_to_credential_refresh(self):
        credentials = Mock(spec=BaseCredentials)
        credentials.expiry = None

        with patch("google_apps.auth.credentials.Request") as mock_request:
            assert refresh_credential(credentials) is credentials

        credentials.refresh.assert_called_once_with(mock_request.return_value)
