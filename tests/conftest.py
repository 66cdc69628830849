"""
Pytest configuration and fixtures
"""
import json
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from google_apps.utils.config import GoogleContext, AuthMap


@pytest.fixture(autouse=True)
def no_application_credentials(monkeypatch):
    """Keep the developer's own ADC out of the tests"""
    monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)


@pytest.fixture
def ctx_dict():
    """google-ctx as a plain kebab-case mapping"""
    return {
        "client-id": "test-client-id.apps.googleusercontent.com",
        "client-secret": "test-client-secret",
        "redirect-uris": ["urn:ietf:wg:oauth:2.0:oob", "http://localhost"],
        "auth-map": {
            "access-token": "ya29.test-access-token",
            "refresh-token": "1//test-refresh-token",
            "token-type": "Bearer",
        },
    }


@pytest.fixture
def google_ctx():
    """google-ctx as a model, with timeouts"""
    return GoogleContext(
        client_id="test-client-id.apps.googleusercontent.com",
        client_secret="test-client-secret",
        redirect_uris=["urn:ietf:wg:oauth:2.0:oob"],
        connect_timeout=2000,
        read_timeout=5000,
        auth_map=AuthMap(
            access_token="ya29.test-access-token",
            refresh_token="1//test-refresh-token",
            scope="https://www.googleapis.com/auth/drive https://www.googleapis.com/auth/calendar",
        ),
    )


@pytest.fixture
def authorized_user_info():
    """JSON credential of type authorized_user (no private key needed)"""
    return {
        "type": "authorized_user",
        "client_id": "adc-client-id.apps.googleusercontent.com",
        "client_secret": "adc-client-secret",
        "refresh_token": "1//adc-refresh-token",
    }


@pytest.fixture
def authorized_user_file(tmp_path, authorized_user_info):
    path = tmp_path / "application_default_credentials.json"
    path.write_text(json.dumps(authorized_user_info))
    return path
