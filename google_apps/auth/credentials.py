"""
Google OAuth 2 credential helpers

Builds google-auth credential objects from a google-ctx configuration map,
drives the interactive console authorization flow, and loads credentials
from JSON blobs or the application default credential.

Usage:
    ctx = load_config('config/google-creds.yaml')

    # One-off, interactive: store the returned map securely
    auth_map = get_auth_map(ctx, ['https://www.googleapis.com/auth/drive'])

    # Every other time
    credentials = build_credential(ctx)
"""
import io
import json
import os
from typing import IO, Any, Callable, Dict, Iterable, Optional, Union

import google.auth
from google.auth.credentials import Credentials as BaseCredentials, Scoped
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow

from ..exceptions import AuthorizationError, CredentialError
from ..utils.config import (
    AuthMap,
    ConfigDefaults,
    ContextLike,
    as_context,
    get_application_credentials_path,
)
from ..utils.logger import setup_logger

logger = setup_logger(__name__)

JsonSource = Union[str, os.PathLike, bytes, IO]


def get_google_secret(google_ctx: ContextLike) -> Dict[str, Dict[str, Any]]:
    """
    Given a google-ctx configuration map, creates a client secrets
    descriptor with the client id, client secret and redirect uris
    pulled from the config
    """
    ctx = as_context(google_ctx)
    return {
        "installed": {
            "client_id": ctx.client_id,
            "client_secret": ctx.client_secret,
            "redirect_uris": list(ctx.redirect_uris),
            "auth_uri": ctx.auth_uri,
            "token_uri": ctx.token_uri,
        }
    }


def get_auth_map(
    google_ctx: ContextLike,
    scopes: Iterable[str],
    input_func: Callable[[], str] = input,
    echo: Callable[..., Any] = print,
    redirect_uri: str = ConfigDefaults.OOB_REDIRECT_URI,
) -> Dict[str, Any]:
    """
    Given a google-ctx configuration map and a list of scopes, prints a URL
    for the user to receive their auth code, reads the code from the console
    and exchanges it for an authorization map, which the user should store
    securely.

    Blocks on console input and on one token request.

    Raises:
        AuthorizationError: If no URL, code or token response is produced
    """
    flow = Flow.from_client_config(
        get_google_secret(google_ctx),
        scopes=list(scopes),
        redirect_uri=redirect_uri
    )

    auth_url, _ = flow.authorization_url(access_type='offline')
    if not auth_url:
        raise AuthorizationError("Authorization flow produced no URL")

    echo(
        "Please visit the following url and input the code "
        "that appears on the screen: " + auth_url
    )

    auth_code = (input_func() or "").strip()
    if not auth_code:
        raise AuthorizationError("No authorization code was entered")

    token_response = flow.fetch_token(code=auth_code)
    if not token_response:
        raise AuthorizationError("Token endpoint returned an empty response")

    logger.info(
        "Authorization code exchanged",
        has_refresh_token=bool(token_response.get('refresh_token')),
        scopes=token_response.get('scope'),
    )
    return dict(token_response)


def get_token_response(google_ctx: ContextLike) -> AuthMap:
    """
    Given a google-ctx configuration map, reads the token pair out of the
    authorization map inside of the google-ctx
    """
    ctx = as_context(google_ctx)
    auth_map = ctx.auth_map
    if auth_map is None:
        raise CredentialError("google-ctx has no auth_map; run the authorization flow first")

    return AuthMap(
        access_token=auth_map.access_token,
        refresh_token=auth_map.refresh_token,
        token_type=auth_map.token_type,
        expires_in=auth_map.expires_in,
        scope=auth_map.scope,
    )


def credential_with_scopes(credentials: BaseCredentials, scopes: Iterable[str]) -> BaseCredentials:
    """
    Creates a copy of the given credential with the specified scopes attached.

    User credentials cannot be re-scoped and are returned unchanged.
    """
    if isinstance(credentials, Scoped):
        return credentials.with_scopes(sorted(set(scopes)))
    return credentials


def credential_from_json_stream(stream: JsonSource) -> BaseCredentials:
    """
    Builds a credential from JSON describing a Google API credential.

    `stream` is a path, raw JSON bytes, or an open (text or binary) file
    object. Paths are opened and closed here; file objects are left open.
    """
    if isinstance(stream, bytes):
        stream = io.BytesIO(stream)

    if isinstance(stream, (str, os.PathLike)):
        with open(stream, 'rb') as input_stream:
            info = json.load(input_stream)
    else:
        info = json.load(stream)

    credentials, _ = google.auth.load_credentials_from_dict(info)
    logger.debug("Loaded credential from JSON", credential_type=info.get('type'))
    return credentials


def credential_from_json(cred_json: str) -> BaseCredentials:
    """Builds a credential from a raw JSON string describing a Google API credential"""
    input_stream = io.BytesIO(cred_json.encode('utf-8'))
    return credential_from_json_stream(input_stream)


def default_credential(scopes: Optional[Iterable[str]] = None) -> BaseCredentials:
    """
    Gets the default credential as configured by $GOOGLE_APPLICATION_CREDENTIALS,
    falling back to google-auth's application default discovery.

    Optionally attaches the given scopes to the credential.
    """
    path = get_application_credentials_path()
    if path:
        logger.debug("Loading application credentials", path=path)
        credentials = credential_from_json_stream(path)
    else:
        credentials, _ = google.auth.default()

    if scopes is not None:
        credentials = credential_with_scopes(credentials, scopes)
    return credentials


def build_credential(google_ctx: Union[ContextLike, BaseCredentials]) -> BaseCredentials:
    """
    Given a google-ctx configuration map, builds a self-refreshing credential
    from the stored token pair and the client secret.

    Credential instances are passed through unmodified.
    """
    if isinstance(google_ctx, BaseCredentials):
        return google_ctx

    token_response = get_token_response(google_ctx)
    if not token_response.access_token and not token_response.refresh_token:
        raise CredentialError("auth_map holds neither an access token nor a refresh token")
    if token_response.token_type.lower() != ConfigDefaults.TOKEN_TYPE.lower():
        logger.warning("Non-bearer token type ignored", token_type=token_response.token_type)

    installed = get_google_secret(google_ctx)["installed"]
    return Credentials(
        token=token_response.access_token,
        refresh_token=token_response.refresh_token,
        token_uri=installed["token_uri"],
        client_id=installed["client_id"],
        client_secret=installed["client_secret"],
        scopes=token_response.scope.split() if token_response.scope else None,
    )


def refresh_credential(credentials: BaseCredentials) -> BaseCredentials:
    """Refresh a credential in place; token endpoint errors propagate"""
    credentials.refresh(Request())
    logger.info("Credential refreshed", expiry=str(credentials.expiry))
    return credentials
