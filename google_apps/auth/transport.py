"""
Authorized HTTP transport for discovery-based Google API clients
"""
from typing import Optional, Union

import google_auth_httplib2
import httplib2
from google.auth.credentials import Credentials as BaseCredentials

from ..utils.config import ContextLike, as_context
from ..utils.logger import setup_logger
from .credentials import build_credential

logger = setup_logger(__name__)


def _timeout_seconds(
    connect_timeout: Optional[int],
    read_timeout: Optional[int]
) -> Optional[float]:
    # httplib2 has a single socket timeout covering connect and read
    timeouts = [t for t in (connect_timeout, read_timeout) if t is not None]
    if not timeouts:
        return None
    return max(timeouts) / 1000.0


def build_http(
    credentials: BaseCredentials,
    connect_timeout: Optional[int] = None,
    read_timeout: Optional[int] = None
) -> google_auth_httplib2.AuthorizedHttp:
    """
    Wrap a credential in an authorized httplib2 transport.

    Args:
        credentials: Any google-auth credential
        connect_timeout: Connect timeout in milliseconds, or None
        read_timeout: Read timeout in milliseconds, or None

    Returns:
        AuthorizedHttp usable as `http=` for googleapiclient.discovery.build
    """
    timeout = _timeout_seconds(connect_timeout, read_timeout)
    if timeout is not None:
        logger.debug("Using request timeout", timeout_seconds=timeout)
    return google_auth_httplib2.AuthorizedHttp(
        credentials,
        http=httplib2.Http(timeout=timeout)
    )


def http_for_context(
    google_ctx: Union[ContextLike, BaseCredentials]
) -> google_auth_httplib2.AuthorizedHttp:
    """Build the credential for a google-ctx and an authorized transport with its timeouts"""
    credentials = build_credential(google_ctx)
    if isinstance(google_ctx, BaseCredentials):
        return build_http(credentials)

    ctx = as_context(google_ctx)
    return build_http(credentials, ctx.connect_timeout, ctx.read_timeout)
