"""
Configuration management

A Google context ("google-ctx") carries the OAuth client id/secret, redirect
URIs, optional per-request timeouts and an optional stored auth map. It is
read from a YAML file, with ${VAR} placeholders filled from the environment.
"""
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator


# ============================================
# CONFIGURATION DEFAULTS
# ============================================

class ConfigDefaults:
    """Default configuration values as constants"""

    # OAuth endpoints
    AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
    TOKEN_URI = "https://oauth2.googleapis.com/token"

    # Out-of-band redirect used by the console flow
    OOB_REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"

    TOKEN_TYPE = "Bearer"

    # Application default credentials
    APPLICATION_CREDENTIALS_VAR = "GOOGLE_APPLICATION_CREDENTIALS"

    # Config file defaults
    CONFIG_PATH_DEFAULT = "config/google-creds.yaml"


# ============================================
# CONFIGURATION MODELS
# ============================================

def _normalize_keys(obj: Any) -> Any:
    """Recursively turn kebab-case keys (client-id) into snake_case."""
    if isinstance(obj, Mapping):
        return {
            (k.replace("-", "_") if isinstance(k, str) else k): _normalize_keys(v)
            for k, v in obj.items()
        }
    if isinstance(obj, list):
        return [_normalize_keys(item) for item in obj]
    return obj


class AuthMap(BaseModel):
    """Stored authorization map (the token pair returned by the OAuth flow)"""
    model_config = ConfigDict(extra="ignore")

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_type: str = ConfigDefaults.TOKEN_TYPE
    expires_in: Optional[int] = None
    scope: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _kebab_keys(cls, data: Any) -> Any:
        return _normalize_keys(data)

    @field_validator("scope", mode="before")
    @classmethod
    def _join_scopes(cls, value: Any) -> Any:
        # oauthlib parses the token response scope into a list
        if isinstance(value, (list, tuple)):
            return " ".join(value)
        return value


class GoogleContext(BaseModel):
    """Google client configuration"""
    model_config = ConfigDict(extra="ignore")

    client_id: str
    client_secret: str
    redirect_uris: List[str] = [ConfigDefaults.OOB_REDIRECT_URI]
    auth_uri: str = ConfigDefaults.AUTH_URI
    token_uri: str = ConfigDefaults.TOKEN_URI
    connect_timeout: Optional[int] = None  # milliseconds
    read_timeout: Optional[int] = None  # milliseconds
    auth_map: Optional[AuthMap] = None

    @model_validator(mode="before")
    @classmethod
    def _kebab_keys(cls, data: Any) -> Any:
        return _normalize_keys(data)

    @field_validator("redirect_uris", mode="before")
    @classmethod
    def _listify(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        if isinstance(value, (tuple, set)):
            return list(value)
        return value


ContextLike = Union[GoogleContext, Mapping[str, Any]]


def as_context(ctx: ContextLike) -> GoogleContext:
    """Accept a GoogleContext or a plain mapping and return a GoogleContext"""
    if isinstance(ctx, GoogleContext):
        return ctx
    return GoogleContext.model_validate(ctx)


def load_config(config_path: str = ConfigDefaults.CONFIG_PATH_DEFAULT) -> GoogleContext:
    """
    Load configuration from YAML file and environment variables.
    """
    load_dotenv()

    with open(config_path, 'r') as f:
        config_dict = yaml.safe_load(f) or {}

    config_dict = _replace_env_vars(config_dict)

    return GoogleContext.model_validate(config_dict)


def save_auth_map(
    config_path: str,
    auth_map: Union[AuthMap, Mapping[str, Any]]
) -> Path:
    """
    Merge an auth map into a YAML config file under the `auth_map` key.

    The file (and its parent directory) is created when missing.
    """
    if isinstance(auth_map, AuthMap):
        auth_dict = auth_map.model_dump(exclude_none=True)
    else:
        auth_dict = AuthMap.model_validate(auth_map).model_dump(exclude_none=True)

    path = Path(config_path)
    config_dict: Dict[str, Any] = {}
    if path.exists():
        with open(path, 'r') as f:
            config_dict = yaml.safe_load(f) or {}

    config_dict.pop("auth-map", None)
    config_dict["auth_map"] = auth_dict

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

    return path


def _replace_env_vars(obj: Any) -> Any:
    """
    Recursively replace ${VAR} placeholders with environment variables.
    """
    if isinstance(obj, dict):
        return {k: _replace_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_replace_env_vars(item) for item in obj]
    elif isinstance(obj, str) and obj.startswith("${") and obj.endswith("}"):
        var_name = obj[2:-1]
        env_value = os.getenv(var_name)
        if env_value:
            return env_value
        return obj
    return obj


def get_application_credentials_path() -> Optional[str]:
    """Path named by $GOOGLE_APPLICATION_CREDENTIALS, if set"""
    return os.getenv(ConfigDefaults.APPLICATION_CREDENTIALS_VAR) or None
