"""
Google Credentials.

Resolves credentials shared by the Sheets and Gmail clients. Sources are
tried in order: service account key file, authorized-user token file,
then Application Default Credentials (the Cloud Run service identity).
"""

import os
from typing import Optional, Sequence

import google.auth
from google.auth.credentials import Credentials
from google.auth.exceptions import DefaultCredentialsError, RefreshError
from google.auth.transport.requests import Request
from google.oauth2 import credentials as user_credentials
from google.oauth2 import service_account

from sheet_forwarder.config import settings
from sheet_forwarder.config.settings import GoogleAuthSettings
from sheet_forwarder.core.exceptions import ConfigurationError
from sheet_forwarder.infrastructure.logging import get_logger


logger = get_logger(__name__)


def _require_file(path: str, config_name: str) -> None:
    if not os.path.exists(path):
        raise ConfigurationError(
            config_name,
            f"Credentials file not found for {config_name}: {path}",
        )


def load_credentials(
    auth_settings: Optional[GoogleAuthSettings] = None,
    subject: Optional[str] = None,
    scopes: Optional[Sequence[str]] = None,
) -> Credentials:
    """
    Load Google credentials.

    Args:
        auth_settings: Credential sources. Defaults to global settings.
        subject: User to impersonate through domain-wide delegation.
            Only honoured for service account keys.
        scopes: OAuth scopes. Defaults to the configured scopes.

    Returns:
        Credentials usable by gspread and googleapiclient.

    Raises:
        ConfigurationError: If no usable credentials can be found.
    """
    auth_settings = auth_settings or settings.google_auth
    scopes = list(scopes or auth_settings.scopes)

    if auth_settings.service_account_file:
        _require_file(auth_settings.service_account_file, "GOOGLE_SERVICE_ACCOUNT_FILE")
        creds = service_account.Credentials.from_service_account_file(
            auth_settings.service_account_file,
            scopes=scopes,
        )
        if subject:
            creds = creds.with_subject(subject)
        logger.info(
            "Loaded service account credentials",
            extra={"extra_fields": {
                "source": "service_account",
                "delegated": bool(subject),
            }}
        )
        return creds

    if auth_settings.token_file:
        _require_file(auth_settings.token_file, "GOOGLE_TOKEN_FILE")
        creds = user_credentials.Credentials.from_authorized_user_file(
            auth_settings.token_file,
            scopes,
        )
        if not creds.valid and creds.expired and creds.refresh_token:
            try:
                creds.refresh(Request())
            except RefreshError as e:
                raise ConfigurationError(
                    "GOOGLE_TOKEN_FILE",
                    f"Failed to refresh authorized user token: {e}",
                ) from e
        logger.info(
            "Loaded authorized user credentials",
            extra={"extra_fields": {"source": "token_file"}}
        )
        return creds

    try:
        creds, project_id = google.auth.default(scopes=scopes)
    except DefaultCredentialsError as e:
        raise ConfigurationError(
            "GOOGLE_APPLICATION_CREDENTIALS",
            f"No Google credentials available: {e}",
        ) from e

    logger.info(
        "Loaded application default credentials",
        extra={"extra_fields": {"source": "default", "project_id": project_id}}
    )
    return creds
