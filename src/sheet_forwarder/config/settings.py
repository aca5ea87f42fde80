"""
Application configuration.

Centralizes environment variables, constants, and settings
using dataclasses for type safety and immutability.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple


def _optional_env(name: str) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or None


@dataclass(frozen=True)
class SheetSettings:
    """Configuration sheet settings."""

    spreadsheet_id: str = field(
        default_factory=lambda: os.environ.get("SHEET_ID", "").strip()
    )
    # First worksheet is used when no title is given
    worksheet_name: Optional[str] = field(
        default_factory=lambda: _optional_env("SHEET_NAME")
    )

    @property
    def is_configured(self) -> bool:
        """Check if the sheet is properly configured."""
        return bool(self.spreadsheet_id)


@dataclass(frozen=True)
class GmailSettings:
    """Gmail API settings."""

    user_id: str = field(
        default_factory=lambda: os.environ.get("GMAIL_USER_ID", "me")
    )
    sender: Optional[str] = field(
        default_factory=lambda: _optional_env("GMAIL_SENDER")
    )
    delegated_user: Optional[str] = field(
        default_factory=lambda: _optional_env("GMAIL_DELEGATED_USER")
    )


@dataclass(frozen=True)
class GoogleAuthSettings:
    """Google credential sources, tried in declaration order."""

    service_account_file: Optional[str] = field(
        default_factory=lambda: _optional_env("GOOGLE_SERVICE_ACCOUNT_FILE")
    )
    token_file: Optional[str] = field(
        default_factory=lambda: _optional_env("GOOGLE_TOKEN_FILE")
    )
    scopes: Tuple[str, ...] = (
        "https://www.googleapis.com/auth/spreadsheets.readonly",
        "https://www.googleapis.com/auth/gmail.modify",
    )


@dataclass(frozen=True)
class Settings:
    """Main application settings."""

    sheet: SheetSettings = field(default_factory=SheetSettings)
    gmail: GmailSettings = field(default_factory=GmailSettings)
    google_auth: GoogleAuthSettings = field(default_factory=GoogleAuthSettings)
    port: int = field(default_factory=lambda: int(os.environ.get("PORT", 8080)))
    debug: bool = field(default_factory=lambda: os.environ.get("DEBUG", "false").lower() == "true")
    environment: str = field(
        default_factory=lambda: os.environ.get("ENVIRONMENT", "development")
    )


# Singleton settings instance
settings = Settings()
