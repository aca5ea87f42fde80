"""Configuration package."""

from sheet_forwarder.config.settings import (
    GmailSettings,
    GoogleAuthSettings,
    Settings,
    SheetSettings,
    settings,
)

__all__ = [
    "GmailSettings",
    "GoogleAuthSettings",
    "Settings",
    "SheetSettings",
    "settings",
]
