"""
API Request Validation.

Uses Pydantic for request payload validation.
"""

from pydantic import BaseModel, ConfigDict, Field


class RunForwardingRequest(BaseModel):
    """Request body for /run-forwarding endpoint."""

    model_config = ConfigDict(extra="forbid")

    dry_run: bool = Field(
        default=False,
        description="If true, search and report matches without forwarding",
    )
