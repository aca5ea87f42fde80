"""
Flask API Routes.

Defines all HTTP endpoints for the forwarding service.
"""

from typing import Any, Dict, Tuple

from flask import Blueprint, request
from pydantic import ValidationError as PydanticValidationError

from sheet_forwarder import __version__
from sheet_forwarder.api.validation import RunForwardingRequest
from sheet_forwarder.core.exceptions import (
    BusinessError,
    ConfigurationError,
    ExternalServiceError,
    ValidationError,
)
from sheet_forwarder.infrastructure.gmail import GmailMailService
from sheet_forwarder.infrastructure.logging import get_logger
from sheet_forwarder.infrastructure.metrics import get_metrics, metrics_endpoint
from sheet_forwarder.infrastructure.sheets import open_sheet_table
from sheet_forwarder.services import RowProcessor


logger = get_logger(__name__)


api_bp = Blueprint("api", __name__)


def _error_response(
    message: str,
    status_code: int,
    error_type: str = "error",
) -> Tuple[Dict[str, Any], int]:
    """Create standardized error response."""
    return {
        "success": False,
        "error": message,
        "error_type": error_type,
    }, status_code


def _success_response(
    data: Dict[str, Any],
    status_code: int = 200,
) -> Tuple[Dict[str, Any], int]:
    """Create standardized success response."""
    return {
        "success": True,
        **data,
    }, status_code


# ============================================================================
# Health Check
# ============================================================================

@api_bp.route("/health", methods=["GET"])
def health_check() -> Tuple[Dict[str, Any], int]:
    """
    Health check endpoint for Cloud Run startup and liveness probes.

    Returns:
        Health status response.
    """
    return _success_response({
        "status": "healthy",
        "service": "sheet-forwarder",
        "version": __version__,
    })


@api_bp.route("/", methods=["GET"])
def root() -> Tuple[Dict[str, Any], int]:
    return health_check()


@api_bp.route("/metrics", methods=["GET"])
def metrics():
    """Prometheus metrics endpoint."""
    return metrics_endpoint()


# ============================================================================
# Forwarding
# ============================================================================

@api_bp.route("/run-forwarding", methods=["POST"])
def run_forwarding() -> Tuple[Dict[str, Any], int]:
    """
    Run one forwarding pass over the configuration sheet.

    Called by Cloud Scheduler. Any Sheets or Gmail failure aborts the
    pass at the failing row and is reported as a non-2xx response so the
    scheduler marks the job as failed.

    Returns:
        Summary of the processed rows.
    """
    try:
        payload = RunForwardingRequest.model_validate(
            request.get_json(silent=True) or {}
        )
    except PydanticValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"]) or "body"
        raise ValidationError(field, first_error["msg"]) from e

    logger.info(
        "Starting forwarding run",
        extra={"extra_fields": {"dry_run": payload.dry_run}}
    )

    run_metrics = get_metrics().runs_total
    try:
        processor = RowProcessor(
            table=open_sheet_table(),
            mail=GmailMailService(),
            dry_run=payload.dry_run,
        )
        outcomes = processor.process_rows()
    except Exception:
        run_metrics.inc(status="failed")
        raise

    run_metrics.inc(status="success")

    return _success_response({
        "dry_run": payload.dry_run,
        "rows_processed": len(outcomes),
        "threads_matched": sum(1 for o in outcomes if o.matched),
        "forwarded_count": sum(1 for o in outcomes if o.forwarded),
        "results": [o.to_dict() for o in outcomes],
    })


# ============================================================================
# Error Handlers
# ============================================================================

@api_bp.errorhandler(BusinessError)
def handle_business_error(error: BusinessError) -> Tuple[Dict[str, Any], int]:
    """Handle business logic errors (4xx)."""
    logger.warning(
        f"Business error: {error}",
        extra={"extra_fields": {"error_type": type(error).__name__}}
    )
    return _error_response(str(error), 400, type(error).__name__)


@api_bp.errorhandler(ConfigurationError)
def handle_configuration_error(error: ConfigurationError) -> Tuple[Dict[str, Any], int]:
    """Handle missing or invalid configuration (500)."""
    logger.error(
        f"Configuration error: {error}",
        extra={"extra_fields": {
            "error_type": type(error).__name__,
            "config_name": error.config_name,
        }}
    )
    return _error_response(str(error), 500, "configuration_error")


@api_bp.errorhandler(ExternalServiceError)
def handle_external_service_error(
    error: ExternalServiceError,
) -> Tuple[Dict[str, Any], int]:
    """Handle Sheets/Gmail errors (503)."""
    logger.error(
        f"External service error: {error}",
        extra={"extra_fields": {
            "error_type": type(error).__name__,
            "service_name": error.service_name,
            "status_code": error.status_code,
        }}
    )
    return _error_response(str(error), 503, "external_service_error")


@api_bp.errorhandler(Exception)
def handle_unexpected_error(error: Exception) -> Tuple[Dict[str, Any], int]:
    """Handle unexpected errors (500)."""
    logger.exception(
        f"Unexpected error: {error}",
        extra={"extra_fields": {"error_type": type(error).__name__}}
    )
    return _error_response(
        "An unexpected error occurred",
        500,
        "internal_error",
    )
