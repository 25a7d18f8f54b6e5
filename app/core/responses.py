"""
HTTP translation of service failures.

Views call ``error_response(result)`` on a failed ServiceResult instead of
branching on error codes themselves, so every endpoint answers a given
failure with the same status and body.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework.response import Response

from core.exceptions import status_for_error_code

if TYPE_CHECKING:
    from core.services import ServiceResult


def error_response(result: ServiceResult) -> Response:
    """
    Build the DRF response for a failed service result.

    Body:
        {"error": "...", "error_code": "...", "errors": {...}}
    """
    status_code = result.status_code or status_for_error_code(result.error_code)
    return Response(result.to_response(), status=status_code)
