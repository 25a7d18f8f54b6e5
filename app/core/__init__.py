"""
Core - shared infrastructure for the marketplace apps.

Nothing in here knows about listings, bookings or chat.

Models (core.models):
    - BaseModel: Abstract model with created_at/updated_at

Services (core.services):
    - BaseService: Logging, transaction and on-commit helpers
    - ServiceResult: Success/failure wrapper returned by every service

Exceptions (core.exceptions):
    - BaseApplicationError and the taxonomy: ValidationError, NotFoundError,
      PermissionDeniedError, ConflictError, TransientStoreError

Responses (core.responses):
    - error_response: ServiceResult failure -> DRF Response

Views (core.views):
    - health_check: Liveness/readiness endpoint
"""
