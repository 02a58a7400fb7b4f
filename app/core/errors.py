class AppError(Exception):
    """
    Base class for failures that map straight onto an HTTP response.
    Handlers in app.main turn them into {"success": False, "message": ...}.
    """
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: str = None):
        if message:
            self.message = message
        super().__init__(self.message)


class Unauthorized(AppError):
    status_code = 401
    message = "Unauthorized access"


class Forbidden(AppError):
    status_code = 403
    message = "Forbidden access"


class NotFound(AppError):
    status_code = 404
    message = "Not found"


class UpstreamFailure(AppError):
    """Supabase, Stripe or SMTP failed or timed out. Safe to retry."""
    status_code = 503
    message = "Service temporarily unavailable, please retry"


class DuplicateKeyError(Exception):
    """Raised by the persistence layer when a unique constraint rejects a write."""
