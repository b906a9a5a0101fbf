import logging

logger = logging.getLogger(__name__)


class TelehealthError(Exception):
    """Base error; carries the HTTP status it is surfaced as."""
    status_code = 500

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(TelehealthError):
    status_code = 400


class AuthenticationError(TelehealthError):
    status_code = 401


class NotFoundError(TelehealthError):
    status_code = 404


class UpstreamError(TelehealthError):
    """External service unreachable or returned a non-success status.

    The detail is only logged, never returned to the caller.
    """

    def to_dict(self):
        return {"error": self.message}


class StoreError(TelehealthError):
    pass


def register_error_handlers(api):
    @api.errorhandler(TelehealthError)
    def handle_telehealth_error(error):
        if isinstance(error, (UpstreamError, StoreError)):
            logger.error("%s: %s", error.message, error.details)
        return error.to_dict(), error.status_code
