"""
Domain errors. Every error is per-request and recoverable; none is fatal to the process.
The HTTP layer maps `status_code` straight onto the response.
"""


class CyberSafeError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(CyberSafeError):
    """Malformed input. Raised before any state is touched."""
    status_code = 422


class ConcurrencyConflict(CyberSafeError):
    """A compare-and-swap write found the stored row changed underneath it. Retry the read-modify-write."""
    status_code = 409


class PersistenceUnavailable(CyberSafeError):
    """The storage collaborator failed. Nothing was committed; safe to retry."""
    status_code = 503
