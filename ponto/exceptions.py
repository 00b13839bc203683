"""
Domain error taxonomy.

Each error carries the HTTP status it maps to; the API layer turns them into
`{"success": false, "error": ...}` responses.
"""


class PontoError(Exception):
    """Base class for every domain error"""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class Unauthorized(PontoError):
    """Missing or invalid credential"""

    status_code = 401


class Forbidden(PontoError):
    """Valid credential, insufficient role"""

    status_code = 403


class NotFound(PontoError):
    status_code = 404


class ValidationError(PontoError):
    """Malformed input: missing fields, invalid coordinates, invalid enum"""

    status_code = 400

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message)


class LocationUnavailable(PontoError):
    """Client-side geolocation failure, timeout or permission denial"""

    status_code = 400


class StorageError(PontoError):
    """Photo upload or delete failure"""

    status_code = 500


class ConfigurationError(PontoError):
    """Company settings singleton missing or malformed"""

    status_code = 500


class InvalidStateTransition(PontoError):
    """Decision attempted on an item that is already decided"""

    status_code = 409
