"""Error taxonomy shared by the engine, the store adapters and the HTTP layer.

Each error carries the HTTP status the API answers with; the app factory
renders any ``GameError`` as ``{"error": message}``.
"""


class GameError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.message}


class ValidationError(GameError):
    """Missing or malformed input fields."""
    status_code = 400


class NotFoundError(GameError):
    """Unknown session or player."""
    status_code = 404


class ConflictError(GameError):
    """Request clashes with the current session state (duplicate name, partner precondition)."""
    status_code = 400


class StoreConflictError(ConflictError):
    """Compare-and-swap retries ran out."""
    status_code = 409


class StoreError(GameError):
    """The underlying key-value store failed on get or put."""
    status_code = 500
