# errors.py
# request-terminal failures; main.py renders them as {"error": <message>}


class PlannerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PlannerError):
    """Missing/invalid destination or malformed day count."""
    status_code = 400


class GeocodeError(PlannerError):
    """Destination could not be resolved to coordinates."""
    status_code = 400


class PoiFetchError(PlannerError):
    """POI index unreachable, timed out or answered garbage."""
    status_code = 502


class PersistenceError(PlannerError):
    status_code = 500


class AuthError(PlannerError):
    status_code = 401


class ConflictError(PlannerError):
    status_code = 409
