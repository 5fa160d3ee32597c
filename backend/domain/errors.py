"""Domain exceptions.

Every error carries the message shown to the client and the HTTP status
the API layer answers with. Lookup failures answer 200 with an error
envelope, which is what existing clients expect.
"""


class LicenseError(Exception):
    status_code = 200
    default_message = "An error occurred."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingKeyError(LicenseError):
    default_message = "No key provided."


class InvalidKeyError(LicenseError):
    """No active record matches. Deliberately vague about why."""
    default_message = "Invalid or expired key."


class KeyExpiredError(LicenseError):
    default_message = "Key has expired."


class KeyNotFoundError(LicenseError):
    default_message = "Key not found."


class InvalidTelemetryError(LicenseError):
    default_message = "Invalid telemetry ID."


class UnauthorizedError(LicenseError):
    status_code = 403
    default_message = "Unauthorized."


class BadRequestError(LicenseError):
    status_code = 400
    default_message = "Invalid payload — expected { keys: {...} }"
