class ContactFormValidationError(Exception):
    """Submission is missing required fields or has malformed values."""

    status_code = 400
    error = "Validation Error"
    message = "Please fill in all required fields correctly"


class MailConfigurationError(Exception):
    """SMTP credentials are not configured."""

    status_code = 500
    error = "Server Configuration Error"
    message = "SMTP credentials are not configured. Please contact the administrator."

    def __init__(self, missing: list[str]):
        # Only setting names, never their values
        self.missing = missing
        super().__init__(f"Missing SMTP credentials: {', '.join(missing)}")


class CorsError(Exception):
    """Origin is not allowed by the cross-origin policy."""

    status_code = 403
    error = "CORS Error"
    message = "Origin not allowed"

    def __init__(self, origin: str):
        self.origin = origin
        super().__init__(f"Not allowed by CORS: {origin}")


class PayloadTooLargeError(Exception):
    """Request body exceeds the configured size cap."""

    status_code = 413
    error = "Payload Too Large"

    def __init__(self, limit: int):
        self.limit = limit
        self.message = f"Request body exceeds {limit} bytes"
        super().__init__(self.message)
