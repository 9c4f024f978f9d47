"""
Error kinds surfaced to users as plain text.

Every kind carries a message that is safe to show as-is. The relay kinds
also carry the HTTP status /api/chat answers with.
"""


class StudyBotError(Exception):
    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class InvalidRequestError(StudyBotError):
    status_code = 400
    default_message = "Message is required"


class ConfigurationError(StudyBotError):
    status_code = 500
    default_message = "API key not configured"


class UpstreamError(StudyBotError):
    """Non-success answer from the AI API; keeps the upstream status."""

    status_code = 502
    default_message = "API error"


class AuthError(StudyBotError):
    """Failure reported by the auth service, message passed through verbatim."""

    default_message = "Authentication failed"


class ConversationNotFound(StudyBotError):
    """No stored conversation for the user. Callers treat this as empty."""

    default_message = "No rows found"
