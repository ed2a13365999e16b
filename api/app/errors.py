"""Failure kinds of the notifier endpoint, each with its HTTP status."""


class NotifierError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MethodNotAllowed(NotifierError):
    status_code = 405

    def __init__(self):
        super().__init__("Method not allowed")


class MissingConfiguration(NotifierError):
    status_code = 500

    def __init__(self, missing: list[str]):
        super().__init__("Missing env vars: " + ", ".join(missing))
        self.missing = missing


class InvalidInput(NotifierError):
    status_code = 400

    def __init__(self):
        super().__init__("Invalid JSON")


class UpstreamError(NotifierError):
    """Telegram answered with a non-success status."""

    status_code = 502

    def __init__(self, body: str):
        super().__init__("Telegram error: " + body)
        self.body = body


class DeliveryError(NotifierError):
    """The outbound call itself failed (connect, DNS, timeout)."""

    status_code = 500

    def __init__(self, reason: str):
        super().__init__("Fetch error: " + reason)
        self.reason = reason


class InvalidConfiguration(NotifierError):
    """An environment variable is set but cannot be parsed."""

    status_code = 500

    def __init__(self, invalid: list[str]):
        super().__init__("Invalid env vars: " + ", ".join(invalid))
        self.invalid = invalid
