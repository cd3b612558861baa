"""订阅处理流程中使用的异常类型。"""


class SubscriptionError(Exception):
    """Base class for every error raised while patching a subscription."""


class NetworkError(SubscriptionError):
    """Raised when a fetch fails or the server answers with a non-success status."""

    def __init__(self, message, url=None, status_code=None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class DecodeError(SubscriptionError):
    """Raised when Base64 content cannot be decoded."""


class ParseError(SubscriptionError):
    """Raised when the YAML document is malformed or is not a mapping."""


class UnsupportedFormatError(SubscriptionError):
    """Raised when the subscription is neither a YAML link nor Base64 content."""


class InvalidRequestError(SubscriptionError):
    """Raised when an inbound edit request is missing required fields."""
