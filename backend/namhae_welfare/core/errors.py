"""
Namhae Welfare — Domain Errors
Every error carries the HTTP status it maps to; main.py renders them as {"error": message}.
"""


class WelfareError(Exception):
    """Base class for errors surfaced to API clients."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(WelfareError):
    """Missing or invalid input, including the minimum-age rule."""
    status_code = 400


class NotFoundError(WelfareError):
    """Unknown user key or survey session."""
    status_code = 404


class StorageError(WelfareError):
    """Any persistence failure. Clients only ever see the generic message."""
    status_code = 500

    def __init__(self, message: str = "데이터 처리 중 오류가 발생했습니다."):
        super().__init__(message)
