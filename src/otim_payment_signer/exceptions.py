"""Exceptions raised by the OTIM payment signer."""

from typing import Any, List, Optional


class OtimSignerError(Exception):
    """Base class for every error raised by this package."""


class DecodeError(OtimSignerError):
    """ABI-encoded instruction arguments could not be decoded."""


class EncodingError(OtimSignerError):
    """Typed data could not be assembled from an instruction."""


class ExternalCallError(OtimSignerError):
    """A call to the payments API or the signer API failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ConfigError(OtimSignerError):
    """Configuration is missing or invalid."""

    def __init__(self, problems: List[str]):
        super().__init__("Invalid configuration: " + "; ".join(problems))
        self.problems = problems
