"""Error taxonomy shared by the transport, parsing and state layers."""

from dataclasses import dataclass
from enum import Enum


class ErrorOrigin(str, Enum):
    """Where a failure came from."""
    NETWORK = "network"  # unreachable, timeout, I/O failure
    SERVER = "server"  # parsed response with status != "success"
    PARSE = "parse"  # body did not match the expected shape


@dataclass(frozen=True)
class ErrorInfo:
    """Display-ready failure description."""
    message: str
    origin: ErrorOrigin


class ApiError(Exception):
    """A request that resolved to a failure. Carries the ErrorInfo to surface."""

    def __init__(self, info: ErrorInfo):
        super().__init__(info.message)
        self.info = info


def network_error(exc: BaseException, prefix: str) -> ErrorInfo:
    """Map an exception raised before any response arrived to a network ErrorInfo."""
    detail = str(exc) or type(exc).__name__
    return ErrorInfo(message=f"{prefix}: {detail}", origin=ErrorOrigin.NETWORK)


def server_error(message: str) -> ApiError:
    return ApiError(ErrorInfo(message=message, origin=ErrorOrigin.SERVER))


def parse_error(message: str) -> ApiError:
    return ApiError(ErrorInfo(message=message, origin=ErrorOrigin.PARSE))
