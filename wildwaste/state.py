"""State snapshots: the single source of truth each machine exposes to the UI.

Every snapshot is an immutable value. Machines replace it wholesale on each
transition, so a reader always sees one complete variant.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from wildwaste.errors import ErrorInfo
from wildwaste.models import EMPTY_COLLECTION, ReportCollection

T = TypeVar("T")


# --- AsyncResult ---


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    error: ErrorInfo


AsyncResult = Union[Idle, Loading, Success[T], Failure]

IDLE = Idle()
LOADING = Loading()


def is_terminal(result: AsyncResult) -> bool:
    """True for a resolved outcome (Success or Failure)."""
    return isinstance(result, (Success, Failure))


# --- Session ---


@dataclass(frozen=True)
class Anonymous:
    pass


@dataclass(frozen=True)
class Authenticating:
    pass


@dataclass(frozen=True)
class Authenticated:
    user_id: int
    username: str


@dataclass(frozen=True)
class Registered:
    username: str  # account created; not logged in


@dataclass(frozen=True)
class AuthError:
    error: ErrorInfo


SessionState = Union[Anonymous, Authenticating, Authenticated, Registered, AuthError]


# --- Report collection ---


@dataclass(frozen=True)
class ReportsState:
    fetch: AsyncResult[ReportCollection] = IDLE  # status of the latest fetch to resolve
    collection: ReportCollection = EMPTY_COLLECTION  # last successfully fetched set
    submission: AsyncResult[str] = IDLE  # Success carries the server message
    deletion: AsyncResult[str] = IDLE

    @property
    def is_loading(self) -> bool:
        return any(
            isinstance(result, Loading)
            for result in (self.fetch, self.submission, self.deletion)
        )

    @property
    def error(self) -> Optional[ErrorInfo]:
        """The pending failure to surface, submission and deletion first."""
        for result in (self.submission, self.deletion, self.fetch):
            if isinstance(result, Failure):
                return result.error
        return None

    @property
    def submission_succeeded(self) -> bool:
        return isinstance(self.submission, Success)

    @property
    def deletion_succeeded(self) -> bool:
        return isinstance(self.deletion, Success)
