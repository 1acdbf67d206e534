"""Report Collection state machine: fetch, submit and delete against one scope.

The map screen drives one instance scoped to all reports; the history screen
drives another scoped to the logged-in user.

Concurrent fetches are not coalesced. Unless fencing is enabled, every fetch
applies its result when it resolves, so the last response to resolve wins
regardless of the order the requests were issued in.
"""

import sys

from wildwaste.config import get_config
from wildwaste.errors import ApiError
from wildwaste.machines.base import StateMachine
from wildwaste.models import ALL_REPORTS, ReportDraft, Scope, parse_collection
from wildwaste.state import (
    IDLE,
    LOADING,
    Failure,
    Loading,
    ReportsState,
    Success,
    is_terminal,
)
from wildwaste.utils.validator import validate_draft

FETCH_REPORTS_FAILED = "Failed to fetch reports"
FETCH_HISTORY_FAILED = "Failed to fetch history"
SUBMIT_FAILED = "Failed to submit report"
DELETE_FAILED = "Failed to delete report"


def _fetch_fallback(scope: Scope) -> str:
    return FETCH_REPORTS_FAILED if scope.is_all else FETCH_HISTORY_FAILED


class ReportCollectionMachine(StateMachine[ReportsState]):
    network_message = "Connection error"

    def __init__(self, api, scope: Scope = ALL_REPORTS, fence_fetches: bool | None = None):
        super().__init__(ReportsState())
        self._api = api
        self.scope = scope
        if fence_fetches is None:
            fence_fetches = get_config().get("fence_stale_fetches", False)
        self._fence_fetches = fence_fetches
        self._last_issued = 0

    def _is_stale(self, token: int) -> bool:
        if self._fence_fetches and token < self._last_issued:
            print(
                f"[WildWaste] Discarding fetch #{token}: fetch #{self._last_issued} supersedes it.",
                file=sys.stderr,
            )
            return True
        return False

    async def fetch(self, scope: Scope | None = None) -> None:
        """Replace the collection with the server's current set for scope."""
        scope = scope or self.scope
        self._last_issued += 1
        token = self._last_issued

        self._update(fetch=LOADING)
        try:
            body = await self._send(self._api.list_reports, scope, fallback=_fetch_fallback(scope))
            collection = parse_collection(body)
        except ApiError as exc:
            if not self._is_stale(token):
                self._update(fetch=Failure(exc.info))
            return

        if not self._is_stale(token):
            self._update(fetch=Success(collection), collection=collection)

    async def submit(self, draft: ReportDraft, scope: Scope | None = None) -> None:
        """Create a report, then re-fetch. The new report appears only after that fetch."""
        validate_draft(draft)
        if isinstance(self.state.submission, Loading):
            print("[WildWaste] Ignoring submit: a submission is already in flight.", file=sys.stderr)
            return

        self._update(submission=LOADING)
        try:
            body = await self._send(self._api.submit_report, draft, fallback=SUBMIT_FAILED)
        except ApiError as exc:
            self._update(submission=Failure(exc.info))
            return

        self._update(submission=Success(body.get("message") or ""))
        await self.fetch(scope)

    async def delete(self, report_id: int, scope: Scope | None = None) -> None:
        """Delete a report, then re-fetch scope. Selection is left to the caller."""
        if isinstance(self.state.deletion, Loading):
            print("[WildWaste] Ignoring delete: a deletion is already in flight.", file=sys.stderr)
            return

        self._update(deletion=LOADING)
        try:
            body = await self._send(self._api.delete_report, report_id, fallback=DELETE_FAILED)
        except ApiError as exc:
            self._update(deletion=Failure(exc.info))
            return

        self._update(deletion=Success(body.get("message") or ""))
        await self.fetch(scope)

    def consume_event(self) -> None:
        """Clear one-shot submission, deletion and fetch-error outcomes.

        The collection and a successful fetch result are steady state and stay.
        """
        state = self.state
        changes = {}
        if is_terminal(state.submission):
            changes["submission"] = IDLE
        if is_terminal(state.deletion):
            changes["deletion"] = IDLE
        if isinstance(state.fetch, Failure):
            changes["fetch"] = IDLE
        if changes:
            self._update(**changes)
