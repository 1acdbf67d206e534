"""Entry point: command-line client for browsing and reporting trash."""

import asyncio
import getpass
import sys

from wildwaste.api.client import WildWasteApi
from wildwaste.machines.reports import ReportCollectionMachine
from wildwaste.machines.session import SessionMachine
from wildwaste.map.reconcile import reconcile
from wildwaste.models import ALL_REPORTS, ReportDraft, Scope
from wildwaste.state import Authenticated, AuthError
from wildwaste.utils.formatter import render_history, render_markers

USAGE = """\
Usage:
  wildwaste map
  wildwaste history
  wildwaste report LAT LON TRASH_TYPE QUANTITY [NOTES...]
  wildwaste delete REPORT_ID
"""


class CommandFailed(Exception):
    """An intent resolved to a failure; the message is shown to the user."""


def _collect_credentials() -> tuple[str, str]:
    """Prompt for username and password in the terminal."""
    username = input("Username: ").strip()
    password = getpass.getpass("Password: ")
    return username, password


async def _login(api: WildWasteApi) -> Authenticated:
    session = SessionMachine(api)
    username, password = _collect_credentials()
    await session.login(username, password)

    state = session.state
    if isinstance(state, AuthError):
        raise CommandFailed(state.error.message)
    session.consume_event()
    print(f"[WildWaste] Logged in as {state.username} (user #{state.user_id})")
    return state


def _raise_on_failure(machine: ReportCollectionMachine) -> None:
    error = machine.state.error
    if error is not None:
        machine.consume_event()
        raise CommandFailed(error.message)


def _announce(machine: ReportCollectionMachine, succeeded: bool, message: str) -> bool:
    """Print the action outcome; return False if the follow-up refresh failed."""
    if not succeeded:
        _raise_on_failure(machine)
    print(f"[WildWaste] {message}")
    refresh_error = machine.state.error
    machine.consume_event()
    if refresh_error is not None:
        print(f"[WildWaste] Warning: could not refresh reports: {refresh_error.message}", file=sys.stderr)
        return False
    return True


async def show_map(api: WildWasteApi) -> str:
    machine = ReportCollectionMachine(api, ALL_REPORTS)
    await machine.fetch()
    _raise_on_failure(machine)
    return render_markers(reconcile(machine.state.collection, pending=None))


async def show_history(api: WildWasteApi) -> str:
    user = await _login(api)
    machine = ReportCollectionMachine(api, Scope.for_user(user.user_id))
    await machine.fetch()
    _raise_on_failure(machine)
    return render_history(machine.state.collection)


async def submit_report(api: WildWasteApi, args: list[str]) -> str:
    if len(args) < 4:
        raise ValueError("report needs LAT LON TRASH_TYPE QUANTITY.")
    latitude, longitude = float(args[0]), float(args[1])
    notes = " ".join(args[4:]) or None

    user = await _login(api)
    draft = ReportDraft(
        user_id=user.user_id,
        latitude=latitude,
        longitude=longitude,
        trash_type=args[2],
        quantity=args[3],
        notes=notes,
    )
    machine = ReportCollectionMachine(api, ALL_REPORTS)
    await machine.submit(draft)
    if not _announce(machine, machine.state.submission_succeeded, "Report Submitted Successfully!"):
        return ""
    return render_markers(reconcile(machine.state.collection, pending=None))


async def delete_report(api: WildWasteApi, args: list[str]) -> str:
    if len(args) != 1:
        raise ValueError("delete needs REPORT_ID.")
    report_id = int(args[0])

    user = await _login(api)
    machine = ReportCollectionMachine(api, Scope.for_user(user.user_id))
    await machine.delete(report_id)
    if not _announce(machine, machine.state.deletion_succeeded, "Report deleted successfully!"):
        return ""
    return render_history(machine.state.collection)


async def run(command: str, args: list[str], api: WildWasteApi | None = None) -> str:
    """Run one command against the service and return the text to print."""
    api = api or WildWasteApi()
    async with api:
        if command == "map":
            return await show_map(api)
        if command == "history":
            return await show_history(api)
        if command == "report":
            return await submit_report(api, args)
        if command == "delete":
            return await delete_report(api, args)
    raise ValueError(f"Unknown command '{command}'.")


def main() -> None:
    """CLI entry point."""
    args = sys.argv[1:]
    if not args or args[0] in ("-h", "--help"):
        print(USAGE)
        return

    try:
        output = asyncio.run(run(args[0], args[1:]))
    except (CommandFailed, ValueError) as exc:
        print(f"[WildWaste] {exc}", file=sys.stderr)
        sys.exit(1)
    print(output)


if __name__ == "__main__":
    main()
