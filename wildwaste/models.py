"""
Domain models for trash reports, drafts and fetch scopes.

Reports are materialized from server responses and never mutated; a changed
report arrives as a full replacement in the next fetch.
"""
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from wildwaste.errors import parse_error
from wildwaste.utils.images import decode_image, encode_image


@dataclass(frozen=True)
class GeoPoint:
    """WGS84 point in decimal degrees."""
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Scope:
    """Which subset of reports a fetch targets. user_id None means all reports."""
    user_id: Optional[int] = None

    @classmethod
    def for_user(cls, user_id: int) -> "Scope":
        return cls(user_id=user_id)

    @property
    def is_all(self) -> bool:
        return self.user_id is None


ALL_REPORTS = Scope()


@dataclass(frozen=True)
class Report:
    """A single waste observation as returned by the server."""
    id: int
    reporter_id: int
    latitude: float
    longitude: float
    trash_type: str
    quantity: str
    reported_at: str  # ISO-8601, no zone offset
    image_data: Optional[bytes] = None
    notes: Optional[str] = None
    reporter_display_name: Optional[str] = None  # only in "with usernames" listings

    @property
    def position(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)

    @property
    def reported_at_datetime(self) -> Optional[datetime]:
        """Naive datetime for reported_at, or None if it does not parse.

        The server omits the zone, so no tzinfo is attached.
        """
        try:
            return datetime.fromisoformat(self.reported_at)
        except ValueError:
            return None


class ReportCollection(Mapping):
    """Read-only mapping of report id to Report, in server order.

    Ids are unique; building a collection from a list with a repeated id
    raises ValueError.
    """

    def __init__(self, reports: Iterable[Report] = ()):
        by_id: dict[int, Report] = {}
        for report in reports:
            if report.id in by_id:
                raise ValueError(f"Duplicate report id {report.id}.")
            by_id[report.id] = report
        self._reports = by_id

    def __getitem__(self, report_id: int) -> Report:
        return self._reports[report_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._reports)

    def __len__(self) -> int:
        return len(self._reports)

    def __hash__(self) -> int:
        return hash(frozenset(self._reports.items()))

    def reports(self) -> list[Report]:
        return list(self._reports.values())

    def __repr__(self) -> str:
        return f"ReportCollection(ids={list(self._reports)})"


EMPTY_COLLECTION = ReportCollection()


@dataclass(frozen=True)
class ReportDraft:
    """A report the user is about to submit. Has no id until the server assigns one."""
    user_id: int
    latitude: float
    longitude: float
    trash_type: str
    quantity: str
    image_data: Optional[bytes] = None
    notes: Optional[str] = None

    @classmethod
    def at(cls, point: GeoPoint, user_id: int, trash_type: str, quantity: str,
           image_data: Optional[bytes] = None, notes: Optional[str] = None) -> "ReportDraft":
        """Build a draft at a point picked on the map."""
        return cls(
            user_id=user_id,
            latitude=point.latitude,
            longitude=point.longitude,
            trash_type=trash_type,
            quantity=quantity,
            image_data=image_data,
            notes=notes,
        )

    def to_wire(self) -> dict:
        """Request body for POST reports."""
        return {
            "user_id": self.user_id,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "trash_type": self.trash_type,
            "quantity": self.quantity,
            "image_base64": encode_image(self.image_data),
            "notes": self.notes,
        }


# --- Wire parsing ---

_REQUIRED_FIELDS = {
    "id": int,
    "user_id": int,
    "latitude": (int, float),
    "longitude": (int, float),
    "trash_type": str,
    "quantity": str,
    "reported_at": str,
}

_OPTIONAL_TEXT_FIELDS = ("image_base64", "notes", "username")


def parse_report(data: dict) -> Report:
    """Build a Report from its wire shape. Raises ApiError(parse) on bad shape."""
    if not isinstance(data, dict):
        raise parse_error("Report entry is not an object.")

    for name, expected in _REQUIRED_FIELDS.items():
        value = data.get(name)
        # bool is an int subclass; never a valid id or coordinate
        if value is None or isinstance(value, bool) or not isinstance(value, expected):
            raise parse_error(f"Report field '{name}' is missing or has the wrong type.")

    for name in _OPTIONAL_TEXT_FIELDS:
        value = data.get(name)
        if value is not None and not isinstance(value, str):
            raise parse_error(f"Report field '{name}' has the wrong type.")

    try:
        latitude = float(data["latitude"])
        longitude = float(data["longitude"])
    except OverflowError as exc:
        raise parse_error("Report coordinates are out of range.") from exc

    return Report(
        id=data["id"],
        reporter_id=data["user_id"],
        latitude=latitude,
        longitude=longitude,
        trash_type=data["trash_type"],
        quantity=data["quantity"],
        reported_at=data["reported_at"],
        image_data=decode_image(data.get("image_base64"), report_id=data["id"]),
        notes=data.get("notes"),
        reporter_display_name=data.get("username"),
    )


def parse_collection(body: dict) -> ReportCollection:
    """Build the collection from a successful list response's `data` array."""
    entries = body.get("data")
    if entries is None:
        return EMPTY_COLLECTION
    if not isinstance(entries, list):
        raise parse_error("Report list 'data' is not an array.")

    reports = [parse_report(entry) for entry in entries]
    try:
        return ReportCollection(reports)
    except ValueError as exc:
        raise parse_error(str(exc)) from exc
