"""Map reconciliation: turn reports plus local UI intent into markers, and
classify map gestures back into domain intents.

Everything here is a pure function of its arguments. Nothing is cached, so it
can be called from any thread.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from wildwaste.models import GeoPoint, Report, ReportCollection

DRAFT_LABEL = "New Report Location"
REPORT_SNIPPET = "Click for details"


class MarkerKind(str, Enum):
    REPORT = "report"
    DRAFT = "draft"


@dataclass(frozen=True)
class Marker:
    position: GeoPoint
    label: str
    kind: MarkerKind
    tag: Optional[int] = None  # report id; always None for the draft marker
    snippet: Optional[str] = None


@dataclass(frozen=True)
class PendingSubmission:
    """Client-only draft location. Discarded on submit, cancel or navigation."""
    point: Optional[GeoPoint] = None
    sheet_open: bool = False

    @property
    def is_open(self) -> bool:
        return self.sheet_open and self.point is not None


# Selection is a bare report id (a reference, not ownership); None when nothing is shown.
Selection = Optional[int]


def report_marker(report: Report) -> Marker:
    return Marker(
        position=report.position,
        label=report.trash_type,
        kind=MarkerKind.REPORT,
        tag=report.id,
        snippet=REPORT_SNIPPET,
    )


def reconcile(collection: ReportCollection,
              pending: Optional[PendingSubmission],
              selection: Selection = None) -> list[Marker]:
    """Build the marker set to render.

    One report marker per report, in collection order, then the draft marker
    last when a draft is open. selection never changes the marker set; it
    only decides which details panel the UI shows.
    """
    markers = [report_marker(report) for report in collection.values()]
    if pending is not None and pending.is_open:
        markers.append(Marker(position=pending.point, label=DRAFT_LABEL, kind=MarkerKind.DRAFT))
    return markers


# --- Local UI state helpers ---


def open_draft(point: GeoPoint) -> PendingSubmission:
    return PendingSubmission(point=point, sheet_open=True)


def close_draft() -> PendingSubmission:
    return PendingSubmission()


def selection_after_delete(selection: Selection, deleted_id: int) -> Selection:
    """Clear the selection if it referenced the deleted report."""
    return None if selection == deleted_id else selection


# --- Gesture classification ---


@dataclass(frozen=True)
class LongPress:
    point: GeoPoint


@dataclass(frozen=True)
class MarkerTap:
    marker: Marker


@dataclass(frozen=True)
class MapTap:
    point: GeoPoint


MapEvent = Union[LongPress, MarkerTap, MapTap]


@dataclass(frozen=True)
class OpenDraft:
    """Intent: open the submission sheet at point."""
    point: GeoPoint


@dataclass(frozen=True)
class SelectReport:
    """Intent: show the details of report_id."""
    report_id: int


Intent = Union[OpenDraft, SelectReport]


def classify_event(event: MapEvent) -> Optional[Intent]:
    """Map a gesture to a domain intent, or None when it has no domain meaning.

    Long-press opens a draft, a tap on a report marker selects that report.
    Taps on empty map and on the draft marker are left to the UI.
    """
    if isinstance(event, LongPress):
        return OpenDraft(point=event.point)
    if isinstance(event, MarkerTap):
        if event.marker.kind is MarkerKind.REPORT and event.marker.tag is not None:
            return SelectReport(report_id=event.marker.tag)
        return None
    if isinstance(event, MapTap):
        return None
    raise TypeError(f"Unknown map event: {event!r}")
