"""Output Formatter: renders reports and marker sets as Markdown for the CLI."""

from wildwaste.map.reconcile import Marker, MarkerKind
from wildwaste.models import Report, ReportCollection


def format_reported_at(report: Report) -> str:
    """Short display date ("Mar 05, 2025"), falling back to the raw timestamp."""
    parsed = report.reported_at_datetime
    if parsed is None:
        return report.reported_at
    return parsed.strftime("%b %d, %Y")


def render_markers(markers: list[Marker]) -> str:
    """Markdown table of the marker set, in render order."""
    if not markers:
        return "*No reports on the map.*"

    lines = [
        "| Report | Label | Latitude | Longitude |",
        "|--------|-------|----------|-----------|",
    ]
    for marker in markers:
        tag = "new" if marker.kind is MarkerKind.DRAFT else str(marker.tag)
        label = marker.label.replace("|", "\\|")
        lines.append(
            f"| {tag} | {label} | {marker.position.latitude:.5f} | {marker.position.longitude:.5f} |"
        )
    return "\n".join(lines)


def render_report(report: Report) -> str:
    """Details view for a single report."""
    lines = [f"### Report #{report.id}", ""]
    lines.append(f"- **Type:** {report.trash_type}")
    lines.append(f"- **Quantity:** {report.quantity}")
    lines.append(f"- **Reported by:** {report.reporter_display_name or 'Unknown'}")
    lines.append(f"- **Date:** {format_reported_at(report)}")
    lines.append(f"- **Location:** {report.latitude:.5f}, {report.longitude:.5f}")
    if report.image_data is None:
        lines.append("- **Image:** No image provided")
    else:
        lines.append(f"- **Image:** {len(report.image_data)} bytes")
    if report.notes and report.notes.strip():
        lines.append("")
        lines.append("**Notes**")
        lines.append("")
        lines.append(report.notes)
    return "\n".join(lines)


def render_history(collection: ReportCollection) -> str:
    """A user's reports, one entry per report, in server order."""
    if not collection:
        return "*You haven't submitted any reports yet.*"

    lines = []
    for report in collection.values():
        lines.append(
            f"- #{report.id} **{report.trash_type}** "
            f"(Quantity: {report.quantity}) on {format_reported_at(report)}"
        )
    return "\n".join(lines)
