from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, List, Tuple, Union
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from fall_builder.constants import ROSTER_TITLE
from fall_builder.roster import Composition, Roster
from fall_builder.utils import ensure_folder


def composition_rows(comp: Composition) -> List[Tuple[str, int, str, bool]]:
    """
    (type, taken, requirement, ok) rows shared by the text and PDF exports.
    """
    rows = [
        ("Leader", comp.leaders, str(comp.required_leaders), comp.leaders == comp.required_leaders),
        ("Core", comp.core, f">= {comp.required_core}", comp.core >= comp.required_core),
        ("Special", comp.special, "-", True),
    ]
    if comp.cap is not None:
        rows.append((comp.fourth_type, comp.fourth, f"<= {comp.cap}", comp.fourth <= comp.cap))
    else:
        rows.append((comp.fourth_type, comp.fourth, "-", True))
    return rows


def composition_line(comp: Composition) -> str:
    line = (f"Force Comp: Leaders {comp.leaders}/{comp.required_leaders} · Core {comp.core}/{comp.required_core} "
            f"(Special {comp.special}")
    if comp.cap is None:
        line += f", {comp.fourth_type} {comp.fourth})"
    else:
        line += f") · {comp.fourth_type}s {comp.fourth}/{comp.cap}"
    return line


def roster_summary_text(roster: Roster) -> str:
    comp = roster.composition()
    txt = [
        ROSTER_TITLE,
        f"Faction: {roster.faction_name or 'Unknown faction'}",
        f"Limit: {roster.points_limit}",
        f"Total: {roster.total_points()}",
        "",
        composition_line(comp),
        "",
    ]
    ordered = roster.ordered_entries()
    if not ordered:
        txt.append("(No units)")
    for idx, e in enumerate(ordered, start=1):
        txt.append(f"{idx}. [{e.type}] {e.name} - {e.points}")
    return "\n".join(txt)


def _build_pdf(roster: Roster, target: Union[str, BinaryIO]) -> None:
    styles = getSampleStyleSheet()
    story = []

    total = roster.total_points()
    limit = roster.points_limit
    story.append(Paragraph(f"{escape(roster.faction_name or 'Unknown faction')} Roster", styles["Title"]))
    status_color = "red" if total > limit else "black"
    story.append(Paragraph(f"Points: <font color='{status_color}'><b>{total}</b></font> / {limit}", styles["Heading2"]))
    story.append(Paragraph(escape(roster.status().message), styles["BodyText"]))
    story.append(Spacer(1, 6))

    # Force composition table
    fo_rows = [["Type", "Taken", "Required"]]
    for unit_type, taken, requirement, ok in composition_rows(roster.composition()):
        val_str = str(taken) if ok else f"<font color='red'>{taken}</font>"
        fo_rows.append([unit_type, Paragraph(val_str, styles["BodyText"]), requirement])
    t = Table(fo_rows, colWidths=[40*mm, 20*mm, 25*mm], hAlign="LEFT")
    t.setStyle(TableStyle([("GRID", (0, 0), (-1, -1), 0.5, colors.grey), ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey)]))
    story.append(t)
    story.append(Spacer(1, 12))

    # Units
    unit_rows = [["#", "Type", "Unit", "Pts"]]
    for idx, e in enumerate(roster.ordered_entries(), start=1):
        unit_rows.append([str(idx), e.type, Paragraph(escape(e.name), styles["BodyText"]), str(e.points)])
    if len(unit_rows) == 1:
        story.append(Paragraph("No units.", styles["BodyText"]))
    else:
        ut = Table(unit_rows, colWidths=[10*mm, 25*mm, 90*mm, 15*mm], hAlign="LEFT")
        ut.setStyle(TableStyle([
            ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
            ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ]))
        story.append(ut)

    story.append(Spacer(1, 12))
    story.append(Paragraph(f"Generated {datetime.now():%Y-%m-%d %H:%M}", styles["Italic"]))

    doc = SimpleDocTemplate(target, pagesize=A4, leftMargin=15*mm, rightMargin=15*mm, topMargin=15*mm, bottomMargin=15*mm)
    doc.build(story)


def write_roster_pdf(roster: Roster, path: Union[str, Path]) -> Path:
    path = Path(path)
    ensure_folder(path.parent)
    _build_pdf(roster, str(path))
    return path


def roster_pdf_bytes(roster: Roster) -> bytes:
    buffer = BytesIO()
    _build_pdf(roster, buffer)
    return buffer.getvalue()
