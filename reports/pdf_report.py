from __future__ import annotations

from pathlib import Path
from typing import IO

from pitchperfect_core.models import STAT_GROUPS, Player, ReportCard
from pitchperfect_core.skills import group_means


def _fmt(value: float | None, decimals: int = 1) -> str:
    if value is None:
        return "-"
    return f"{value:.{decimals}f}"


def _wrap(text: str, width: int = 95) -> list[str]:
    words = text.split()
    lines: list[str] = []
    current = ""
    for word in words:
        candidate = f"{current} {word}".strip()
        if len(candidate) > width and current:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines or ["-"]


def generate_report_card_pdf(
    target: str | Path | IO[bytes],
    player: Player,
    card: ReportCard,
    logo_label: str = "PitchPerfect Connect",
) -> None:
    try:
        from reportlab.lib import colors
        from reportlab.lib.pagesizes import A4
        from reportlab.pdfgen import canvas
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "ReportLab is required for PDF export. Install with: pip install reportlab"
        ) from exc

    c = canvas.Canvas(str(target) if isinstance(target, (str, Path)) else target, pagesize=A4)
    width, height = A4

    left = 42
    y = height - 40

    def line(text: str, size: int = 10, bold: bool = False, color=colors.black, gap: int = 14) -> None:
        nonlocal y
        if y < 50:
            c.showPage()
            y = height - 40
        c.setFillColor(color)
        c.setFont("Helvetica-Bold" if bold else "Helvetica", size)
        c.drawString(left, y, text)
        y -= gap

    muted = colors.HexColor("#5F6F67")

    line(logo_label, size=18, bold=True)
    line(f"{card.quarter} {card.season} report card", size=10, color=muted, gap=18)

    player_line = f"{player.name} | {player.position or '-'} | {player.branch.value.replace('_', ' ').title()}"
    if player.jersey_number is not None:
        player_line += f" | #{player.jersey_number}"
    line(f"Player: {player_line}", size=10, gap=14)
    if card.author_coach_name:
        line(f"Coach: {card.author_coach_name}", size=10, gap=14)
    line(f"Overall rating: {_fmt(card.overall_rating)} / 5", size=12, bold=True, gap=18)

    line("Attendance & Attitude", size=12, bold=True)
    line(
        f"Attendance {card.attendance.attendance_score}/5   Commitment {card.attendance.commitment_score}/5   "
        f"Application {card.ratings_summary.application_score}/5   Behaviour {card.ratings_summary.behaviour_score}/5",
        size=9,
        gap=18,
    )

    line("Skills", size=12, bold=True)
    means = group_means(card.stats)
    for group in STAT_GROUPS:
        group_stats = [s for s in card.stats if s.group == group]
        if not group_stats:
            continue
        line(f"{group} (avg {_fmt(means.get(group))})", size=10, bold=True, gap=12)
        for stat in group_stats:
            line(f"  {stat.name:<24} {stat.value}/{stat.full_mark}", size=9, gap=11)
        y -= 4

    line("Coach Summary", size=12, bold=True)
    for text in _wrap(card.final_summary):
        line(text, size=9, gap=11)
    y -= 6

    line("Strengths", size=12, bold=True)
    if card.strengths:
        for strength in card.strengths:
            line(f"• {strength}", size=9, gap=11)
    else:
        line("-", size=9)
    y -= 6

    line("Areas to Improve", size=12, bold=True)
    line(f"Key area: {card.improvements.key_area or '-'}", size=9, gap=11)
    line(f"Build on: {card.improvements.build_on_area or '-'}", size=9, gap=15)

    if card.targets:
        line("Targets", size=12, bold=True)
        for t in card.targets:
            line(f"[{'x' if t.achieved else ' '}] {t.description}", size=9, gap=11)
        y -= 4

    if card.coach_footer_note:
        for text in _wrap(card.coach_footer_note):
            line(text, size=8, color=muted, gap=10)

    c.showPage()
    c.save()
