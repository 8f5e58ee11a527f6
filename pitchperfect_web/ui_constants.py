from __future__ import annotations

from pitchperfect_core.brand import APP_NAME, DISCLAIMER, TAGLINE
from pitchperfect_core.models import Branch

APP_TITLE = APP_NAME
APP_SUBTITLE = TAGLINE
APP_DISCLAIMER = DISCLAIMER

SECTION_GAP_MD = '<div style="margin-top:0.45rem;"></div>'

BRANCH_LABELS = {
    Branch.ACADEMY: "Academy",
    Branch.TECH_CENTRE: "Tech Centre",
    Branch.COACHING: "1:1 Coaching",
}

COACH_SECTIONS = ["Players", "Report Editor", "Admin"]

HELP_TEXT = {
    "config_required": (
        "The portal has no data store configured. Set PITCHPERFECT_DB_PATH in "
        ".streamlit/secrets.toml or the environment, then reload."
    ),
    "no_players": "No players are visible for your assigned teams.",
    "no_reports": "No report cards have been published yet.",
    "publish_disabled": "Generate the AI summary before publishing.",
    "narrative_missing_key": "Set OPENAI_API_KEY to enable AI summaries.",
    "draft_saved": "Edits are kept per player while you switch between players.",
}

SCORE_HELP = {
    "attendance": "Attendance at training and matches, 1 (rare) to 5 (every session).",
    "commitment": "Effort and punctuality, 1 to 5.",
    "application": "How well the player applies coaching points, 1 to 5.",
    "behaviour": "Conduct towards coaches and teammates, 1 to 5.",
}
