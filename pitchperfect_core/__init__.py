from .assembly import assemble, assemble_report_card, prepend_report_card
from .auth import authenticate_coach, authenticate_parent
from .drafts import Draft, DraftBuffer
from .errors import (
    ConfigurationError,
    ImageUploadError,
    MissingNarrativeError,
    NarrativeError,
    PortalError,
    StoreError,
)
from .metrics import mean_rating, round_half_up, safe_div
from .models import (
    AttendanceRecord,
    Branch,
    Coach,
    Improvements,
    Narrative,
    Player,
    RatingsSummary,
    ReportCard,
    Stat,
    Target,
    Team,
    UserRole,
)
from .publishing import publish_report
from .sanitizer import sanitize_player, sanitize_report_card
from .skills import SKILL_NAMES, SKILL_TEMPLATE, create_stats, overall_rating
from .sync import LoadReport, SyncCoordinator, WriteResult
from .visibility import visible_players

__all__ = [
    "assemble",
    "assemble_report_card",
    "prepend_report_card",
    "authenticate_coach",
    "authenticate_parent",
    "Draft",
    "DraftBuffer",
    "PortalError",
    "ConfigurationError",
    "ImageUploadError",
    "StoreError",
    "NarrativeError",
    "MissingNarrativeError",
    "safe_div",
    "round_half_up",
    "mean_rating",
    "AttendanceRecord",
    "Branch",
    "Coach",
    "Improvements",
    "Narrative",
    "Player",
    "RatingsSummary",
    "ReportCard",
    "Stat",
    "Target",
    "Team",
    "UserRole",
    "publish_report",
    "sanitize_player",
    "sanitize_report_card",
    "SKILL_NAMES",
    "SKILL_TEMPLATE",
    "create_stats",
    "overall_rating",
    "LoadReport",
    "SyncCoordinator",
    "WriteResult",
    "visible_players",
]
