"""Wire-level entity models.

Entities travel to and from the row store as JSON blobs with camelCase keys,
so every model carries a camelCase alias and is dumped with ``by_alias=True``.
Report cards are frozen: once published they are only ever replaced by a new
player value with a longer history, never edited in place.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SCHEMA_VERSION = 2
UNASSIGNED_TEAM_ID = "Unassigned"


class Branch(str, Enum):
    ACADEMY = "ACADEMY"
    COACHING = "COACHING"
    TECH_CENTRE = "TECH_CENTRE"


class UserRole(str, Enum):
    PARENT = "PARENT"
    COACH = "COACH"


StatGroup = Literal["Technical", "Tactical", "Physical", "Psychological"]
STAT_GROUPS: tuple[str, ...] = ("Technical", "Tactical", "Physical", "Psychological")


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FrozenWireModel(WireModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Stat(FrozenWireModel):
    name: str
    group: StatGroup
    value: int = Field(ge=1, le=5)
    full_mark: int = 5


class AttendanceRecord(FrozenWireModel):
    attendance_score: int = Field(ge=1, le=5)
    commitment_score: int = Field(ge=1, le=5)
    note: str = ""


class RatingsSummary(FrozenWireModel):
    application_score: int = Field(ge=1, le=5)
    behaviour_score: int = Field(ge=1, le=5)
    coach_comment: str = ""


class Improvements(FrozenWireModel):
    key_area: str = ""
    build_on_area: str = ""

    def is_blank(self) -> bool:
        return not (self.key_area.strip() or self.build_on_area.strip())


class Target(FrozenWireModel):
    id: str
    description: str
    achieved: bool = False


class ReportCard(FrozenWireModel):
    id: str
    season: str
    quarter: str
    date: str
    author_coach_id: Optional[str] = None
    author_coach_name: Optional[str] = None
    attendance: AttendanceRecord
    stats: tuple[Stat, ...]
    strengths: tuple[str, ...] = ()
    improvements: Improvements = Improvements()
    ratings_summary: RatingsSummary
    final_summary: str = ""
    coach_footer_note: str = ""
    targets: tuple[Target, ...] = ()
    overall_rating: float = Field(ge=0, le=5)


class Team(FrozenWireModel):
    id: str
    name: str


class Player(FrozenWireModel):
    id: str
    name: str
    branch: Branch = Branch.ACADEMY
    team_id: Optional[str] = None
    position: str = ""
    jersey_number: Optional[int] = None
    image_url: str = ""
    access_code: str = ""
    report_cards: tuple[ReportCard, ...] = ()
    schema_version: int = SCHEMA_VERSION

    @property
    def latest_report(self) -> ReportCard | None:
        return self.report_cards[0] if self.report_cards else None


class Coach(FrozenWireModel):
    id: str
    name: str
    role: UserRole = UserRole.COACH
    email: str = ""
    instagram_handle: Optional[str] = None
    password: Optional[str] = None
    assigned_teams: tuple[str, ...] = ()
    is_admin: bool = False
    image_url: Optional[str] = None


class Narrative(FrozenWireModel):
    summary: str
    strengths: tuple[str, ...] = ()
    improvements: Improvements = Improvements()

