from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .fallback_data import DATASET_PATH, fallback_coaches, fallback_players, fallback_teams
from .models import Branch, Coach, Team
from .sanitizer import sanitize_player

REQUIRED_PLAYER_FIELDS = {"id", "name", "branch", "position", "accessCode"}
REQUIRED_COACH_FIELDS = {"id", "name", "email", "password", "isAdmin"}


def _missing_fields(row: dict[str, Any], required: set[str]) -> set[str]:
    return {field for field in required if field not in row}


def validate_dataset(path: Path | None = None) -> list[str]:
    errors: list[str] = []
    teams = fallback_teams(path)
    coaches = fallback_coaches(path)
    players = fallback_players(path)
    if not teams:
        errors.append("Dataset has no teams.")
    if not coaches:
        errors.append("Dataset has no coaches.")
    if not players:
        errors.append("Dataset has no players.")

    team_ids: set[str] = set()
    for team in teams:
        try:
            team_ids.add(Team.model_validate(team).id)
        except ValidationError as exc:
            errors.append(f"Team {team!r} is invalid: {exc.error_count()} error(s)")

    coach_ids: set[str] = set()
    for coach in coaches:
        missing = _missing_fields(coach, REQUIRED_COACH_FIELDS)
        if missing:
            errors.append(f"Coach '{coach.get('id')}' missing fields: {sorted(missing)}")
            continue
        try:
            model = Coach.model_validate(coach)
        except ValidationError as exc:
            errors.append(f"Coach '{coach.get('id')}' failed validation: {exc.error_count()} error(s)")
            continue
        if model.id in coach_ids:
            errors.append(f"Duplicate coach id '{model.id}'")
        coach_ids.add(model.id)
        for team_id in model.assigned_teams:
            if team_id not in team_ids:
                errors.append(f"Coach '{model.id}' assigned to unknown team '{team_id}'")

    player_ids: set[str] = set()
    for raw in players:
        missing = _missing_fields(raw, REQUIRED_PLAYER_FIELDS)
        if missing:
            errors.append(f"Player '{raw.get('id')}' missing fields: {sorted(missing)}")
            continue
        try:
            player = sanitize_player(raw)
        except ValidationError as exc:
            errors.append(f"Player '{raw.get('id')}' failed validation: {exc.error_count()} error(s)")
            continue
        if player.id in player_ids:
            errors.append(f"Duplicate player id '{player.id}'")
        player_ids.add(player.id)
        if player.branch is Branch.COACHING and raw.get("teamId"):
            errors.append(f"Player '{player.id}' is COACHING but has teamId '{raw['teamId']}'")
        if player.branch is not Branch.COACHING and raw.get("teamId") not in team_ids:
            errors.append(f"Player '{player.id}' references unknown team '{raw.get('teamId')}'")
        if player.jersey_number is not None and player.branch is not Branch.ACADEMY:
            errors.append(f"Player '{player.id}' has a jersey number outside the ACADEMY branch")
        for card in player.report_cards:
            if card.author_coach_id and card.author_coach_id not in coach_ids:
                errors.append(f"Report card '{card.id}' references unknown coach '{card.author_coach_id}'")

    return errors


if __name__ == "__main__":
    problems = validate_dataset(path=DATASET_PATH)
    if problems:
        print("Fallback dataset validation failed:")
        for p in problems:
            print(f"- {p}")
        raise SystemExit(1)
    print("Fallback dataset validation passed.")
