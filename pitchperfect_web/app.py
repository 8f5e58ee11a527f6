from __future__ import annotations

import logging
import uuid
from io import BytesIO
from typing import Any, Iterable

import altair as alt
import pandas as pd
import streamlit as st

from pitchperfect_core.auth import authenticate_coach, authenticate_parent
from pitchperfect_core.drafts import TERMS, DraftBuffer
from pitchperfect_core.errors import ConfigurationError, ImageUploadError, MissingNarrativeError, NarrativeError
from pitchperfect_core.images import image_data_url
from pitchperfect_core.models import STAT_GROUPS, UNASSIGNED_TEAM_ID, Branch, Coach, Player, ReportCard, Team
from pitchperfect_core.narrative import NarrativeGenerator, build_generator_from_settings
from pitchperfect_core.publishing import publish_report
from pitchperfect_core.skills import SKILL_TEMPLATE, group_means
from pitchperfect_core.sync import SyncCoordinator, WriteResult
from pitchperfect_core.teams import bulk_team_names, new_teams
from pitchperfect_core.trends import compare_to_previous, history_long_frame, stat_frame
from pitchperfect_core.visibility import players_by_branch, visible_players
from pitchperfect_store.sqlite import SqliteRowStore
from pitchperfect_web.config import PortalSettings, configure_logging, load_settings
from pitchperfect_web.ui_constants import (
    APP_DISCLAIMER,
    APP_SUBTITLE,
    APP_TITLE,
    BRANCH_LABELS,
    COACH_SECTIONS,
    HELP_TEXT,
    SCORE_HELP,
    SECTION_GAP_MD,
)
from pitchperfect_web.ui_styles import get_app_css
from reports.pdf_report import generate_report_card_pdf

logger = logging.getLogger(__name__)

COORDINATOR_KEY = "coordinator"
BUFFER_KEY = "draft_buffer"
ROLE_KEY = "role"
USER_ID_KEY = "user_id"
FLASH_KEY = "flash"
SELECTED_PLAYER_KEY = "coach_selected_player"
ANSWER_KEY = "coach_ai_answer"
GROUP_COLORS = ["#0E3B2E", "#2FBF71", "#2EA3FF", "#E3B341", "#D64545"]


# Resources


@st.cache_resource(show_spinner=False)
def _get_store(db_path: str) -> SqliteRowStore:
    store = SqliteRowStore(db_path)
    logger.info("Opened row store at %s", db_path)
    return store


@st.cache_resource(show_spinner=False)
def _get_generator(api_key: str, model: str) -> NarrativeGenerator:
    return build_generator_from_settings(api_key, model)


def _generator(settings: PortalSettings) -> NarrativeGenerator | None:
    if not settings.api_key:
        return None
    return _get_generator(settings.api_key, settings.model)


def _session_coordinator(settings: PortalSettings) -> SyncCoordinator:
    coordinator = st.session_state.get(COORDINATOR_KEY)
    if coordinator is not None:
        return coordinator
    store = _get_store(str(settings.db_path))
    coordinator = SyncCoordinator(store)
    report = coordinator.initial_load()
    if report.skipped_records:
        logger.warning("Skipped %d unreadable records on load", report.skipped_records)
    coordinator.start_realtime()
    st.session_state[COORDINATOR_KEY] = coordinator
    return coordinator


def _session_buffer(coach_id: str | None) -> DraftBuffer:
    buffer = st.session_state.get(BUFFER_KEY)
    if buffer is None or buffer.current_coach_id != coach_id:
        buffer = DraftBuffer(coach_id)
        st.session_state[BUFFER_KEY] = buffer
    return buffer


# Helpers


def _inject_styles() -> None:
    st.markdown(get_app_css(), unsafe_allow_html=True)


def _wkey(player_id: str, name: str) -> str:
    return f"draft::{player_id}::{name}"


def _nkey(player_id: str, name: str) -> str:
    return f"narrative::{player_id}::{name}"


def _clear_widget_state(prefix: str) -> None:
    for key in [k for k in st.session_state.keys() if str(k).startswith(prefix)]:
        del st.session_state[key]


def _flash(message: str, kind: str = "success") -> None:
    st.session_state[FLASH_KEY] = (kind, message)


def _render_flash() -> None:
    flash = st.session_state.pop(FLASH_KEY, None)
    if not flash:
        return
    kind, message = flash
    getattr(st, kind, st.info)(message)


def _show_write_results(results: Iterable[WriteResult], success_message: str) -> None:
    failures = [r for r in results if not r.ok]
    if failures:
        for failure in failures:
            st.error(f"Could not save {failure.collection} '{failure.record_id}': {failure.error}")
        return
    _flash(success_message)
    st.rerun()


def _team_name(coordinator: SyncCoordinator, team_id: str | None) -> str:
    if not team_id:
        return "-"
    team = coordinator.get_team(team_id)
    return team.name if team else team_id


def _player_label(coordinator: SyncCoordinator, buffer: DraftBuffer, player: Player) -> str:
    team = "1:1" if player.branch is Branch.COACHING else _team_name(coordinator, player.team_id)
    marker = " ✎" if player.id in buffer else ""
    return f"{player.name} ({team}){marker}"


def _fmt_rating(value: float | None) -> str:
    if value is None:
        return "-"
    return f"{value:.1f}"


def _fmt_delta(value: float | None) -> str | None:
    if value is None:
        return None
    return f"{value:+.1f}"


def _uploaded_image_url(upload: Any) -> str | None:
    try:
        return image_data_url(upload.getvalue(), upload.type)
    except ImageUploadError as exc:
        st.error(str(exc))
        return None


# Header and screens


def _render_header(logo_url: str) -> None:
    st.markdown(
        f"""
        <div class="pp-header">
            <img src="{logo_url}" alt="logo">
            <div>
                <div class="pp-wordmark">{APP_TITLE}</div>
                <div class="pp-tagline">{APP_SUBTITLE}</div>
            </div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def _render_header_plain() -> None:
    st.title(APP_TITLE)
    st.caption(APP_SUBTITLE)


def _render_configuration_required(message: str) -> None:
    st.error("Configuration required")
    st.write(message)
    st.markdown(HELP_TEXT["config_required"])
    st.code('PITCHPERFECT_DB_PATH = "data/pitchperfect.db"\nOPENAI_API_KEY = "sk-..."', language="toml")


def _render_login(coordinator: SyncCoordinator) -> None:
    st.subheader("Sign in")
    coach_tab, parent_tab = st.tabs(["Coach", "Parent"])

    with coach_tab:
        with st.form("coach_login_form", clear_on_submit=False):
            identifier = st.text_input("Email or name")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in as coach")
        if submitted:
            coach = authenticate_coach(coordinator.coaches, identifier, password)
            if coach is None:
                st.error("Incorrect email or password.")
            else:
                st.session_state[ROLE_KEY] = "coach"
                st.session_state[USER_ID_KEY] = coach.id
                logger.info("Coach %s signed in", coach.id)
                st.rerun()

    with parent_tab:
        with st.form("parent_login_form", clear_on_submit=False):
            player_ref = st.text_input("Player name")
            access_code = st.text_input("Access code", type="password")
            submitted = st.form_submit_button("View report")
        if submitted:
            player = authenticate_parent(coordinator.players, player_ref, access_code)
            if player is None:
                st.error("Player name or access code not recognised.")
            else:
                st.session_state[ROLE_KEY] = "parent"
                st.session_state[USER_ID_KEY] = player.id
                logger.info("Parent signed in for player %s", player.id)
                st.rerun()


def _sign_out() -> None:
    coordinator = st.session_state.pop(COORDINATOR_KEY, None)
    if coordinator is not None:
        coordinator.stop_realtime()
    for key in (ROLE_KEY, USER_ID_KEY, BUFFER_KEY, SELECTED_PLAYER_KEY, ANSWER_KEY):
        st.session_state.pop(key, None)
    _clear_widget_state("draft::")
    _clear_widget_state("narrative::")
    _clear_widget_state("drill::")


def _render_sidebar(coordinator: SyncCoordinator, who: str) -> None:
    st.sidebar.markdown(f"### {APP_TITLE}")
    st.sidebar.caption(f"Signed in as {who}")
    if st.sidebar.button("Refresh data", use_container_width=True):
        try:
            coordinator.refetch()
        except ConfigurationError as exc:
            st.sidebar.error(str(exc))
        else:
            st.rerun()
    if st.sidebar.button("Sign out", use_container_width=True):
        _sign_out()
        st.rerun()


# Report card display


def _render_stat_chart(card: ReportCard) -> None:
    frame = stat_frame(card)
    if frame.empty:
        st.info("No skill ratings on this report.")
        return
    chart = (
        alt.Chart(frame)
        .mark_bar(cornerRadiusEnd=4)
        .encode(
            x=alt.X("value:Q", scale=alt.Scale(domain=[0, 5]), title="Rating"),
            y=alt.Y("name:N", sort=None, title=None),
            color=alt.Color("group:N", scale=alt.Scale(range=GROUP_COLORS), title="Category"),
            tooltip=[alt.Tooltip("name:N"), alt.Tooltip("group:N"), alt.Tooltip("value:Q")],
        )
        .properties(height=26 * len(frame))
    )
    st.altair_chart(chart, use_container_width=True)


def _render_trend_chart(player: Player) -> None:
    long_df = history_long_frame(player)
    if long_df.empty or len(player.report_cards) < 2:
        st.caption("Progress charts appear once two or more reports are published.")
        return
    chart = (
        alt.Chart(long_df)
        .mark_line(point=True, strokeWidth=3)
        .encode(
            x=alt.X("label:N", sort=None, title="Report"),
            y=alt.Y("rating:Q", scale=alt.Scale(domain=[0, 5]), title="Average rating"),
            color=alt.Color("category:N", scale=alt.Scale(range=GROUP_COLORS), title=None),
            tooltip=[
                alt.Tooltip("label:N", title="Report"),
                alt.Tooltip("category:N"),
                alt.Tooltip("rating:Q", format=".1f"),
            ],
        )
        .properties(height=260)
    )
    st.altair_chart(chart, use_container_width=True)


def _render_report_card(card: ReportCard) -> None:
    left, right = st.columns([1, 2])
    with left:
        st.markdown(
            f'<div class="pp-card"><div class="pp-card-title">Overall</div>'
            f'<div class="pp-rating">{card.overall_rating:.1f}<small> / 5</small></div>'
            f'<div class="pp-card-subtitle">{card.quarter} {card.season}</div></div>',
            unsafe_allow_html=True,
        )
        st.metric("Attendance", f"{card.attendance.attendance_score}/5")
        st.metric("Commitment", f"{card.attendance.commitment_score}/5")
        st.metric("Application", f"{card.ratings_summary.application_score}/5")
        st.metric("Behaviour", f"{card.ratings_summary.behaviour_score}/5")
        if card.author_coach_name:
            st.caption(f"Written by {card.author_coach_name}")
    with right:
        st.markdown("#### Coach summary")
        st.write(card.final_summary or "-")
        if card.strengths:
            st.markdown("#### Strengths")
            for strength in card.strengths:
                st.markdown(f"- {strength}")
        st.markdown("#### Areas to improve")
        st.markdown(f"**Key area:** {card.improvements.key_area or '-'}")
        st.markdown(f"**Build on:** {card.improvements.build_on_area or '-'}")
        if card.targets:
            st.markdown("#### Targets")
            for target in card.targets:
                st.markdown(f"- {'✅' if target.achieved else '⬜'} {target.description}")
        if card.attendance.note:
            st.caption(f"Attendance note: {card.attendance.note}")
        if card.ratings_summary.coach_comment:
            st.caption(f"Coach comment: {card.ratings_summary.coach_comment}")
    _render_stat_chart(card)
    if card.coach_footer_note:
        st.info(card.coach_footer_note)


def _render_drills(player: Player, card: ReportCard, generator: NarrativeGenerator | None) -> None:
    areas = [("key", "Key area", card.improvements.key_area), ("build", "Build on", card.improvements.build_on_area)]
    areas = [(kind, title, area) for kind, title, area in areas if area.strip()]
    if not areas:
        return
    st.markdown("#### Drills to try at home")
    if generator is None:
        st.caption(HELP_TEXT["narrative_missing_key"])
        return
    for kind, title, area in areas:
        key = f"drill::{card.id}::{kind}"
        with st.expander(f"{title}: {area}"):
            if key not in st.session_state and st.button("Suggest a drill", key=f"{key}::ask"):
                with st.spinner("Fetching drill..."):
                    st.session_state[key] = generator.suggest_drill(area, player)
            drill = st.session_state.get(key)
            if drill:
                st.markdown(f"**Coach recommended drill:** {drill}")


def _render_pdf_download(player: Player, card: ReportCard) -> None:
    pdf = BytesIO()
    try:
        generate_report_card_pdf(pdf, player, card, logo_label=APP_TITLE)
    except RuntimeError as exc:
        st.caption(str(exc))
        return
    st.download_button(
        label="Download report (PDF)",
        data=pdf.getvalue(),
        file_name=f"{player.name.replace(' ', '_').lower()}_{card.id}.pdf",
        mime="application/pdf",
    )


# Parent dashboard


def _render_parent_dashboard(coordinator: SyncCoordinator, settings: PortalSettings) -> None:
    player = coordinator.get_player(str(st.session_state.get(USER_ID_KEY)))
    if player is None:
        st.warning("This player is no longer available.")
        _sign_out()
        return
    _render_sidebar(coordinator, f"parent of {player.name}")

    if player.image_url:
        st.markdown(f'<img src="{player.image_url}" alt="{player.name}" width="96">', unsafe_allow_html=True)
    st.subheader(player.name)
    chips = [BRANCH_LABELS[player.branch], player.position or "Player"]
    if player.branch is not Branch.COACHING:
        chips.append(_team_name(coordinator, player.team_id))
    if player.jersey_number is not None:
        chips.append(f"#{player.jersey_number}")
    st.markdown("".join(f'<span class="pp-chip">{c}</span>' for c in chips), unsafe_allow_html=True)
    st.markdown(SECTION_GAP_MD, unsafe_allow_html=True)

    if not player.report_cards:
        st.info(HELP_TEXT["no_reports"])
        return

    labels = [f"{c.quarter} {c.season}" for c in player.report_cards]
    index = st.selectbox("Report", options=list(range(len(labels))), format_func=lambda i: labels[i])
    card = player.report_cards[index]

    report_tab, progress_tab, ask_tab = st.tabs(["Report card", "Progress", "Ask the coach"])
    with report_tab:
        _render_report_card(card)
        _render_drills(player, card, _generator(settings))
        _render_pdf_download(player, card)
    with progress_tab:
        deltas = compare_to_previous(player)
        cols = st.columns(len(STAT_GROUPS) + 1)
        latest = player.report_cards[0]
        current = {"overall": latest.overall_rating, **group_means(latest.stats)}
        for col, name in zip(cols, ("overall", *STAT_GROUPS)):
            col.metric(name.title(), _fmt_rating(current.get(name)), _fmt_delta(deltas.get(name)))
        _render_trend_chart(player)
    with ask_tab:
        generator = _generator(settings)
        if generator is None:
            st.info(HELP_TEXT["narrative_missing_key"])
        else:
            question = st.text_input("Ask a question about this report", key="parent_question")
            if st.button("Ask", disabled=not question.strip()):
                with st.spinner("Thinking..."):
                    st.session_state[ANSWER_KEY] = generator.ask_coach(question, player, card)
            answer = st.session_state.get(ANSWER_KEY)
            if answer:
                st.markdown(f'<div class="pp-card">{answer}</div>', unsafe_allow_html=True)


# Coach dashboard


def _render_players_overview(coordinator: SyncCoordinator, buffer: DraftBuffer, players: list[Player]) -> None:
    if not players:
        st.info(HELP_TEXT["no_players"])
        return
    for branch, members in players_by_branch(players).items():
        if not members:
            continue
        st.markdown(f"#### {BRANCH_LABELS[branch]}")
        rows = [
            {
                "Player": p.name,
                "Team": "-" if branch is Branch.COACHING else _team_name(coordinator, p.team_id),
                "Position": p.position or "-",
                "Reports": len(p.report_cards),
                "Latest rating": p.latest_report.overall_rating if p.latest_report else None,
                "Draft": "yes" if p.id in buffer else "",
            }
            for p in members
        ]
        st.dataframe(pd.DataFrame(rows), hide_index=True, use_container_width=True)


def _render_score_inputs(buffer: DraftBuffer, player_id: str) -> None:
    draft = buffer.active
    c1, c2 = st.columns(2)
    attendance = c1.slider(
        "Attendance", 1, 5, draft.attendance_score,
        key=_wkey(player_id, "attendance"), help=SCORE_HELP["attendance"],
    )
    commitment = c2.slider(
        "Commitment", 1, 5, draft.commitment_score,
        key=_wkey(player_id, "commitment"), help=SCORE_HELP["commitment"],
    )
    note = st.text_input("Attendance note", draft.attendance_note, key=_wkey(player_id, "attendance_note"))
    buffer.set_attendance(attendance, commitment, note)

    c3, c4 = st.columns(2)
    application = c3.slider(
        "Application", 1, 5, draft.application_score,
        key=_wkey(player_id, "application"), help=SCORE_HELP["application"],
    )
    behaviour = c4.slider(
        "Behaviour", 1, 5, draft.behaviour_score,
        key=_wkey(player_id, "behaviour"), help=SCORE_HELP["behaviour"],
    )
    comment = st.text_input("Coach comment", draft.coach_comment, key=_wkey(player_id, "coach_comment"))
    buffer.set_ratings_summary(application, behaviour, comment)


def _render_skill_inputs(buffer: DraftBuffer, player_id: str) -> None:
    draft = buffer.active
    tabs = st.tabs(list(STAT_GROUPS))
    for tab, group in zip(tabs, STAT_GROUPS):
        with tab:
            cols = st.columns(2)
            for idx, name in enumerate(SKILL_TEMPLATE[group]):
                value = cols[idx % 2].slider(name, 1, 5, draft.skills[name], key=_wkey(player_id, f"skill:{name}"))
                buffer.set_stat(name, value)


def _render_manual_text(buffer: DraftBuffer, player_id: str) -> None:
    draft = buffer.active
    st.markdown("##### Strengths")
    st.caption("Leave blank to use the AI strengths.")
    cols = st.columns(3)
    for idx, col in enumerate(cols):
        current = draft.strengths[idx] if idx < len(draft.strengths) else ""
        buffer.set_strength(idx, col.text_input(f"Strength {idx + 1}", current, key=_wkey(player_id, f"strength:{idx}")))

    st.markdown("##### Areas to improve")
    c1, c2 = st.columns(2)
    key_area = c1.text_input("Key area", draft.key_area, key=_wkey(player_id, "key_area"))
    build_on = c2.text_input("Build on", draft.build_on_area, key=_wkey(player_id, "build_on_area"))
    buffer.update(key_area=key_area, build_on_area=build_on)

    st.markdown("##### Targets")
    for target in list(draft.targets):
        t1, t2 = st.columns([6, 1])
        achieved = t1.checkbox(target.description, target.achieved, key=_wkey(player_id, f"target:{target.id}"))
        if achieved != target.achieved:
            buffer.toggle_target(target.id)
        if t2.button("Remove", key=_wkey(player_id, f"remove:{target.id}")):
            buffer.remove_target(target.id)
            st.rerun()
    n1, n2 = st.columns([6, 1])
    new_target = n1.text_input("New target", key=_wkey(player_id, "new_target"), label_visibility="collapsed")
    if n2.button("Add", key=_wkey(player_id, "add_target"), disabled=not new_target.strip()):
        buffer.add_target(new_target)
        del st.session_state[_wkey(player_id, "new_target")]
        st.rerun()

    notes = st.text_area(
        "Coach notes for the AI summary", draft.coach_notes, key=_wkey(player_id, "coach_notes"), height=110
    )
    footer = st.text_input("Footer note to parents", draft.coach_footer_note, key=_wkey(player_id, "footer"))
    buffer.update(coach_notes=notes, coach_footer_note=footer)


def _render_narrative_section(
    buffer: DraftBuffer, player: Player, generator: NarrativeGenerator | None
) -> None:
    st.markdown("##### AI summary")
    if generator is None:
        st.info(HELP_TEXT["narrative_missing_key"])
    elif st.button("Generate AI summary", key=_wkey(player.id, "generate")):
        with st.spinner("Writing summary..."):
            try:
                narrative = generator.generate_narrative(player, buffer.active)
            except NarrativeError as exc:
                logger.warning("Narrative generation failed for %s: %s", player.id, exc)
                st.error(f"Could not generate the summary: {exc}")
            else:
                buffer.set_narrative(narrative)
                _clear_widget_state(_nkey(player.id, ""))

    narrative = buffer.active.narrative
    if narrative is None:
        return
    summary = st.text_area("Summary", narrative.summary, key=_nkey(player.id, "summary"), height=140)
    strengths = st.text_area(
        "AI strengths (one per line)", "\n".join(narrative.strengths), key=_nkey(player.id, "strengths")
    )
    c1, c2 = st.columns(2)
    key_area = c1.text_input("AI key area", narrative.improvements.key_area, key=_nkey(player.id, "key_area"))
    build_on = c2.text_input(
        "AI build-on area", narrative.improvements.build_on_area, key=_nkey(player.id, "build_on_area")
    )
    buffer.edit_narrative(
        summary=summary,
        strengths=[line.strip() for line in strengths.splitlines() if line.strip()],
        improvements={"keyArea": key_area, "buildOnArea": build_on},
    )


def _render_report_editor(
    coordinator: SyncCoordinator,
    buffer: DraftBuffer,
    coach: Coach,
    players: list[Player],
    generator: NarrativeGenerator | None,
) -> None:
    if not players:
        st.info(HELP_TEXT["no_players"])
        return
    ids = [p.id for p in players]
    if st.session_state.get(SELECTED_PLAYER_KEY) not in ids:
        st.session_state[SELECTED_PLAYER_KEY] = ids[0]
    by_id = {p.id: p for p in players}
    player_id = st.selectbox(
        "Player",
        options=ids,
        format_func=lambda pid: _player_label(coordinator, buffer, by_id[pid]),
        key=SELECTED_PLAYER_KEY,
    )
    player = by_id[player_id]
    draft = buffer.select_player(player_id)
    st.markdown('<span class="pp-draft-pill">Draft</span>', unsafe_allow_html=True)
    st.caption(HELP_TEXT["draft_saved"])

    c1, c2 = st.columns(2)
    season = c1.text_input("Season", draft.season, key=_wkey(player_id, "season"))
    quarter = c2.selectbox(
        "Term",
        options=list(TERMS),
        index=TERMS.index(draft.quarter) if draft.quarter in TERMS else 0,
        key=_wkey(player_id, "quarter"),
    )
    buffer.update(season=season, quarter=quarter)

    with st.expander("Attendance and ratings", expanded=True):
        _render_score_inputs(buffer, player_id)
    with st.expander("Skills", expanded=True):
        _render_skill_inputs(buffer, player_id)
    with st.expander("Strengths, improvements and targets", expanded=False):
        _render_manual_text(buffer, player_id)
    _render_narrative_section(buffer, player, generator)

    st.markdown(SECTION_GAP_MD, unsafe_allow_html=True)
    has_narrative = buffer.active.narrative is not None
    if not has_narrative:
        st.caption(HELP_TEXT["publish_disabled"])
    if st.button("Publish report", type="primary", disabled=not has_narrative, key=_wkey(player_id, "publish")):
        try:
            card, result = publish_report(buffer, coordinator, player_id, coach)
        except MissingNarrativeError as exc:
            st.error(str(exc))
            return
        _clear_widget_state(_wkey(player_id, ""))
        _clear_widget_state(_nkey(player_id, ""))
        if result.ok:
            _flash(f"Published {card.quarter} {card.season} report for {player.name}.")
        else:
            _flash(f"Report published locally but could not be saved: {result.error}", "error")
        st.rerun()


def _render_admin_teams(coordinator: SyncCoordinator) -> None:
    st.markdown("#### Teams")
    st.dataframe(
        pd.DataFrame([{"Id": t.id, "Name": t.name} for t in coordinator.teams]),
        hide_index=True,
        use_container_width=True,
    )
    with st.form("add_team_form", clear_on_submit=True):
        name = st.text_input("New team name")
        submitted = st.form_submit_button("Add team")
    if submitted and name.strip():
        team = Team(id=name.strip(), name=name.strip())
        _show_write_results([coordinator.apply_optimistic_update(team)], f"Added team {team.name}.")

    with st.expander("Bulk create teams"):
        ages = st.text_input("Age groups", placeholder="U9, U10, U11", key="bulk_team_ages")
        suffixes = st.text_input("Squad names", placeholder="Reds, Blues", key="bulk_team_suffixes")
        names = bulk_team_names(ages, suffixes)
        fresh = [t.name for t in new_teams(names, coordinator.teams)]
        if names:
            st.caption(f"Will create: {', '.join(fresh) or 'nothing new'}")
            skipped = len(names) - len(fresh)
            if skipped:
                st.caption(f"{skipped} already exist and will be skipped.")
        if st.button("Create teams", key="bulk_create_teams", disabled=not fresh):
            _show_write_results(coordinator.create_teams(fresh), f"Created {len(fresh)} team(s).")

    deletable = [t.id for t in coordinator.teams if t.id != UNASSIGNED_TEAM_ID]
    if deletable:
        c1, c2 = st.columns([3, 1])
        team_id = c1.selectbox("Delete team", options=deletable, format_func=lambda t: _team_name(coordinator, t))
        if c2.button("Delete", key="delete_team"):
            _show_write_results(
                coordinator.delete_team(team_id),
                f"Deleted team {team_id}; its players moved to {UNASSIGNED_TEAM_ID}.",
            )


def _render_admin_coaches(coordinator: SyncCoordinator, current: Coach) -> None:
    st.markdown("#### Coaches")
    st.dataframe(
        pd.DataFrame(
            [
                {
                    "Name": c.name,
                    "Email": c.email,
                    "Teams": ", ".join(c.assigned_teams),
                    "Admin": c.is_admin,
                }
                for c in coordinator.coaches
            ]
        ),
        hide_index=True,
        use_container_width=True,
    )
    team_ids = [t.id for t in coordinator.teams]
    with st.form("add_coach_form", clear_on_submit=True):
        name = st.text_input("Name")
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        teams = st.multiselect("Assigned teams", options=team_ids)
        is_admin = st.checkbox("Admin")
        submitted = st.form_submit_button("Add coach")
    if submitted:
        if not (name.strip() and email.strip() and password):
            st.error("Name, email and password are required.")
        else:
            coach = Coach(
                id=f"c_{uuid.uuid4().hex[:8]}",
                name=name.strip(),
                email=email.strip(),
                password=password,
                assigned_teams=tuple(teams),
                is_admin=is_admin,
            )
            _show_write_results([coordinator.apply_optimistic_update(coach)], f"Added coach {coach.name}.")

    others = [c for c in coordinator.coaches if c.id != current.id]
    if others:
        by_id = {c.id: c for c in others}
        coach_id = st.selectbox("Edit coach", options=list(by_id), format_func=lambda cid: by_id[cid].name)
        coach = by_id[coach_id]
        teams = st.multiselect(
            "Teams",
            options=team_ids,
            default=[t for t in coach.assigned_teams if t in team_ids],
            key=f"coach_teams::{coach_id}",
        )
        c1, c2 = st.columns(2)
        if c1.button("Save assignments", key="save_coach"):
            updated = coach.model_copy(update={"assigned_teams": tuple(teams)})
            _show_write_results([coordinator.apply_optimistic_update(updated)], f"Updated {coach.name}.")
        if c2.button("Delete coach", key="delete_coach"):
            _show_write_results([coordinator.delete_coach(coach_id)], f"Deleted coach {coach.name}.")


def _render_admin_players(coordinator: SyncCoordinator) -> None:
    st.markdown("#### Players")
    team_ids = [t.id for t in coordinator.teams]
    with st.form("add_player_form", clear_on_submit=True):
        name = st.text_input("Name")
        branch = st.selectbox("Branch", options=list(Branch), format_func=lambda b: BRANCH_LABELS[b])
        team_id = st.selectbox("Team (ignored for 1:1 coaching)", options=team_ids or [UNASSIGNED_TEAM_ID])
        position = st.text_input("Position")
        jersey = st.number_input("Jersey number (academy only)", min_value=0, max_value=99, value=0, step=1)
        access_code = st.text_input("Parent access code")
        submitted = st.form_submit_button("Add player")
    if submitted:
        if not (name.strip() and access_code.strip()):
            st.error("Name and access code are required.")
        else:
            player = Player(
                id=f"p_{uuid.uuid4().hex[:8]}",
                name=name.strip(),
                branch=branch,
                team_id=None if branch is Branch.COACHING else team_id,
                position=position.strip(),
                jersey_number=int(jersey) if branch is Branch.ACADEMY and jersey else None,
                access_code=access_code.strip(),
            )
            _show_write_results([coordinator.apply_optimistic_update(player)], f"Added player {player.name}.")

    if not coordinator.players:
        return
    by_id = {p.id: p for p in coordinator.players}
    player_id = st.selectbox("Edit player", options=list(by_id), format_func=lambda pid: by_id[pid].name)
    player = by_id[player_id]
    new_name = st.text_input("Name", player.name, key=f"player_name::{player_id}")
    c1, c2, c3 = st.columns(3)
    new_team = c1.selectbox(
        "Team",
        options=team_ids or [UNASSIGNED_TEAM_ID],
        index=team_ids.index(player.team_id) if player.team_id in team_ids else 0,
        key=f"player_team::{player_id}",
        disabled=player.branch is Branch.COACHING,
    )
    new_position = c2.text_input("Position", player.position, key=f"player_position::{player_id}")
    new_code = c3.text_input("Access code", player.access_code, key=f"player_code::{player_id}")
    photo = st.file_uploader(
        "Player photo", type=["png", "jpg", "jpeg", "gif", "webp"], key=f"player_photo::{player_id}"
    )
    if player.image_url:
        st.markdown(f'<img src="{player.image_url}" alt="photo" width="72">', unsafe_allow_html=True)
    s1, s2 = st.columns(2)
    if s1.button("Save player", key="save_player"):
        if not new_name.strip():
            st.error("Name is required.")
            return
        changes: dict[str, Any] = {
            "name": new_name.strip(),
            "position": new_position.strip(),
            "access_code": new_code.strip(),
        }
        if player.branch is not Branch.COACHING:
            changes["team_id"] = new_team
        if photo is not None:
            image_url = _uploaded_image_url(photo)
            if image_url is None:
                return
            changes["image_url"] = image_url
        updated = player.model_copy(update=changes)
        _show_write_results([coordinator.apply_optimistic_update(updated)], f"Updated {updated.name}.")
    if s2.button("Delete player", key="delete_player"):
        _show_write_results([coordinator.delete_player(player_id)], f"Deleted {player.name}.")


def _render_admin(coordinator: SyncCoordinator, coach: Coach) -> None:
    if not coach.is_admin:
        st.info("Only admins can manage teams, coaches and players.")
        return
    _render_admin_teams(coordinator)
    st.markdown(SECTION_GAP_MD, unsafe_allow_html=True)
    _render_admin_coaches(coordinator, coach)
    st.markdown(SECTION_GAP_MD, unsafe_allow_html=True)
    _render_admin_players(coordinator)
    st.markdown("#### Club logo")
    with st.form("logo_form"):
        logo_url = st.text_input("Logo URL", "" if coordinator.logo_url.startswith("data:") else coordinator.logo_url)
        logo_file = st.file_uploader("Or upload an image", type=["png", "jpg", "jpeg", "gif", "webp"])
        submitted = st.form_submit_button("Save logo")
    if submitted:
        new_logo = _uploaded_image_url(logo_file) if logo_file is not None else logo_url.strip()
        if new_logo:
            _show_write_results([coordinator.save_logo(new_logo)], "Logo updated.")


def _render_coach_dashboard(coordinator: SyncCoordinator, settings: PortalSettings) -> None:
    coach = coordinator.get_coach(str(st.session_state.get(USER_ID_KEY)))
    if coach is None:
        st.warning("This coach account is no longer available.")
        _sign_out()
        return
    _render_sidebar(coordinator, coach.name)
    buffer = _session_buffer(coach.id)
    players = visible_players(coach, coordinator.players)
    if buffer:
        st.sidebar.caption(f"{len(buffer)} draft report(s) in progress")

    sections = COACH_SECTIONS if coach.is_admin else [s for s in COACH_SECTIONS if s != "Admin"]
    tabs = st.tabs(sections)
    for tab, section in zip(tabs, sections):
        with tab:
            if section == "Players":
                _render_players_overview(coordinator, buffer, players)
            elif section == "Report Editor":
                _render_report_editor(coordinator, buffer, coach, players, _generator(settings))
            elif section == "Admin":
                _render_admin(coordinator, coach)


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    st.set_page_config(page_title=APP_TITLE, layout="wide")
    _inject_styles()

    if settings.missing:
        _render_header_plain()
        _render_configuration_required(f"Missing settings: {', '.join(settings.missing)}")
        return
    try:
        with st.spinner("Loading club data..."):
            coordinator = _session_coordinator(settings)
    except ConfigurationError as exc:
        logger.error("Portal is not configured: %s", exc)
        _render_header_plain()
        _render_configuration_required(str(exc))
        return

    _render_header(coordinator.logo_url)
    _render_flash()
    role = st.session_state.get(ROLE_KEY)
    if role == "coach":
        _render_coach_dashboard(coordinator, settings)
    elif role == "parent":
        _render_parent_dashboard(coordinator, settings)
    else:
        _render_login(coordinator)

    st.markdown(f'<div class="pp-disclaimer">{APP_DISCLAIMER}</div>', unsafe_allow_html=True)


if __name__ == "__main__":
    main()
