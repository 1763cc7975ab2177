"""Apt Mastery Hub — multi-page aptitude practice app."""
import logging
import os
import sys
from pathlib import Path

# Ensure project root is in path
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import streamlit as st

from db import get_supabase
from engine import OPTION_LABELS, POINTS_CORRECT, POINTS_INCORRECT, QUESTION_BATCH_LIMIT
from src.aggregation import count_attempts, has_century_achievement, load_leaderboard, load_mastery, load_profile
from src.auth import SessionContext, get_current_session, sign_in, sign_out
from src.database import DatabaseClient
from src.errors import AuthRequired, FetchFailed, InvalidTransition, ValidationFailed
from src.models import Domain
from src.progress_recorder import ProgressRecorder
from src.quiz_runner import QuizSession, QuizState
from src.session_loader import load_questions, parse_domain

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"), format="%(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

PAGES = ["Dashboard", "Practice", "Progress", "Leaderboard", "Profile"]
QUICK_START = [Domain.APTITUDE, Domain.REASONING, Domain.TECHNICAL]


def get_recorder(db: DatabaseClient) -> ProgressRecorder:
    if "recorder" not in st.session_state:
        st.session_state["recorder"] = ProgressRecorder(db)
    return st.session_state["recorder"]


def go_to(page: str, **params):
    st.query_params.clear()
    st.query_params["page"] = page
    for k, v in params.items():
        st.query_params[k] = v
    st.rerun()


def reset_quiz():
    st.session_state.pop("quiz", None)
    st.session_state.pop("quiz_domain", None)


# ----- Sign in -----

def page_sign_in(client):
    st.header("Sign in")
    st.caption("Practice aptitude, reasoning, verbal, technical and general knowledge questions.")
    with st.form("sign_in"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", type="primary")
    if submitted:
        try:
            ctx = sign_in(client, email, password)
        except ValidationFailed as e:
            st.warning(str(e))
        except AuthRequired as e:
            st.error(str(e))
        else:
            st.session_state["ctx"] = ctx
            st.rerun()


# ----- Dashboard -----

def page_dashboard(db: DatabaseClient, ctx: SessionContext):
    try:
        profile = load_profile(db, ctx)
    except FetchFailed as e:
        st.error(str(e))
        return

    st.header(f"Welcome back, {profile.display_name}!")
    col1, col2 = st.columns(2)
    with col1:
        st.metric("Day streak", profile.current_streak)
    with col2:
        st.metric("Total points", profile.total_points)

    st.subheader("Quick Start")
    cols = st.columns(len(QUICK_START))
    for col, domain in zip(cols, QUICK_START):
        with col:
            if st.button(domain.label, use_container_width=True):
                reset_quiz()
                go_to("Practice", domain=domain.value)

    st.subheader("Daily Challenge")
    st.write(f"Complete {QUESTION_BATCH_LIMIT} questions today")
    if st.button("Start Challenge", type="primary"):
        reset_quiz()
        go_to("Practice")


# ----- Practice -----

def start_quiz(db: DatabaseClient, ctx: SessionContext, domain):
    recorder = get_recorder(db)
    if recorder.failed:
        recorder.retry_failed()
    questions = load_questions(db, domain)
    if not questions:
        return None
    quiz = QuizSession(ctx, questions, recorder)
    st.session_state["quiz"] = quiz
    st.session_state["quiz_domain"] = domain
    return quiz


def page_practice(db: DatabaseClient, ctx: SessionContext):
    domain = parse_domain(st.query_params.get("domain"))
    quiz = st.session_state.get("quiz")
    if quiz is None or quiz.ctx != ctx or st.session_state.get("quiz_domain") != domain:
        try:
            quiz = start_quiz(db, ctx, domain)
        except FetchFailed as e:
            st.error(str(e))
            return
        if quiz is None:
            st.info("No questions available for this topic yet.")
            return

    if quiz.state == QuizState.COMPLETE:
        tally = quiz.tally
        st.success(f"Quiz complete! Score: {tally.correct}/{tally.total}")
        unsaved = quiz.recorder.flush(timeout=5)
        if unsaved:
            st.warning(f"{len(unsaved)} answers could not be saved yet; they will be retried.")
        if st.button("Practice again", type="primary"):
            reset_quiz()
            st.rerun()
        return

    question = quiz.current_question
    c1, c2 = st.columns(2)
    with c1:
        st.write(f"**Question {quiz.index + 1} of {len(quiz)}**")
    with c2:
        st.write(f"**Score {quiz.tally.correct}/{quiz.tally.total}**")
    st.progress((quiz.index + 1) / len(quiz))

    st.caption(f"{question.domain.value.upper()} • {question.sub_topic}")
    st.subheader(question.question_text)

    options = question.options
    if not quiz.show_feedback:
        choice = st.radio(
            "Choose your answer:",
            OPTION_LABELS,
            format_func=lambda label: f"{label}. {options[label]}",
            index=None,
            key=f"radio_{quiz.index}_{question.id}",
        )
        if st.button("Submit Answer", type="primary"):
            try:
                if choice:
                    quiz.select_option(choice)
                result = quiz.submit_answer()
            except ValidationFailed as e:
                st.warning(str(e))
            except InvalidTransition as e:
                logger.warning(f"Ignored submit: {e}")
            else:
                if result.is_correct:
                    st.toast(f"Correct! +{POINTS_CORRECT} points")
                else:
                    st.toast(f"Incorrect. +{POINTS_INCORRECT} points for trying")
                st.rerun()
        return

    result = quiz.last_result
    for label in OPTION_LABELS:
        text = f"{label}. {options[label]}"
        if label == question.correct_answer:
            st.success(f"✓ {text}")
        elif label == result.selected:
            st.error(f"✗ {text}")
        else:
            st.write(f"○ {text}")

    st.divider()
    if result.is_correct:
        st.success("Correct!")
    else:
        st.error("Incorrect")
    if question.explanation:
        st.info(question.explanation)

    label = "Finish Quiz" if quiz.is_last_question else "Next Question →"
    if st.button(label, type="primary"):
        try:
            quiz.advance()
        except InvalidTransition as e:
            logger.warning(f"Ignored advance: {e}")
        st.rerun()


# ----- Progress -----

def page_progress(db: DatabaseClient, ctx: SessionContext):
    st.header("Your Progress")
    try:
        mastery = load_mastery(db, ctx)
    except FetchFailed as e:
        st.error(str(e))
        return
    if not mastery:
        st.info("Start practicing to see your stats here")
        return
    for m in mastery:
        st.write(f"**{m.domain.label}** — {round(m.accuracy_percentage)}%")
        st.progress(min(max(m.accuracy_percentage / 100, 0.0), 1.0))
        st.caption(f"{m.total_correct} / {m.total_attempted} correct")


# ----- Leaderboard -----

def page_leaderboard(db: DatabaseClient, ctx: SessionContext):
    st.header("Leaderboard")
    try:
        entries = load_leaderboard(db)
    except FetchFailed as e:
        st.error(str(e))
        return
    medals = {0: "🥇", 1: "🥈", 2: "🥉"}
    for i, entry in enumerate(entries):
        rank = medals.get(i, f"#{i + 1}")
        you = " (you)" if entry.id == ctx.user_id else ""
        st.write(f"{rank} **{entry.display_name}**{you} — {entry.total_points} pts")


# ----- Profile -----

def page_profile(client, db: DatabaseClient, ctx: SessionContext):
    st.header("Profile")
    try:
        profile = load_profile(db, ctx)
        answered = count_attempts(db, ctx)
    except FetchFailed as e:
        st.error(str(e))
        return

    st.subheader(profile.display_name)
    if ctx.email:
        st.caption(ctx.email)
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Questions", answered)
    with col2:
        st.metric("Points", profile.total_points)
    with col3:
        st.metric("Streak", profile.current_streak)
    if has_century_achievement(answered):
        st.success("Achievement Unlocked! Answered 100 questions.")

    if st.button("Logout"):
        recorder = st.session_state.get("recorder")
        if recorder is not None:
            recorder.close(timeout=5)
        sign_out(client)
        for key in ("ctx", "quiz", "quiz_domain", "recorder"):
            st.session_state.pop(key, None)
        st.toast("Logged out successfully")
        go_to("Dashboard")


def main():
    st.set_page_config(page_title="Apt Mastery Hub", layout="centered")
    st.sidebar.title("Apt Mastery Hub")

    try:
        client = get_supabase()
    except ValueError as e:
        st.error(f"Could not connect. Check .env (SUPABASE_URL, SUPABASE_KEY). {e}")
        st.stop()

    ctx = st.session_state.get("ctx") or get_current_session(client)
    if ctx is None:
        page_sign_in(client)
        st.stop()
    st.session_state["ctx"] = ctx
    db = DatabaseClient(client)

    default_page = st.query_params.get("page", "Dashboard")
    if default_page not in PAGES:
        default_page = "Dashboard"
    page = st.sidebar.radio("Navigate", PAGES, index=PAGES.index(default_page), label_visibility="collapsed")
    if page != default_page:
        go_to(page)

    if page == "Dashboard":
        page_dashboard(db, ctx)
    elif page == "Practice":
        page_practice(db, ctx)
    elif page == "Progress":
        page_progress(db, ctx)
    elif page == "Leaderboard":
        page_leaderboard(db, ctx)
    elif page == "Profile":
        page_profile(client, db, ctx)


main()
