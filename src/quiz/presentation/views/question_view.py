import math

import streamlit as st

from src.components import choice_card, result_row, row_state, scoreboard
from src.config import GameConfig
from src.quiz.domain.models import Question
from src.quiz.presentation.formatters import (
    format_count_short,
    parse_count,
    split_situation,
)
from src.quiz.presentation.viewmodel import QuizViewModel

CHOICE_LABELS = "abcd"


def _render_situation(q: Question) -> None:
    st.caption(f"{q.category.icon} {q.category.label}")

    parts = split_situation(q.situation)
    headline, detail = parts if parts else (q.situation, "")
    count = parse_count(q.count)
    scoreboard(headline, detail, count, key=f"board_{q.id}")

    if count:
        st.caption(f"Count {format_count_short(*count)}")


@st.fragment(run_every=1)
def _render_timer(vm: QuizViewModel) -> None:
    remaining = vm.time_remaining()
    st.progress(
        remaining / GameConfig.ANSWER_TIMER_SECONDS,
        text=f"⏱️ {math.ceil(remaining)}s",
    )
    if vm.check_timeout():
        st.rerun()


def render_active(vm: QuizViewModel) -> None:
    q = vm.current_question
    if q is None:
        st.error("No question loaded.")
        return

    _render_situation(q)
    _render_timer(vm)

    for label, choice in zip(CHOICE_LABELS, q.choices, strict=False):
        clicked = choice_card(
            choice.id, label, choice.text, key=f"opt_{q.id}_{label}"
        )
        if clicked:
            vm.submit_answer(clicked)
            st.rerun()


def render_feedback(vm: QuizViewModel) -> None:
    q = vm.current_question
    outcome = vm.last_outcome
    if q is None or outcome is None:
        st.error("Nothing to show.")
        return

    if vm.last_selected is None:
        st.warning("⏱️ Time's up!")
    elif outcome.is_correct:
        st.success("Correct! 🎉")
    else:
        st.error("Not quite.")

    _render_situation(q)

    for label, choice in zip(CHOICE_LABELS, q.choices, strict=False):
        state = row_state(choice.id, q.answer_choice_id, vm.last_selected)
        result_row(label, choice.text, state=state, key=f"res_{q.id}_{label}")

    col1, col2 = st.columns(2)
    col1.metric("Rating", outcome.rating.new_rating, delta=outcome.rating.delta)
    if outcome.stats and outcome.stats.total_attempts:
        col2.metric(
            "Players who got it",
            f"{round(outcome.stats.accuracy * 100)}%",
            help=f"{outcome.stats.total_attempts} answers so far",
        )

    if q.explanation:
        with st.expander("📖 Why", expanded=True):
            st.markdown(
                f'<div class="explanation">{q.explanation}</div>',
                unsafe_allow_html=True,
            )
            if q.source_url:
                source = q.source_label or q.source_url
                st.markdown(f"Source: [{source}]({q.source_url})")

    button_text = "See results 🏁" if vm.is_last_question else "Next ➡️"
    if st.button(button_text, type="primary", use_container_width=True):
        vm.next_step()
        st.rerun()
