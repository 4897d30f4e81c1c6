import streamlit as st

from src.config import GameConfig
from src.quiz.presentation.formatters import level_label
from src.quiz.presentation.viewmodel import QuizViewModel


def render(vm: QuizViewModel) -> None:
    st.title(f"⚾ {GameConfig.APP_TITLE}")
    st.caption("One game situation at a time. What's your call?")

    col1, col2 = st.columns(2)
    col1.metric("Level", level_label(vm.rating))
    col2.metric(
        "Plays left today",
        f"{vm.attempts_remaining} / {GameConfig.MAX_DAILY_ATTEMPTS}",
    )

    with st.container(border=True):
        st.subheader("🎯 Today's session")
        data_only = st.toggle("Real data questions only", key="data_only")
        if st.button(
            f"Play ({GameConfig.QUESTIONS_PER_SESSION} questions)",
            type="primary",
            use_container_width=True,
            disabled=not vm.can_start,
        ):
            vm.start_quiz(data_only=data_only)
            st.rerun()
        if not vm.can_start:
            st.info("You've used today's plays. Come back tomorrow!")

    with st.container(border=True):
        st.subheader("📅 Daily challenge")
        st.caption("Same five questions for everyone today.")
        if vm.daily_challenge_completed:
            st.success("Done for today ✅")
        elif st.button("Take the challenge", use_container_width=True):
            vm.start_daily_challenge()
            st.rerun()

    preview = vm.get_tomorrow_preview()
    st.markdown("---")
    st.markdown(f"**Tomorrow:** {preview.theme}  \n{preview.teaser}")
