import streamlit as st

from src.config import GameConfig
from src.quiz.application.player_progress import next_rank_gap, weekly_rank
from src.quiz.presentation.formatters import (
    level_label,
    line_share_url,
    twitter_share_url,
)
from src.quiz.presentation.viewmodel import QuizViewModel


def render(vm: QuizViewModel) -> None:
    summary = vm.summary
    if summary is None:
        st.warning("No results yet.")
        return

    if summary.correct_count == summary.total_questions:
        st.balloons()

    st.title("🏁 Results")

    col1, col2, col3 = st.columns(3)
    col1.metric("Score", f"{summary.correct_count} / {summary.total_questions}")
    col2.metric("Accuracy", f"{int(summary.accuracy)}%")
    col3.metric(
        "Rating",
        summary.rating_after,
        delta=summary.rating_after - summary.rating_before,
    )

    level = level_label(summary.rating_after)
    st.info(f"Level: **{level}**  ·  🔥 {summary.streak}-day streak")

    # --- Weekly ---
    weekly = summary.weekly
    rank = weekly_rank(weekly.correct_total)
    with st.container(border=True):
        st.subheader(f"📆 This week: {rank.title}")
        st.caption(
            f"{weekly.correct_total} correct in {weekly.session_count} sessions, "
            f"{len(weekly.days_played)} days played"
        )
        gap = next_rank_gap(weekly.correct_total)
        if gap:
            title, needed = gap
            st.caption(f"{needed} more correct answers to reach {title}")

    # --- Share ---
    share = vm.share_text()
    if share:
        st.markdown("---")
        col_x, col_line = st.columns(2)
        col_x.link_button(
            "Share on X", twitter_share_url(share.twitter), use_container_width=True
        )
        col_line.link_button(
            "Share on LINE",
            line_share_url(share.line, GameConfig.APP_URL),
            use_container_width=True,
        )

    if summary.show_interstitial:
        with st.container(border=True):
            st.caption("Advertisement")

    preview = vm.get_tomorrow_preview()
    st.markdown(f"**Tomorrow:** {preview.theme}  \n{preview.teaser}")

    if st.button("🔄 Back to start", type="primary", use_container_width=True):
        vm.reset()
        st.rerun()
