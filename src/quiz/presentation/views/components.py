import streamlit as st

from src.quiz.presentation.viewmodel import QuizViewModel
from src.shared.telemetry import Telemetry


def apply_styles() -> None:
    st.markdown(
        """
        <style>
            .block-container { padding-top: 1.5rem !important; max-width: 560px; }
            .stat-box {
                padding: 10px; background-color: #f0f2f6; border-radius: 8px;
                text-align: center; font-weight: bold;
            }
            .explanation { font-size: 1rem; line-height: 1.6; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def render_sidebar(vm: QuizViewModel) -> bool:
    """Returns True when the player asked to go back to the start screen."""
    st.sidebar.header("⚾ Today's Pitch")
    st.sidebar.caption(f"Player: {vm.user_id[:8]}")

    go_home = st.sidebar.button("🏠 Back to start")

    with st.sidebar.expander("🕵️‍♂️ Telemetry"):
        st.caption("Trace ID: " + Telemetry.get_trace_id())
        if st.button("Run health check"):
            report = vm.service.health_check()
            st.json(report.model_dump())
        errors = Telemetry.recent_errors(limit=5)
        if errors:
            st.caption(f"Recent errors: {len(Telemetry.recent_errors())}")
            for err in errors:
                st.code(f"{err['component']}: {err['event']} ({err['error']})")

    return go_home


def render_progress(vm: QuizViewModel) -> None:
    total = len(vm.questions)
    idx = vm.session.current_q_index
    col1, col2 = st.columns(2)
    col1.markdown(
        f'<div class="stat-box">📋 {idx + 1} / {total}</div>', unsafe_allow_html=True
    )
    col2.markdown(
        f'<div class="stat-box">✅ {vm.session.score}</div>', unsafe_allow_html=True
    )
    st.progress(idx / total if total else 0.0)
