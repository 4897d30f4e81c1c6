import logging
import os

import streamlit as st

# --- OTel & Observability Imports ---
from opentelemetry import trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

# --- Prometheus Import ---
from prometheus_client import start_http_server

# --- Application Imports ---
from src.config import GameConfig
from src.fsm import QuizState
from src.quiz.adapters.db_manager import DatabaseManager
from src.quiz.adapters.question_bank import QuestionBank
from src.quiz.adapters.sqlite_repository import SQLiteStatsRepository
from src.quiz.adapters.supabase_repository import SupabaseStatsRepository
from src.quiz.application.player_progress import PlayerProgress
from src.quiz.application.service import QuizService
from src.quiz.domain.ports import IStatsRepository
from src.quiz.presentation.state_provider import StreamlitStateProvider
from src.quiz.presentation.viewmodel import QuizViewModel
from src.quiz.presentation.views import (
    components,
    question_view,
    start_view,
    summary_view,
)

logger = logging.getLogger("app")


# --- 1. Configure Observability ---
def configure_observability() -> None:
    """
    Sends traces and logs over OTLP when the collector is configured and
    exposes Prometheus metrics from a background HTTP server.
    """
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    headers = os.getenv("OTEL_EXPORTER_OTLP_HEADERS")

    if endpoint and headers:
        resource = Resource.create({"service.name": "todays-pitch-quiz"})

        # --- A. TRACING ---
        trace_provider = TracerProvider(resource=resource)
        trace_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, headers=headers))
        )
        trace.set_tracer_provider(trace_provider)

        # --- B. LOGGING ---
        logger_provider = LoggerProvider(resource=resource)
        logger_provider.add_log_record_processor(
            BatchLogRecordProcessor(OTLPLogExporter(endpoint=endpoint, headers=headers))
        )
        set_logger_provider(logger_provider)
        logging.getLogger().addHandler(
            LoggingHandler(level=logging.INFO, logger_provider=logger_provider)
        )
    else:
        logger.warning("OTEL env vars not set. Telemetry stays local.")

    # --- C. METRICS ---
    port = GameConfig.metrics_port()
    try:
        start_http_server(port)
        logger.info(f"Prometheus metrics server started on port {port}")
    except OSError:
        logger.warning(f"Prometheus port {port} already in use. Skipping.")


# --- 2. Bootstrap Application ---
if "observability_configured" not in st.session_state:
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s"
    )
    configure_observability()
    st.session_state.observability_configured = True


# --- 3. Dependency Injection (Composition Root) ---
@st.cache_resource
def get_question_bank() -> QuestionBank:
    return QuestionBank.load(GameConfig.QUESTION_BANK_PATH)


@st.cache_resource
def get_stats_repository() -> IStatsRepository:
    credentials = GameConfig.supabase_credentials()
    if not GameConfig.USE_SQLITE and credentials:
        return SupabaseStatsRepository(*credentials)
    if not GameConfig.USE_SQLITE:
        logger.warning("Supabase selected but credentials missing. Using SQLite.")
    return SQLiteStatsRepository(DatabaseManager(GameConfig.DB_PATH))


def main() -> None:
    st.set_page_config(page_title=GameConfig.APP_TITLE, page_icon="⚾")
    components.apply_styles()

    state_provider = StreamlitStateProvider()
    service = QuizService(
        stats_repo=get_stats_repository(),
        questions=get_question_bank().all(),
        progress=PlayerProgress(state_provider),
    )
    vm = QuizViewModel(service, state_provider)

    if components.render_sidebar(vm):
        vm.reset()
        st.rerun()

    # --- 4. Main Router (FSM) ---
    state = vm.current_state

    if state == QuizState.IDLE:
        start_view.render(vm)

    elif state == QuizState.LOADING:
        with st.spinner("Picking today's situations..."):
            pass

    elif state == QuizState.QUESTION_ACTIVE:
        components.render_progress(vm)
        question_view.render_active(vm)

    elif state == QuizState.FEEDBACK_VIEW:
        components.render_progress(vm)
        question_view.render_feedback(vm)

    elif state == QuizState.SUMMARY:
        summary_view.render(vm)

    elif state == QuizState.EMPTY_STATE:
        st.warning("No questions available right now. Try again tomorrow!")
        if st.button("Back"):
            vm.reset()
            st.rerun()


if __name__ == "__main__":
    main()
