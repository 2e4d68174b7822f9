import logging

import httpx
import streamlit as st

from fe_quiz.config import QuizConfig, get_settings
from fe_quiz.fsm import QuizState
from fe_quiz.quiz.adapters.http_client import HttpQuizApi
from fe_quiz.quiz.application.strategies import BatchRequest
from fe_quiz.quiz.domain.models import QuizMode
from fe_quiz.quiz.presentation.state_provider import StreamlitStateProvider
from fe_quiz.quiz.presentation.viewmodel import QuizViewModel
from fe_quiz.quiz.presentation.views import (
    components,
    glossary_view,
    history_view,
    progress_view,
    question_list_view,
    question_view,
    summary_view,
)
from fe_quiz.shared.observability import configure_observability

settings = get_settings()

# --- 1. Bootstrap Observability (once per session) ---
if "observability_configured" not in st.session_state:
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s"
    )
    configure_observability("fe-quiz-ui", settings.metrics_port + 1)
    st.session_state.observability_configured = True


# --- 2. Dependency Injection (Composition Root) ---
@st.cache_resource
def get_api() -> HttpQuizApi:
    client = httpx.Client(base_url=settings.api_base, timeout=settings.api_timeout)
    return HttpQuizApi(client)


def render_menu(vm: QuizViewModel, selection: components.SidebarSelection) -> None:
    st.title(f"🎓 {QuizConfig.APP_TITLE}")
    st.write("頑張って勉強しよう!")

    mode = st.radio(
        "出題モード",
        [QuizMode.NORMAL, QuizMode.WEAK],
        format_func=lambda m: "ランダム出題" if m == QuizMode.NORMAL else "苦手問題",
        horizontal=True,
    )
    if st.button("🚀 スタート", type="primary"):
        vm.start_quiz(
            BatchRequest(mode=mode, category=selection.category, options=selection.options)
        )
        st.rerun()


def render_quiz(vm: QuizViewModel, selection: components.SidebarSelection) -> None:
    # --- Main Router (FSM) ---
    state = vm.current_state

    if state == QuizState.IDLE:
        render_menu(vm, selection)

    elif state == QuizState.LOADING:
        # Only reached when the batch fetch failed.
        components.render_error(vm.last_error)
        col_a, col_b = st.columns(2)
        if col_a.button("🔁 再試行", type="primary"):
            vm.retry_load()
            st.rerun()
        if col_b.button("戻る"):
            vm.reset()
            st.rerun()

    elif state in (QuizState.PRESENTING, QuizState.TIMED_OUT):
        question_view.render_active(vm)

    elif state == QuizState.SUBMITTED:
        question_view.render_feedback(vm)

    elif state == QuizState.FINISHED:
        summary_view.render(vm)

    elif state == QuizState.EMPTY:
        st.warning(vm.empty_message)
        if st.button("戻る"):
            vm.reset()
            st.rerun()


def main() -> None:
    st.set_page_config(page_title=QuizConfig.APP_TITLE, layout="centered")
    components.apply_styles()

    # Wiring
    api = get_api()
    state_provider = StreamlitStateProvider()
    vm = QuizViewModel(api, state_provider)

    # --- Sidebar ---
    current = state_provider.get("sidebar") or components.SidebarSelection()
    selection = components.render_sidebar(current)
    if selection != current:
        state_provider.set("sidebar", selection)
        st.rerun()

    if selection.screen == "quiz":
        render_quiz(vm, selection)
    elif selection.screen == "list":
        question_list_view.render(api, vm, selection.options)
    elif selection.screen == "progress":
        progress_view.render(api)
    elif selection.screen == "history":
        history_view.render(api)
    elif selection.screen == "glossary":
        glossary_view.render(api)


if __name__ == "__main__":
    main()
