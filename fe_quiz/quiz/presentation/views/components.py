import streamlit as st
from pydantic import BaseModel

from fe_quiz.config import QuizConfig
from fe_quiz.quiz.domain.models import CategoryId, QuizOptions
from fe_quiz.shared.telemetry import Telemetry

SCREENS = {
    "quiz": "📝 クイズ",
    "list": "📋 問題一覧",
    "progress": "📊 学習進捗",
    "history": "🕘 回答履歴",
    "glossary": "📖 用語集",
}


class SidebarSelection(BaseModel):
    screen: str = "quiz"
    category: CategoryId | None = None
    options: QuizOptions = QuizOptions()


def apply_styles() -> None:
    st.markdown(
        """
        <style>
            .block-container { padding-top: 2rem !important; }
            .question-text { font-size: 1.1rem; font-weight: 600; margin-bottom: 1rem; line-height: 1.6; }
            .choice { padding: 8px 12px; border-radius: 6px; margin-bottom: 6px; border: 1px solid #e5e7eb; }
            .choice-correct { background-color: #dcfce7; border-color: #16a34a; }
            .choice-wrong { background-color: #fee2e2; border-color: #dc2626; }
            .timer-warning { color: #d97706; font-weight: bold; }
            .timer-danger { color: #dc2626; font-weight: bold; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def render_sidebar(current: SidebarSelection) -> SidebarSelection:
    st.sidebar.header("⚙️ 設定")

    screens = list(SCREENS)
    screen = st.sidebar.radio(
        "画面",
        screens,
        index=screens.index(current.screen),
        format_func=lambda s: SCREENS[s],
    )

    st.sidebar.subheader("出題オプション")
    categories: list[CategoryId | None] = [None, *CategoryId]
    category = st.sidebar.selectbox(
        "分野",
        categories,
        index=categories.index(current.category),
        format_func=lambda c: "すべて" if c is None else c.label,
    )

    count = st.sidebar.selectbox(
        "問題数",
        QuizConfig.QUIZ_COUNT_OPTIONS,
        index=QuizConfig.QUIZ_COUNT_OPTIONS.index(current.options.count),
        format_func=lambda n: "全問" if n == 0 else f"{n}問",
    )
    timer = st.sidebar.selectbox(
        "制限時間",
        QuizConfig.TIMER_OPTIONS,
        index=QuizConfig.TIMER_OPTIONS.index(current.options.timer),
        format_func=lambda t: "なし" if t is None else f"{t}秒",
    )
    shuffle = st.sidebar.toggle("選択肢をシャッフル", value=current.options.shuffle)

    with st.sidebar.expander("🕵️‍♂️ Telemetry"):
        st.caption("Trace ID: " + Telemetry.get_trace_id())

    return SidebarSelection(
        screen=screen,
        category=category,
        options=QuizOptions(count=count, shuffle=shuffle, timer=timer),
    )


def render_error(message: str | None) -> None:
    if message:
        st.error(message, icon="⚠️")


def navigate(screen: str) -> None:
    """Switches the sidebar screen on the next rerun."""
    current: SidebarSelection = st.session_state.get("sidebar", SidebarSelection())
    st.session_state["sidebar"] = current.model_copy(update={"screen": screen})
