import streamlit as st

from fe_quiz.config import QuizConfig
from fe_quiz.exceptions import QuizError
from fe_quiz.quiz.adapters.http_client import HttpQuizApi
from fe_quiz.quiz.application.strategies import BatchRequest
from fe_quiz.quiz.domain.models import (
    CategoryId,
    Difficulty,
    QuestionStatus,
    QuizMode,
    QuizOptions,
)
from fe_quiz.quiz.presentation.viewmodel import QuizViewModel
from fe_quiz.quiz.presentation.views.components import navigate, render_error

STATUS_ICONS = {
    QuestionStatus.CORRECT: "⭕",
    QuestionStatus.INCORRECT: "❌",
    QuestionStatus.UNANSWERED: "➖",
}


def render(api: HttpQuizApi, vm: QuizViewModel, options: QuizOptions) -> None:
    st.title("📋 問題一覧")

    try:
        names = {c.id: c.name for c in api.fetch_categories()}
    except QuizError as e:
        render_error(e.message)
        return

    col1, col2, col3 = st.columns(3)
    categories: list[CategoryId | None] = [None, *names]
    category = col1.selectbox(
        "分野",
        categories,
        format_func=lambda c: "すべて" if c is None else names[c],
        key="list_category",
    )
    difficulties: list[str | None] = [None, *QuizConfig.DIFFICULTY_LABELS]
    difficulty = col2.selectbox(
        "難易度",
        difficulties,
        format_func=lambda d: "すべて" if d is None else QuizConfig.DIFFICULTY_LABELS[d],
        key="list_difficulty",
    )
    search = col3.text_input("検索", key="list_search")

    try:
        items = api.fetch_question_list(
            category,
            Difficulty(difficulty) if difficulty else None,
            search or None,
        )
    except QuizError as e:
        render_error(e.message)
        return

    if not items:
        st.info(QuizConfig.EMPTY_MESSAGE)
        return

    st.caption(f"{len(items)} 問")
    for item in items:
        col_q, col_btn = st.columns([5, 1])
        col_q.markdown(
            f"{STATUS_ICONS[item.status]} **{item.id}** {item.prompt[:QuizConfig.PREVIEW_LENGTH]}"
        )
        col_q.caption(f"{item.category_name} / {item.subcategory} • {item.correct_count} / {item.attempts}")
        if col_btn.button("解く", key=f"solve_{item.id}"):
            vm.start_quiz(
                BatchRequest(mode=QuizMode.SINGLE, question_id=item.id, options=options)
            )
            navigate("quiz")
            st.rerun()
