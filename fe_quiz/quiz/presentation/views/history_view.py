import streamlit as st

from fe_quiz.config import QuizConfig
from fe_quiz.exceptions import QuizError
from fe_quiz.quiz.adapters.http_client import HttpQuizApi
from fe_quiz.quiz.presentation.views.components import render_error


def render(api: HttpQuizApi) -> None:
    st.title("🕘 回答履歴")

    limit = st.slider(
        "表示件数",
        min_value=1,
        max_value=QuizConfig.HISTORY_LIMIT,
        value=QuizConfig.DEFAULT_HISTORY_LIMIT,
    )
    try:
        history = api.fetch_history(limit)
    except QuizError as e:
        render_error(e.message)
        return

    if not history:
        st.info("まだ回答履歴がありません")
        return

    for item in history:
        mark = "⭕" if item.is_correct else "❌"
        answered = item.answered_at.strftime("%Y-%m-%d %H:%M")
        if item.question:
            st.markdown(f"{mark} **{item.question.category_name}** {item.question.question_text}")
        else:
            st.markdown(f"{mark} {item.question_id}")
        st.caption(answered)
