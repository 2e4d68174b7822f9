import streamlit as st

from fe_quiz.exceptions import QuizError
from fe_quiz.quiz.adapters.http_client import HttpQuizApi
from fe_quiz.quiz.domain.models import CategoryId
from fe_quiz.quiz.presentation.views.components import render_error


def render(api: HttpQuizApi) -> None:
    st.title("📊 学習進捗")

    try:
        progress = api.fetch_progress()
    except QuizError as e:
        render_error(e.message)
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("総回答数", progress.total_attempts)
    col2.metric("正答率", f"{progress.overall_correct_rate}%")
    col3.metric("苦手問題", progress.weak_questions_count)
    st.caption(f"{progress.total_correct} / {progress.total_attempts} 問正解")

    st.subheader("分野別")
    for category in CategoryId:
        stat = progress.category_stats.get(category)
        attempts = stat.total_attempts if stat else 0
        correct = stat.correct_count if stat else 0
        rate = correct / attempts if attempts else 0.0
        st.markdown(f"**{category.label}** {correct} / {attempts}")
        st.progress(rate)

    st.markdown("---")
    with st.expander("進捗をリセット"):
        st.caption("すべての回答記録と苦手問題が削除されます。")
        if st.button("リセットする", type="primary"):
            try:
                st.success(api.reset_progress())
            except QuizError as e:
                render_error(e.message)
