import streamlit as st

from fe_quiz.exceptions import QuizError
from fe_quiz.quiz.adapters.http_client import HttpQuizApi
from fe_quiz.quiz.domain.models import CategoryId
from fe_quiz.quiz.presentation.views.components import render_error


def render(api: HttpQuizApi) -> None:
    st.title("📖 用語集")

    col1, col2 = st.columns([1, 2])
    categories: list[CategoryId | None] = [None, *CategoryId]
    category = col1.selectbox(
        "分野",
        categories,
        format_func=lambda c: "すべて" if c is None else c.label,
        key="glossary_category",
    )
    search = col2.text_input("検索", key="glossary_search")

    try:
        terms = api.fetch_glossary(category, search or None)
    except QuizError as e:
        render_error(e.message)
        return

    if not terms:
        st.info("該当する用語がありません")
        return

    for term in terms:
        title = term.term + (f" ({term.full_name})" if term.full_name else "")
        with st.expander(title):
            st.markdown(f"**意味**: {term.meaning}")
            if term.description:
                st.write(term.description)
            if term.examples:
                st.markdown("**例**")
                for example in term.examples:
                    st.markdown(f"- {example}")
            if term.tips:
                st.info(term.tips, icon="💡")
