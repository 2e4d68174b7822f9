import streamlit as st

from fe_quiz.quiz.domain.models import ScoreBand
from fe_quiz.quiz.presentation.viewmodel import QuizViewModel

BAND_MESSAGES = {
    ScoreBand.EXCELLENT: "素晴らしい!",
    ScoreBand.GOOD: "頑張りました!",
    ScoreBand.NEEDS_WORK: "もう少し頑張りましょう。",
}


def render(vm: QuizViewModel) -> None:
    session = vm.session
    band = session.band

    if band == ScoreBand.EXCELLENT:
        st.balloons()

    st.title("🏁 結果")

    col1, col2 = st.columns(2)
    col1.metric("スコア", f"{session.correct} / {session.total}")
    col2.metric("正答率", f"{session.percentage}%")

    message = BAND_MESSAGES[band]
    if band == ScoreBand.NEEDS_WORK:
        st.warning(message)
    else:
        st.success(message)

    st.markdown("---")
    col_a, col_b = st.columns(2)
    with col_a:
        if st.button("🔄 もう一度", type="primary", use_container_width=True):
            vm.restart()
            st.rerun()
    with col_b:
        if st.button("🏠 メニューに戻る", use_container_width=True):
            vm.reset()
            st.rerun()
