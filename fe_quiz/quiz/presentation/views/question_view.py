import time

import streamlit as st

from fe_quiz.config import QuizConfig
from fe_quiz.fsm import QuizState
from fe_quiz.quiz.presentation.viewmodel import QuizViewModel
from fe_quiz.quiz.presentation.views.components import navigate, render_error

_TICK_KEY = "countdown_clock"


def _render_header(vm: QuizViewModel) -> None:
    q = vm.current_question
    idx = vm.session.current_q_index
    total = len(vm.questions)
    difficulty = QuizConfig.DIFFICULTY_LABELS.get(
        q.question.difficulty.value if q.question.difficulty else "", ""
    )
    context = f"問題 {idx + 1} / {total} • {q.question.category_name}"
    if q.question.subcategory:
        context += f" / {q.question.subcategory}"
    if difficulty:
        context += f" • 難易度: {difficulty}"
    st.caption(context)
    st.progress((idx + 1) / total if total else 0.0)


def _advance_countdown(vm: QuizViewModel) -> None:
    """Feeds whole elapsed seconds into the view model's countdown."""
    session = vm.session
    marker = (session.session_id, session.current_q_index, vm.current_question.id)
    now = time.monotonic()
    clock = st.session_state.get(_TICK_KEY)

    if clock is None or clock[0] != marker:
        st.session_state[_TICK_KEY] = (marker, now)
        return

    elapsed = int(now - clock[1])
    for _ in range(elapsed):
        vm.tick()
    st.session_state[_TICK_KEY] = (marker, clock[1] + elapsed)


@st.fragment(run_every=1)
def _render_countdown(vm: QuizViewModel) -> None:
    _advance_countdown(vm)

    if vm.current_state != QuizState.PRESENTING:
        # Timer expired: redraw the whole page with the verdict.
        st.rerun()

    countdown = vm.session.countdown
    if not countdown.armed or countdown.remaining is None:
        return

    css = ""
    if countdown.remaining <= QuizConfig.TIMER_DANGER_SECONDS:
        css = "timer-danger"
    elif countdown.remaining <= QuizConfig.TIMER_WARNING_SECONDS:
        css = "timer-warning"
    st.markdown(
        f'<div class="{css}">⏱️ 残り {countdown.remaining} 秒</div>',
        unsafe_allow_html=True,
    )
    st.progress(countdown.fraction_left)


def render_active(vm: QuizViewModel) -> None:
    q = vm.current_question
    if q is None:
        return

    _render_header(vm)
    if vm.current_state == QuizState.PRESENTING:
        _render_countdown(vm)

    st.markdown(f'<div class="question-text">{q.question.prompt}</div>', unsafe_allow_html=True)

    labels = [
        f"{QuizConfig.CHOICE_LABELS[i]}. {text}" for i, text in enumerate(q.choices)
    ]
    choice = st.radio(
        "選択肢",
        list(range(len(labels))),
        format_func=lambda i: labels[i],
        index=None,
        key=f"choice_{vm.session.current_q_index}_{q.id}",
        label_visibility="collapsed",
        disabled=vm.current_state != QuizState.PRESENTING,
    )
    if choice is not None:
        vm.select(choice)

    render_error(vm.last_error)

    if vm.current_state == QuizState.TIMED_OUT:
        st.warning("時間切れです。")
        if st.button("🔁 再送信", type="primary"):
            vm.submit()
            st.rerun()
        return

    if st.button(
        "回答する", type="primary", disabled=vm.session.selected_answer is None
    ):
        vm.submit()
        st.rerun()


def render_feedback(vm: QuizViewModel) -> None:
    q = vm.current_question
    result = vm.session.last_result
    if q is None or result is None:
        return

    _render_header(vm)
    st.markdown(f'<div class="question-text">{q.question.prompt}</div>', unsafe_allow_html=True)

    if vm.session.timed_out:
        st.warning("⏰ 時間切れです。")
    elif result.is_correct:
        st.success("⭕ 正解!")
    else:
        st.error("❌ 不正解")

    correct = vm.display_correct_answer
    selected = vm.session.selected_answer
    for i, text in enumerate(q.choices):
        css = "choice"
        if i == correct:
            css += " choice-correct"
        elif i == selected:
            css += " choice-wrong"
        st.markdown(
            f'<div class="{css}">{QuizConfig.CHOICE_LABELS[i]}. {text}</div>',
            unsafe_allow_html=True,
        )

    if result.explanation:
        st.info(result.explanation, icon="💡")

    if result.related_terms:
        st.markdown("**関連用語**")
        for term in result.related_terms:
            title = term.term + (f" ({term.full_name})" if term.full_name else "")
            with st.expander(title):
                st.write(term.meaning)
                if term.description:
                    st.caption(term.description)

    stats = result.stats
    st.caption(f"この問題の成績: {stats.correct_count} / {stats.attempts} 回正解")

    st.markdown("---")
    if vm.strategy.offers_retry:
        col_a, col_b = st.columns(2)
        if col_a.button("🔄 もう一度", use_container_width=True):
            vm.restart()
            st.rerun()
        if col_b.button("↩️ 一覧に戻る", use_container_width=True):
            vm.reset()
            navigate("list")
            st.rerun()
        return

    label = "結果を見る" if vm.is_last_question else "次の問題へ"
    if st.button(label, type="primary", use_container_width=True):
        vm.next_step()
        st.rerun()
