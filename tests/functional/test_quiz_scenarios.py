# ==============================================================================
# ARCHITECTURE: FUNCTIONAL TEST (USER FLOWS)
# ------------------------------------------------------------------------------
# GOAL: Verify end-to-end study sessions through the whole stack.
# CONSTRAINTS:
#   1. STACK: QuizViewModel -> HttpQuizApi -> FastAPI -> services -> JSON files.
#   2. UI: QuizDriver stands in for the Streamlit screens.
# ==============================================================================
import random

import pytest

from fe_quiz.fsm import QuizState
from fe_quiz.quiz.adapters.http_client import HttpQuizApi
from fe_quiz.quiz.domain.models import CategoryId, QuizMode, ScoreBand
from fe_quiz.quiz.domain.shuffle import ChoiceShuffler
from fe_quiz.quiz.presentation.state_provider import InMemoryStateProvider
from fe_quiz.quiz.presentation.viewmodel import QuizViewModel
from tests.drivers.quiz_driver import QuizDriver


@pytest.fixture
def api(client):
    return HttpQuizApi(client)


@pytest.fixture
def driver(api, sample_questions):
    vm = QuizViewModel(api, InMemoryStateProvider(), ChoiceShuffler(random.Random(11)))
    return QuizDriver(vm, {q.id: q.correct_answer for q in sample_questions})


def test_perfect_shuffled_session_is_excellent(driver, api):
    driver.start(category=CategoryId.TECHNOLOGY, shuffle=True)
    driver.assert_state(QuizState.PRESENTING)

    driver.answer_correctly().assert_state(QuizState.SUBMITTED)
    assert driver.vm.session.last_result.is_correct is True
    q = driver.vm.current_question
    assert q.choices[driver.vm.display_correct_answer] == q.question.choices[
        driver.correct_answers[q.id]
    ]
    driver.next()

    driver.answer_correctly().next().assert_state(QuizState.FINISHED)

    assert driver.vm.session.percentage == 100
    assert driver.vm.session.band == ScoreBand.EXCELLENT
    assert api.fetch_progress().total_correct == 2


def test_timeouts_build_the_weak_set_and_review_clears_it(driver, api):
    # Two timed-out attempts on the same question flag it as weak.
    for _ in range(2):
        driver.start(mode=QuizMode.SINGLE, question_id="q3", timer=30)
        driver.wait(30).assert_state(QuizState.SUBMITTED)
        assert driver.vm.session.timed_out is True

    assert [q.id for q in api.fetch_weak_questions()] == ["q3"]

    # Weak review: five correct answers bring q3 to 5/7 and clear it.
    for _ in range(5):
        driver.start(mode=QuizMode.WEAK)
        driver.assert_state(QuizState.PRESENTING)
        driver.answer_correctly().next().assert_state(QuizState.FINISHED)

    driver.start(mode=QuizMode.WEAK).assert_state(QuizState.EMPTY)
    assert driver.vm.empty_message == "苦手問題がありません"

    stats = api.fetch_question_list(category=CategoryId.MANAGEMENT)[0]
    assert (stats.attempts, stats.correct_count) == (7, 5)


def test_reset_wipes_progress_mid_study(driver, api):
    driver.start(count=0)
    driver.answer(0).next()
    assert api.fetch_progress().total_attempts == 1

    api.reset_progress()

    progress = api.fetch_progress()
    assert progress.total_attempts == 0
    assert api.fetch_history(20) == []
