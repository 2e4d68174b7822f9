import pytest

from fe_quiz.fsm import QuizAction, QuizState, QuizStateMachine


class TestQuizStateMachine:
    @pytest.mark.parametrize(
        "start, action, end",
        [
            (QuizState.IDLE, QuizAction.START, QuizState.LOADING),
            (QuizState.LOADING, QuizAction.LOAD_SUCCESS, QuizState.PRESENTING),
            (QuizState.LOADING, QuizAction.LOAD_EMPTY, QuizState.EMPTY),
            (QuizState.PRESENTING, QuizAction.SUBMIT_ANSWER, QuizState.SUBMITTED),
            (QuizState.PRESENTING, QuizAction.TIME_EXPIRED, QuizState.TIMED_OUT),
            (QuizState.TIMED_OUT, QuizAction.SUBMIT_ANSWER, QuizState.SUBMITTED),
            (QuizState.SUBMITTED, QuizAction.NEXT_QUESTION, QuizState.PRESENTING),
            (QuizState.SUBMITTED, QuizAction.FINISH_QUIZ, QuizState.FINISHED),
            (QuizState.SUBMITTED, QuizAction.RESTART, QuizState.LOADING),
            (QuizState.FINISHED, QuizAction.RESTART, QuizState.LOADING),
        ],
    )
    def test_valid_transitions(self, start, action, end):
        fsm = QuizStateMachine(start)

        assert fsm.transition(action) is True
        assert fsm.current_state == end

    @pytest.mark.parametrize(
        "start, action",
        [
            (QuizState.IDLE, QuizAction.SUBMIT_ANSWER),
            (QuizState.LOADING, QuizAction.SUBMIT_ANSWER),
            (QuizState.SUBMITTED, QuizAction.SUBMIT_ANSWER),
            (QuizState.SUBMITTED, QuizAction.TIME_EXPIRED),
            (QuizState.TIMED_OUT, QuizAction.TIME_EXPIRED),
            (QuizState.PRESENTING, QuizAction.NEXT_QUESTION),
            (QuizState.PRESENTING, QuizAction.RESTART),
            (QuizState.EMPTY, QuizAction.START),
        ],
    )
    def test_invalid_transitions_leave_state_unchanged(self, start, action):
        fsm = QuizStateMachine(start)

        assert fsm.can(action) is False
        assert fsm.transition(action) is False
        assert fsm.current_state == start

    @pytest.mark.parametrize("start", list(QuizState))
    def test_reset_from_any_state(self, start):
        fsm = QuizStateMachine(start)

        assert fsm.transition(QuizAction.RESET) is True
        assert fsm.current_state == QuizState.IDLE
