from fe_quiz.exceptions import QuizError
from fe_quiz.fsm import QuizAction, QuizState, QuizStateMachine
from fe_quiz.quiz.application.strategies import (
    BatchRequest,
    IQuestionStrategy,
    StrategyRegistry,
)
from fe_quiz.quiz.domain.models import (
    Answered,
    QuizSessionState,
    ShuffledQuestion,
    SubmittedAnswer,
    TimedOut,
)
from fe_quiz.quiz.domain.ports import IQuizApi
from fe_quiz.quiz.domain.shuffle import ChoiceShuffler
from fe_quiz.quiz.presentation.state_provider import IStateProvider
from fe_quiz.shared.telemetry import Telemetry


class QuizViewModel:
    """
    Drives one quiz session: batch loading, selection, submission, the
    per-question countdown and score accumulation.

    All session data lives in the state provider so the view model can be
    rebuilt on every Streamlit rerun.
    """

    def __init__(
        self,
        api: IQuizApi,
        state_provider: IStateProvider,
        shuffler: ChoiceShuffler | None = None,
    ) -> None:
        self.api = api
        self.state = state_provider
        self.shuffler = shuffler or ChoiceShuffler()
        self.telemetry = Telemetry("ViewModel")

        saved_fsm = self.state.get("fsm_state", QuizState.IDLE)
        self.fsm = QuizStateMachine(initial_state=saved_fsm)

        if self.state.get("quiz_session") is None:
            self.state.set("quiz_session", QuizSessionState())

    # --- Properties ---
    @property
    def current_state(self) -> QuizState:
        return self.fsm.current_state

    @property
    def session(self) -> QuizSessionState:
        return self.state.get("quiz_session")

    @property
    def questions(self) -> list[ShuffledQuestion]:
        return self.state.get("questions", [])

    @property
    def request(self) -> BatchRequest:
        return self.state.get("batch_request") or BatchRequest()

    @property
    def strategy(self) -> IQuestionStrategy:
        return StrategyRegistry.get(self.request.mode)

    @property
    def last_error(self) -> str | None:
        return self.state.get("last_error")

    @property
    def current_question(self) -> ShuffledQuestion | None:
        qs = self.questions
        idx = self.session.current_q_index
        if qs and 0 <= idx < len(qs):
            return qs[idx]
        return None

    @property
    def is_last_question(self) -> bool:
        return self.session.current_q_index >= len(self.questions) - 1

    @property
    def empty_message(self) -> str:
        return self.strategy.empty_message

    @property
    def display_correct_answer(self) -> int | None:
        """The verdict's correct answer in the shuffled (display) order."""
        q = self.current_question
        result = self.session.last_result
        if q is None or result is None:
            return None
        return q.to_display(result.correct_answer)

    # --- Actions ---
    def start_quiz(self, request: BatchRequest) -> None:
        Telemetry.start_trace()
        self.telemetry.log_info(
            "Action: Start Quiz", mode=request.mode.value, category=request.category
        )

        if self.current_state != QuizState.IDLE:
            self.fsm.transition(QuizAction.RESET)

        self.state.set("batch_request", request)
        self.fsm.transition(QuizAction.START)
        self._load()

    def retry_load(self) -> None:
        """Manual retry after a failed batch fetch."""
        if self.current_state == QuizState.LOADING:
            Telemetry.start_trace()
            self._load()

    def select(self, display_index: int) -> None:
        if self.current_state != QuizState.PRESENTING:
            return
        self.session.selected_answer = display_index

    def submit(self) -> None:
        Telemetry.start_trace()
        state = self.current_state

        if state == QuizState.TIMED_OUT:
            # Earlier sentinel submission failed; send it again.
            self._submit_timeout()
            return

        if state != QuizState.PRESENTING or self.session.last_result is not None:
            return

        q = self.current_question
        selected = self.session.selected_answer
        if q is None or selected is None:
            self.telemetry.log_info("Submit ignored: nothing selected")
            return

        self._send(q, Answered(q.to_original(selected)), timed_out=False)

    def tick(self) -> None:
        """One second of the question timer."""
        if self.current_state != QuizState.PRESENTING:
            return
        if self.session.last_result is not None:
            return
        if not self.session.countdown.tick():
            return

        self.telemetry.log_info(
            "Question timed out", q_id=self.current_question and self.current_question.id
        )
        self.fsm.transition(QuizAction.TIME_EXPIRED)
        self._persist_fsm()
        self._submit_timeout()

    def next_step(self) -> None:
        if self.current_state != QuizState.SUBMITTED:
            return
        Telemetry.start_trace()

        if self.is_last_question:
            self.session.is_complete = True
            self.session.countdown.cancel()
            self.fsm.transition(QuizAction.FINISH_QUIZ)
            self.telemetry.log_info(
                "Quiz Finished",
                correct=self.session.correct,
                total=self.session.total,
                band=self.session.band.value,
            )
        else:
            self.session.next_question()
            self._arm_timer()
            self.state.set("last_error", None)
            self.fsm.transition(QuizAction.NEXT_QUESTION)

        self._persist_fsm()

    def restart(self) -> None:
        if not self.fsm.can(QuizAction.RESTART):
            return
        Telemetry.start_trace()
        self.session.countdown.cancel()
        self.fsm.transition(QuizAction.RESTART)
        self.state.set("quiz_session", QuizSessionState())
        self._load()

    def reset(self) -> None:
        Telemetry.start_trace()
        self.session.countdown.cancel()
        self.fsm.transition(QuizAction.RESET)
        self.state.set("last_error", None)
        self._persist_fsm()

    # --- Internals ---
    def _load(self) -> None:
        request = self.request
        strategy = self.strategy
        self.state.set("last_error", None)

        try:
            batch = strategy.fetch(self.api, request)
        except QuizError as e:
            # Stay in LOADING; retrying is up to the user.
            self.telemetry.log_error("Batch fetch failed", e, mode=request.mode.value)
            self.state.set("last_error", e.message)
            self._persist_fsm()
            return

        shuffle = request.options.shuffle and strategy.allows_shuffle
        self.state.set("questions", self.shuffler.prepare(batch, shuffle))
        self.state.set("quiz_session", QuizSessionState())

        if batch:
            self._arm_timer()
            self.fsm.transition(QuizAction.LOAD_SUCCESS)
        else:
            self.fsm.transition(QuizAction.LOAD_EMPTY)
        self._persist_fsm()

    def _submit_timeout(self) -> None:
        q = self.current_question
        if q is not None:
            self._send(q, TimedOut(), timed_out=True)

    def _send(self, q: ShuffledQuestion, answer: SubmittedAnswer, timed_out: bool) -> None:
        try:
            result = self.api.submit_answer(q.id, answer)
        except QuizError as e:
            self.telemetry.log_error("Submit failed", e, q_id=q.id)
            self.state.set("last_error", e.message)
            return

        self.session.countdown.cancel()
        self.session.record_verdict(result, timed_out=timed_out)
        self.state.set("last_error", None)
        self.fsm.transition(QuizAction.SUBMIT_ANSWER)
        self._persist_fsm()

        self.telemetry.log_info(
            "Verdict received",
            q_id=q.id,
            correct=result.is_correct,
            timed_out=timed_out,
            score=f"{self.session.correct}/{self.session.total}",
        )

    def _arm_timer(self) -> None:
        self.session.countdown.arm(self.request.options.timer)

    def _persist_fsm(self) -> None:
        self.state.set("fsm_state", self.fsm.current_state)
