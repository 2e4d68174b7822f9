import logging
from enum import Enum, auto

logger = logging.getLogger(__name__)


class QuizState(Enum):
    IDLE = auto()  # No session yet
    LOADING = auto()  # Fetching the question batch
    PRESENTING = auto()  # Question shown, waiting for a selection
    TIMED_OUT = auto()  # Timer expired, sentinel answer not yet acknowledged
    SUBMITTED = auto()  # Verdict received, showing feedback
    FINISHED = auto()  # Score summary
    EMPTY = auto()  # Batch came back empty


class QuizAction(Enum):
    START = auto()
    LOAD_SUCCESS = auto()
    LOAD_EMPTY = auto()
    TIME_EXPIRED = auto()
    SUBMIT_ANSWER = auto()
    NEXT_QUESTION = auto()
    FINISH_QUIZ = auto()
    RESTART = auto()
    RESET = auto()


class QuizStateMachine:
    """
    Pure FSM Logic.
    Only cares about state transitions, not UI, timers or the network.
    """

    def __init__(self, initial_state: QuizState = QuizState.IDLE) -> None:
        self._state = initial_state

    @property
    def current_state(self) -> QuizState:
        return self._state

    def can(self, action: QuizAction) -> bool:
        return self._next(action) is not None

    def _next(self, action: QuizAction) -> QuizState | None:
        match (self._state, action):
            case (QuizState.IDLE, QuizAction.START):
                return QuizState.LOADING

            case (QuizState.LOADING, QuizAction.LOAD_SUCCESS):
                return QuizState.PRESENTING
            case (QuizState.LOADING, QuizAction.LOAD_EMPTY):
                return QuizState.EMPTY

            case (QuizState.PRESENTING, QuizAction.SUBMIT_ANSWER):
                return QuizState.SUBMITTED
            case (QuizState.PRESENTING, QuizAction.TIME_EXPIRED):
                return QuizState.TIMED_OUT
            case (QuizState.TIMED_OUT, QuizAction.SUBMIT_ANSWER):
                return QuizState.SUBMITTED

            case (QuizState.SUBMITTED, QuizAction.NEXT_QUESTION):
                return QuizState.PRESENTING
            case (QuizState.SUBMITTED, QuizAction.FINISH_QUIZ):
                return QuizState.FINISHED

            # Retry from the feedback of a single question, or from the summary
            case (QuizState.SUBMITTED | QuizState.FINISHED, QuizAction.RESTART):
                return QuizState.LOADING

            case (_, QuizAction.RESET):
                return QuizState.IDLE

        return None

    def transition(self, action: QuizAction) -> bool:
        """
        Applies `action`. Invalid transitions are logged and leave the state
        unchanged. Returns whether the transition happened.
        """
        previous = self._state
        target = self._next(action)

        if target is None:
            logger.error(f"⛔ INVALID TRANSITION: {previous.name} + {action.name}")
            return False

        self._state = target
        logger.info(f"🔄 FSM: {previous.name} --[{action.name}]--> {self._state.name}")
        return True
