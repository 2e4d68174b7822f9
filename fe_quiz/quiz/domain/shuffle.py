import random

from fe_quiz.config import QuizConfig
from fe_quiz.quiz.domain.models import PublicQuestion, ShuffledQuestion


class ChoiceShuffler:
    """
    Randomizes choice order per question and records the permutation so a
    displayed position can be translated back to the canonical answer index.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()

    def shuffle(self, question: PublicQuestion) -> ShuffledQuestion:
        shuffle_map = list(range(QuizConfig.CHOICE_COUNT))
        self.rng.shuffle(shuffle_map)
        return ShuffledQuestion(question=question, shuffle_map=shuffle_map)

    def prepare(
        self, questions: list[PublicQuestion], enabled: bool
    ) -> list[ShuffledQuestion]:
        if not enabled:
            return [ShuffledQuestion(question=q) for q in questions]
        return [self.shuffle(q) for q in questions]
