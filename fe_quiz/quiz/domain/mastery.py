from datetime import datetime

from fe_quiz.config import QuizConfig
from fe_quiz.quiz.domain.models import (
    Answered,
    CategoryStat,
    HistoryEntry,
    Progress,
    ProgressSummary,
    Question,
    QuestionStat,
    SubmittedAnswer,
    answer_to_wire,
)
from fe_quiz.shared.telemetry import Telemetry


class WeakQuestionPolicy:
    """
    Decides weak-set membership from a question's updated counters.

    Between the flag and clear thresholds membership is left alone, so a
    question hovering around 50-70% does not flap in and out of review.
    """

    def __init__(
        self,
        min_attempts: int = QuizConfig.WEAK_MIN_ATTEMPTS,
        flag_below: float = QuizConfig.WEAK_FLAG_BELOW,
        clear_min_attempts: int = QuizConfig.WEAK_CLEAR_MIN_ATTEMPTS,
        clear_at: float = QuizConfig.WEAK_CLEAR_AT,
    ) -> None:
        self.min_attempts = min_attempts
        self.flag_below = flag_below
        self.clear_min_attempts = clear_min_attempts
        self.clear_at = clear_at

    def evaluate(self, stat: QuestionStat) -> bool | None:
        """True = add, False = remove, None = leave unchanged."""
        rate = stat.correct_rate
        if stat.attempts >= self.min_attempts and rate < self.flag_below:
            return True
        if rate >= self.clear_at and stat.attempts >= self.clear_min_attempts:
            return False
        return None

    def apply(self, weak_questions: list[str], question_id: str, stat: QuestionStat) -> None:
        verdict = self.evaluate(stat)
        if verdict is True and question_id not in weak_questions:
            weak_questions.append(question_id)
        elif verdict is False and question_id in weak_questions:
            weak_questions.remove(question_id)


class MasteryRules:
    """
    Pure Domain Logic.
    Applies one answer to a Progress document: counters, history, weak set.
    """

    def __init__(
        self,
        policy: WeakQuestionPolicy | None = None,
        history_limit: int = QuizConfig.HISTORY_LIMIT,
    ) -> None:
        self.policy = policy or WeakQuestionPolicy()
        self.history_limit = history_limit
        self.telemetry = Telemetry("MasteryRules")

    def record_answer(
        self,
        progress: Progress,
        question: Question,
        answer: SubmittedAnswer,
        now: datetime,
    ) -> bool:
        """Mutates `progress` in place and returns whether the answer was correct."""
        is_correct = (
            isinstance(answer, Answered) and answer.index == question.correct_answer
        )

        stat = progress.question_stats.setdefault(question.id, QuestionStat())
        stat.attempts += 1
        if is_correct:
            stat.correct_count += 1
        stat.last_attempt_at = now

        category = progress.category_stats.setdefault(question.category, CategoryStat())
        category.total_attempts += 1
        if is_correct:
            category.correct_count += 1
        category.last_studied_at = now

        progress.history.append(
            HistoryEntry(
                question_id=question.id,
                selected_answer=answer_to_wire(answer),
                is_correct=is_correct,
                answered_at=now,
            )
        )
        if len(progress.history) > self.history_limit:
            progress.history = progress.history[-self.history_limit :]

        was_weak = question.id in progress.weak_questions
        self.policy.apply(progress.weak_questions, question.id, stat)
        is_weak = question.id in progress.weak_questions
        if was_weak != is_weak:
            self.telemetry.log_info(
                "Weak set changed",
                q_id=question.id,
                weak=is_weak,
                attempts=stat.attempts,
                correct=stat.correct_count,
            )

        progress.user.last_accessed_at = now
        return is_correct

    @staticmethod
    def summarize(progress: Progress) -> ProgressSummary:
        # Totals are always derived from the category counters.
        total_attempts = sum(c.total_attempts for c in progress.category_stats.values())
        total_correct = sum(c.correct_count for c in progress.category_stats.values())
        rate = (
            round(total_correct / total_attempts * 100, 1) if total_attempts > 0 else 0
        )
        return ProgressSummary(
            user=progress.user,
            category_stats=progress.category_stats,
            total_attempts=total_attempts,
            total_correct=total_correct,
            overall_correct_rate=rate,
            weak_questions_count=len(progress.weak_questions),
        )
