from unittest.mock import Mock

from fe_quiz.config import QuizConfig
from fe_quiz.quiz.application.strategies import (
    BatchRequest,
    RandomBatchStrategy,
    SingleQuestionStrategy,
    StrategyRegistry,
    WeakBatchStrategy,
)
from fe_quiz.quiz.domain.models import CategoryId, QuizMode, QuizOptions
from fe_quiz.quiz.domain.ports import IQuizApi


def _api():
    api = Mock(spec=IQuizApi)
    api.fetch_random_questions.return_value = []
    api.fetch_weak_questions.return_value = []
    return api


class TestRandomBatchStrategy:
    def test_passes_category_and_count(self):
        api = _api()
        request = BatchRequest(category=CategoryId.STRATEGY, options=QuizOptions(count=10))

        RandomBatchStrategy().fetch(api, request)

        api.fetch_random_questions.assert_called_once_with(CategoryId.STRATEGY, 10)

    def test_zero_count_requests_everything(self):
        api = _api()
        RandomBatchStrategy().fetch(api, BatchRequest(options=QuizOptions(count=0)))

        api.fetch_random_questions.assert_called_once_with(
            None, QuizConfig.ALL_QUESTIONS_COUNT
        )


class TestWeakBatchStrategy:
    def test_fetches_weak_set(self):
        api = _api()
        WeakBatchStrategy().fetch(api, BatchRequest(mode=QuizMode.WEAK))

        api.fetch_weak_questions.assert_called_once_with()
        assert WeakBatchStrategy.empty_message == "苦手問題がありません"


class TestSingleQuestionStrategy:
    def test_missing_question_gives_empty_batch(self):
        api = _api()
        api.fetch_question.return_value = None

        batch = SingleQuestionStrategy().fetch(
            api, BatchRequest(mode=QuizMode.SINGLE, question_id="nope")
        )
        assert batch == []

    def test_without_id_does_not_call_api(self):
        api = _api()
        assert SingleQuestionStrategy().fetch(api, BatchRequest(mode=QuizMode.SINGLE)) == []
        api.fetch_question.assert_not_called()

    def test_disables_shuffle_and_offers_retry(self):
        assert SingleQuestionStrategy.allows_shuffle is False
        assert SingleQuestionStrategy.offers_retry is True


class TestStrategyRegistry:
    def test_each_mode_is_registered(self):
        assert isinstance(StrategyRegistry.get(QuizMode.NORMAL), RandomBatchStrategy)
        assert isinstance(StrategyRegistry.get(QuizMode.WEAK), WeakBatchStrategy)
        assert isinstance(StrategyRegistry.get(QuizMode.SINGLE), SingleQuestionStrategy)

    def test_normal_mode_uses_generic_empty_message(self):
        assert StrategyRegistry.get(QuizMode.NORMAL).empty_message == "問題がありません"
