import os
from typing import Final


class QuizConfig:
    # --- App Identity ---
    APP_TITLE = "基本情報技術者試験 学習アプリ"
    DEFAULT_USER_ID: Final[str] = "default_user"

    # --- Progress Document ---
    HISTORY_LIMIT: Final[int] = 100
    DEFAULT_HISTORY_LIMIT: Final[int] = 20
    PREVIEW_LENGTH: Final[int] = 50

    # --- Weak Question Policy ---
    # Flag when attempts >= 2 and rate < 0.5, clear when attempts >= 3 and
    # rate >= 0.7. Anything in between leaves membership unchanged.
    WEAK_MIN_ATTEMPTS = 2
    WEAK_FLAG_BELOW = 0.5
    WEAK_CLEAR_MIN_ATTEMPTS = 3
    WEAK_CLEAR_AT = 0.7

    # Question list status: "correct" when the rate reaches this value
    LIST_CORRECT_RATE = 0.5

    # --- Quiz Options ---
    DEFAULT_QUESTION_COUNT: Final[int] = 5
    QUIZ_COUNT_OPTIONS: Final[list[int]] = [5, 10, 20, 0]  # 0 = all
    ALL_QUESTIONS_COUNT: Final[int] = 1000
    TIMER_OPTIONS: Final[list[int | None]] = [None, 30, 60, 90]
    CHOICE_COUNT: Final[int] = 4
    CHOICE_LABELS: Final[list[str]] = ["ア", "イ", "ウ", "エ"]

    # --- Score Bands (inclusive lower bounds) ---
    EXCELLENT_SCORE = 80
    GOOD_SCORE = 60

    # --- Timer Display ---
    TIMER_WARNING_SECONDS = 10
    TIMER_DANGER_SECONDS = 5

    # --- Empty State Messages ---
    EMPTY_WEAK_MESSAGE = "苦手問題がありません"
    EMPTY_MESSAGE = "問題がありません"

    DIFFICULTY_LABELS: Final[dict[str, str]] = {
        "easy": "易",
        "medium": "中",
        "hard": "難",
    }

    # Display names of the fixed category ids, in display order
    CATEGORY_LABELS: Final[dict[str, str]] = {
        "technology": "テクノロジ系",
        "management": "マネジメント系",
        "strategy": "ストラテジ系",
    }


class Settings:
    """Runtime settings resolved from the environment."""

    def __init__(self) -> None:
        self.data_dir: str = os.getenv("FE_QUIZ_DATA_DIR", "data")
        self.api_base: str = os.getenv("FE_QUIZ_API_BASE", "http://localhost:3001")
        self.api_timeout: float = float(os.getenv("FE_QUIZ_API_TIMEOUT", "10"))
        self.host: str = os.getenv("FE_QUIZ_HOST", "0.0.0.0")
        self.port: int = int(os.getenv("FE_QUIZ_PORT", "3001"))
        self.metrics_port: int = int(os.getenv("FE_QUIZ_METRICS_PORT", "8000"))

    @property
    def questions_file(self) -> str:
        return os.path.join(self.data_dir, "questions.json")

    @property
    def glossary_file(self) -> str:
        return os.path.join(self.data_dir, "glossary.json")

    @property
    def progress_file(self) -> str:
        return os.path.join(self.data_dir, "user_progress.json")


def get_settings() -> Settings:
    return Settings()
