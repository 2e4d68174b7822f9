import json
import os
import tempfile
from collections.abc import Callable
from datetime import datetime, timezone

from pydantic import ValidationError

from fe_quiz.exceptions import StorageError
from fe_quiz.quiz.domain.models import Progress
from fe_quiz.quiz.domain.ports import IProgressRepository
from fe_quiz.shared.telemetry import Telemetry, measure_time


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class JsonProgressRepository(IProgressRepository):
    """
    Stores the Progress document as one JSON file.

    Saves go to a temp file in the same directory and are swapped in with
    os.replace, so a crash mid-write leaves the previous document intact.
    """

    def __init__(self, path: str, clock: Callable[[], datetime] = utc_now) -> None:
        self.path = path
        self.clock = clock
        self.telemetry = Telemetry("JsonProgressRepository")

    @measure_time("progress_load")
    def load(self) -> Progress:
        if not os.path.exists(self.path):
            self.telemetry.log_info("No progress file yet. Creating.", path=self.path)
            progress = Progress.fresh(self.clock())
            self.save(progress)
            return progress

        try:
            with open(self.path, encoding="utf-8") as f:
                return Progress.model_validate(json.load(f))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise StorageError(
                "進捗データの読み込みに失敗しました", {"path": self.path}
            ) from e

    @measure_time("progress_save")
    def save(self, progress: Progress) -> None:
        directory = os.path.dirname(self.path) or "."
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=".progress-",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_path = tmp.name
                json.dump(progress.to_wire(), tmp, ensure_ascii=False, indent=2)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError(
                "進捗データの保存に失敗しました", {"path": self.path}
            ) from e


class InMemoryProgressRepository(IProgressRepository):
    """Keeps the document as serialized JSON so callers never share objects."""

    def __init__(
        self, progress: Progress | None = None, clock: Callable[[], datetime] = utc_now
    ) -> None:
        self.clock = clock
        self._document: str | None = progress.model_dump_json() if progress else None
        self.save_count = 0

    def load(self) -> Progress:
        if self._document is None:
            progress = Progress.fresh(self.clock())
            self.save(progress)
            return progress
        return Progress.model_validate_json(self._document)

    def save(self, progress: Progress) -> None:
        self._document = progress.model_dump_json()
        self.save_count += 1
