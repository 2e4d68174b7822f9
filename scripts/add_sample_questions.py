"""
Merges a file of sample questions into the question bank.

    python scripts/add_sample_questions.py samples.json [--target data/questions.json]

The sample file is either a list of questions or a `{"questions": [...]}`
document. Questions whose id already exists in the target are skipped.
"""
import argparse
import json
import os
import tempfile

from pydantic import ValidationError

from fe_quiz.config import get_settings
from fe_quiz.quiz.domain.models import Question


def load_samples(path: str) -> list[Question]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    raw = data["questions"] if isinstance(data, dict) else data
    return [Question.model_validate(q) for q in raw]


def merge_questions(bank: dict, samples: list[Question]) -> int:
    """Appends samples with unseen ids to `bank["questions"]`. Returns the count added."""
    questions = bank.setdefault("questions", [])
    known = {q["id"] for q in questions}
    added = 0
    for sample in samples:
        if sample.id in known:
            continue
        questions.append(sample.model_dump(mode="json", by_alias=True, exclude_none=True))
        known.add(sample.id)
        added += 1
    return added


def write_atomic(path: str, data: dict) -> None:
    directory = os.path.dirname(path) or "."
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=directory, suffix=".tmp", delete=False
    ) as tmp:
        json.dump(data, tmp, ensure_ascii=False, indent=2)
    os.replace(tmp.name, path)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("samples", help="JSON file with the questions to add")
    parser.add_argument("--target", default=get_settings().questions_file)
    args = parser.parse_args()

    try:
        samples = load_samples(args.samples)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        print(f"Error: cannot read samples from {args.samples}: {e}")
        raise SystemExit(1)

    if os.path.exists(args.target):
        with open(args.target, encoding="utf-8") as f:
            bank = json.load(f)
    else:
        bank = {"categories": [], "questions": []}

    added = merge_questions(bank, samples)
    write_atomic(args.target, bank)
    print(f"Success! Added {added} of {len(samples)} questions to {args.target}")


if __name__ == "__main__":
    main()
