import json

import pytest
import streamlit as st
from fastapi.testclient import TestClient

from fe_quiz.api.main import create_app
from fe_quiz.quiz.adapters.json_catalog import JsonGlossary, JsonQuestionBank
from fe_quiz.quiz.adapters.json_repository import InMemoryProgressRepository
from fe_quiz.quiz.application.catalog import CatalogService
from fe_quiz.quiz.application.service import ProgressService
from fe_quiz.quiz.domain.models import Question
from tests.drivers.factories import FIXED_NOW, make_question_doc


class MockSessionState(dict):
    """
    Mock for st.session_state that behaves like both a dict and an object.
    """

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError as err:
            raise AttributeError(name) from err

    def __setattr__(self, name, value):
        self[name] = value


@pytest.fixture(autouse=True)
def mock_streamlit_session():
    """Every test gets a fresh, dict-backed st.session_state."""
    original_session_state = getattr(st, "session_state", None)
    st.session_state = MockSessionState()

    yield st.session_state

    st.session_state.clear()
    if original_session_state is not None:
        st.session_state = original_session_state


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def question_docs():
    return [
        make_question_doc("q1", "technology", 1, difficulty="easy"),
        make_question_doc("q2", "technology", 0, subcategory="ネットワーク"),
        make_question_doc(
            "q3",
            "management",
            2,
            prompt="プロジェクトの作業を階層的に分解して表したものはどれか。" * 3,
            relatedTerms=["wbs", "no-such-term"],
        ),
        make_question_doc("q4", "strategy", 3, difficulty="hard"),
    ]


@pytest.fixture
def sample_questions(question_docs):
    return [Question.model_validate(d) for d in question_docs]


@pytest.fixture
def data_dir(tmp_path, question_docs):
    categories = [
        {"id": "technology", "name": "テクノロジ系", "subcategories": ["基礎理論"]},
        {"id": "management", "name": "マネジメント系", "subcategories": []},
        {"id": "strategy", "name": "ストラテジ系", "subcategories": []},
    ]
    terms = [
        {
            "id": "wbs",
            "term": "WBS",
            "fullName": "Work Breakdown Structure",
            "meaning": "作業分解構成図",
            "category": "management",
            "subcategory": "プロジェクトマネジメント",
            "description": "作業を階層的に分解したもの",
        },
        {
            "id": "dns",
            "term": "DNS",
            "meaning": "名前解決の仕組み",
            "category": "technology",
            "subcategory": "ネットワーク",
            "description": "ドメイン名と IP アドレスを対応付ける",
        },
    ]
    (tmp_path / "questions.json").write_text(
        json.dumps({"categories": categories, "questions": question_docs}),
        encoding="utf-8",
    )
    (tmp_path / "glossary.json").write_text(
        json.dumps({"terms": terms}), encoding="utf-8"
    )
    return tmp_path


@pytest.fixture
def question_bank(data_dir):
    return JsonQuestionBank(str(data_dir / "questions.json"))


@pytest.fixture
def glossary(data_dir):
    return JsonGlossary(str(data_dir / "glossary.json"))


@pytest.fixture
def progress_repo(fixed_clock):
    return InMemoryProgressRepository(clock=fixed_clock)


@pytest.fixture
def progress_service(progress_repo, question_bank, glossary, fixed_clock):
    return ProgressService(progress_repo, question_bank, glossary, clock=fixed_clock)


@pytest.fixture
def catalog(question_bank, glossary, progress_service):
    return CatalogService(question_bank, glossary, progress_service)


@pytest.fixture
def client(progress_service, catalog):
    app = create_app(progress_service=progress_service, catalog=catalog)
    with TestClient(app) as test_client:
        yield test_client
