import pytest

from resume_optimizer.services.similarity import (
    edit_similarity,
    jaccard,
    keyword_overlap,
    normalize,
    similarity,
)


def test_similarity_identical():
    text = "Python developer with React and Docker experience"
    assert similarity(text, text) == 1.0


def test_similarity_ignores_case_and_punctuation():
    assert similarity("Python, Developer!", "python developer") == 1.0


def test_similarity_empty():
    assert similarity("", "some text") == 0.0
    assert similarity("some text", "") == 0.0
    assert similarity("!!!", "some text") == 0.0


def test_similarity_synonyms():
    assert similarity("JS", "javascript") == pytest.approx(0.9)
    assert similarity("Docker", "containers") == pytest.approx(0.9)


def test_similarity_different():
    a = "Managed payroll for office staff"
    b = "Kubernetes cluster autoscaling"
    assert similarity(a, b) < 0.5


def test_similarity_related_is_partial():
    score = similarity("built python services", "built java services")
    assert 0.0 < score < 1.0


def test_similarity_shared_keywords():
    # Word overlap is only 0.5; the shared technologies carry the score
    assert similarity("Python and Docker", "Docker with Python") == pytest.approx(0.9)


def test_similarity_is_deterministic_and_bounded():
    pairs = [
        ("Worked on backend services", "Led backend services"),
        ("Must have AWS, Docker, PostgreSQL", "Built a REST API with Python and Flask"),
    ]
    for a, b in pairs:
        first = similarity(a, b)
        assert first == similarity(a, b)
        assert 0.0 <= first <= 1.0


class TestHelpers:
    def test_normalize(self):
        assert normalize("  Node.js,  and   C-level!  ") == "node.js and c-level"

    def test_jaccard(self):
        assert jaccard({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)
        assert jaccard(set(), {"a"}) == 0.0

    def test_edit_similarity(self):
        assert edit_similarity("abc", "abc") == 1.0
        assert edit_similarity("", "") == 1.0
        assert edit_similarity("abcd", "abcx") == pytest.approx(0.75)

    def test_keyword_overlap(self):
        assert keyword_overlap("Python and Docker", "Docker with Python") == 1.0
        assert keyword_overlap("Python and Docker", "Python only") == pytest.approx(0.5)
        assert keyword_overlap("Python", "no technology here") is None
