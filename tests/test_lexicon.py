import pytest

from resume_optimizer.services import lexicon
from resume_optimizer.services.synonym_expander import get_expander, reset_expander


def test_tables_are_cached():
    assert lexicon.load_table("vocabulary") is lexicon.load_table("vocabulary")


def test_clear_reloads():
    first = lexicon.load_table("authenticity")
    lexicon.clear()
    second = lexicon.load_table("authenticity")
    assert first == second
    assert first is not second


def test_missing_table_raises():
    with pytest.raises(FileNotFoundError):
        lexicon.load_table("does_not_exist")


def test_bundled_tables():
    assert lexicon.vocabulary()["aws"]["display"] == "AWS"
    assert set(lexicon.verb_matrix()["General"]) == {"Junior", "Mid", "Senior", "Lead", "Principal"}
    assert "Backend" in lexicon.role_emphasis()
    assert lexicon.jd_patterns()["seniority_years"][0]["min_years"] == 8
    assert any(c["canonical"] == "postgresql" for c in lexicon.synonym_clusters())
    assert lexicon.authenticity_rules()["severity_deductions"]["critical"] == 25


def test_reset_expander():
    first = get_expander()
    reset_expander()
    assert get_expander() is not first
