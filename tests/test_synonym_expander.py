import pytest

from resume_optimizer.services.synonym_expander import (
    SynonymExpander,
    are_terms_related,
    generate_candidates,
    get_expander,
)


@pytest.fixture
def expander():
    # Private instance so custom synonyms never leak into the shared one
    return SynonymExpander()


class TestDictionaryLookup:
    def test_canonical_synonyms(self, expander):
        assert expander.get_synonyms("javascript") == ["js", "ecmascript", "node.js", "nodejs"]

    def test_synonym_reaches_parent_and_siblings(self, expander):
        synonyms = expander.get_synonyms("JS")
        assert "javascript" in synonyms
        assert "ecmascript" in synonyms
        assert "js" not in synonyms

    def test_unknown_term(self, expander):
        assert expander.get_synonyms("cobol") == []

    def test_metadata_for_synonym_decays_confidence(self, expander):
        meta = expander.get_keyword_metadata("js")
        assert meta.canonical == "javascript"
        assert meta.confidence == pytest.approx(0.95 * 0.9)
        assert meta.in_dictionary

    def test_metadata_for_unknown(self, expander):
        meta = expander.get_keyword_metadata("Event Sourcing")
        assert meta.canonical == "event sourcing"
        assert meta.confidence == 0.5
        assert not meta.in_dictionary


class TestExpansion:
    def test_dictionary_source(self, expander):
        expansion = expander.expand_keyword("Python")
        assert expansion.source == "dictionary"
        assert "py" in expansion.synonyms

    def test_generated_source(self, expander):
        expansion = expander.expand_keyword("event sourcing")
        assert expansion.source == "generated"
        assert expansion.confidence == 0.5
        assert "event-sourcing" in expansion.synonyms
        assert "eventSourcing" in expansion.synonyms
        assert "ES" in expansion.synonyms

    def test_match_with_expansion(self, expander):
        matches = expander.match_with_expansion(
            "Built services on Amazon Web Services", ["aws", "kubernetes"],
        )
        assert matches[0].found
        assert matches[0].matched_as == "amazon web services"
        assert not matches[1].found
        assert matches[1].matched_as == ""

    def test_add_custom_synonym(self, expander):
        expander.add_custom_synonym("python", "cpython")
        assert "cpython" in expander.get_synonyms("python")
        assert expander.get_keyword_metadata("python").confidence == 0.95
        assert "cpython" in expander.expand_keyword("python").synonyms


def test_is_present(expander):
    assert expander.is_present("aws", ["Amazon Web Services"])
    assert expander.is_present("Docker", ["docker"])
    assert not expander.is_present("docker", ["Python"])


def test_build_clusters(expander):
    clusters = expander.build_clusters(["React", "reactjs", "Kubernetes", "k8s", "Python"])
    assert [c.canonical for c in clusters] == ["react", "kubernetes", "python"]
    assert clusters[0].members == ["React", "reactjs"]
    assert clusters[1].members == ["Kubernetes", "k8s"]


def test_generate_candidates():
    candidates = generate_candidates("machine learning")
    assert "machine-learning" in candidates
    assert "machine_learning" in candidates
    assert "MachineLearning" in candidates
    assert "ML" in candidates
    assert "machine learning" not in candidates
    assert generate_candidates("") == []


class TestAreTermsRelated:
    def test_containment(self):
        assert are_terms_related("React.js", "react")

    def test_small_edit_distance(self):
        assert are_terms_related("kubernetes", "kubernetis")

    def test_short_terms_need_containment(self):
        assert not are_terms_related("go", "js")

    def test_unrelated(self):
        assert not are_terms_related("postgres", "mysql")


def test_get_expander_is_shared():
    assert get_expander() is get_expander()
