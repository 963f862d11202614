"""Tests for templated bullet rewriting and the bounded retry loop."""

import pytest

from resume_optimizer.models.schemas.resume_document import ResumeDocument, WorkExperience
from resume_optimizer.models.schemas.rewrite import BulletStatus, ValidationCheck, ValidationResult
from resume_optimizer.services.pipeline.bullet_rewriter import (
    BulletRewriterService,
    resume_evidence_terms,
)
from resume_optimizer.services.pipeline.bullet_validator import supported_terms

CLOUD_BULLET = "Worked on backend services using some cloud tools"
METRIC_BULLET = "Helped the team improve performance by 25%"


class FakeValidator:
    """Returns canned results in order and records every candidate."""

    def __init__(self, results):
        self.results = list(results)
        self.candidates = []

    def validate(self, original, rewritten, jd_analysis, metrics=None, supported=None):
        self.candidates.append(rewritten)
        return self.results[len(self.candidates) - 1]


def _result(passed_checks, total=6):
    checks = [ValidationCheck(name=f"check {i}", passed=i < passed_checks) for i in range(total)]
    failures = [] if passed_checks == total else ["Semantic drift"]
    return ValidationResult(passed=not failures, checks=checks, failure_reasons=failures)


@pytest.fixture(scope="module")
def rewriter():
    svc = BulletRewriterService()
    svc.ensure_loaded()
    return svc


# --- Retry loop ---

class TestRetryLoop:
    def test_attempts_are_bounded(self, backend_jd):
        fake = FakeValidator([_result(3), _result(3), _result(3), _result(6)])
        rewritten = BulletRewriterService(validator=fake).rewrite_bullet(CLOUD_BULLET, backend_jd)
        assert len(fake.candidates) == 3
        assert rewritten.status == BulletStatus.BEST_EFFORT
        assert rewritten.validation.retry_count <= 2

    def test_best_effort_keeps_first_of_ties(self, backend_jd):
        fake = FakeValidator([_result(3), _result(4), _result(4)])
        rewritten = BulletRewriterService(validator=fake).rewrite_bullet(CLOUD_BULLET, backend_jd)
        assert rewritten.validation.retry_count == 1
        assert rewritten.validation.passed_count == 4

    def test_pass_on_last_attempt(self, backend_jd):
        fake = FakeValidator([_result(2), _result(5), _result(6)])
        rewritten = BulletRewriterService(validator=fake).rewrite_bullet(CLOUD_BULLET, backend_jd)
        assert rewritten.status == BulletStatus.PASSED
        assert rewritten.validation.retry_count == 2
        assert rewritten.rewritten == fake.candidates[2]

    def test_stops_on_first_pass(self, backend_jd):
        fake = FakeValidator([_result(6)])
        rewritten = BulletRewriterService(validator=fake).rewrite_bullet(CLOUD_BULLET, backend_jd)
        assert len(fake.candidates) == 1
        assert rewritten.status == BulletStatus.PASSED
        assert rewritten.validation.retry_count == 0


# --- End-to-end rewriting with the real validator ---

@pytest.mark.scenario
def test_weak_opener_rewrite(rewriter, backend_jd):
    supported = supported_terms(CLOUD_BULLET, backend_jd, evidence=set())
    rewritten = rewriter.rewrite_bullet(CLOUD_BULLET, backend_jd, supported=supported)
    assert rewritten.rewritten == "Led backend services using some cloud tools"
    assert rewritten.status == BulletStatus.BEST_EFFORT
    assert rewritten.validation.retry_count == 1
    assert rewritten.validation.passed_count == 5
    # No unbacked JD skill is ever spliced in
    assert "AWS" not in rewritten.rewritten


@pytest.mark.scenario
def test_metric_is_kept(rewriter, backend_jd):
    rewritten = rewriter.rewrite_bullet(METRIC_BULLET, backend_jd)
    assert "25%" in rewritten.rewritten
    assert rewritten.metrics_preserved


def test_rewrite_is_deterministic(rewriter, backend_jd):
    assert rewriter.rewrite_bullet(METRIC_BULLET, backend_jd) == rewriter.rewrite_bullet(METRIC_BULLET, backend_jd)


# --- Candidate generation ---

class TestGenerateCandidate:
    def test_weak_verb_uses_its_slot(self, rewriter, backend_jd):
        assert rewriter.generate_candidate(METRIC_BULLET, backend_jd) == (
            "Spearheaded the team improve performance by 25%"
        )

    def test_weak_phrase_replaced(self, rewriter, backend_jd):
        candidate = rewriter.generate_candidate("Was responsible for the billing service", backend_jd)
        assert candidate == "Architected the billing service"

    def test_bullet_marker_stripped(self, rewriter, backend_jd):
        candidate = rewriter.generate_candidate("- Helped the team ship releases", backend_jd)
        assert candidate.startswith("Spearheaded the team")

    def test_readability_failure_prefers_short_verb(self, rewriter, backend_jd):
        candidate = rewriter.generate_candidate(
            CLOUD_BULLET, backend_jd, attempt=1, previous_failures=["Awkward phrasing"],
        )
        assert candidate.startswith("Led ")

    def test_weak_verb_failure_replaces_past_tense_opener(self, rewriter, backend_jd):
        candidate = rewriter.generate_candidate(
            "Managed a team of five", backend_jd, previous_failures=["Weak action verb"],
        )
        assert candidate == "Architected a team of five"

    def test_weak_verb_failure_prepends_verb(self, rewriter, backend_jd):
        candidate = rewriter.generate_candidate(
            "Kubernetes migration for payments", backend_jd, previous_failures=["Weak action verb"],
        )
        assert candidate == "Architected kubernetes migration for payments"

    def test_prepend_keeps_acronyms(self, rewriter, backend_jd):
        candidate = rewriter.generate_candidate(
            "AWS migration for payments", backend_jd, previous_failures=["Weak action verb"],
        )
        assert candidate == "Architected AWS migration for payments"

    def test_gerund_opener_left_alone(self, rewriter, backend_jd):
        assert rewriter.generate_candidate("Using Git daily", backend_jd).startswith("Using")


class TestSplicing:
    def test_supported_keyword_spliced(self, rewriter, backend_jd):
        candidate = rewriter.generate_candidate(
            "Built dashboards using React", backend_jd, supported={"aws", "react"},
        )
        assert candidate == "Built dashboards using AWS and React"

    def test_unsupported_keyword_not_spliced(self, rewriter, backend_jd):
        candidate = rewriter.generate_candidate("Built dashboards using React", backend_jd, supported={"react"})
        assert candidate == "Built dashboards using React"

    def test_no_anchor_no_splice(self, rewriter, backend_jd):
        candidate = rewriter.generate_candidate("Built dashboards", backend_jd, supported={"aws"})
        assert candidate == "Built dashboards"

    def test_suppressed_after_hallucination(self, rewriter, backend_jd):
        candidate = rewriter.generate_candidate(
            "Built dashboards using React",
            backend_jd,
            previous_failures=["Hallucinated skill detected"],
            supported={"aws", "react"},
        )
        assert candidate == "Built dashboards using React"


class TestLengthClamp:
    def test_long_bullet_clamped(self, rewriter, backend_jd):
        bullet = "Built " + " ".join(f"thing{i}" for i in range(30))
        candidate = rewriter.generate_candidate(bullet, backend_jd)
        assert len(candidate.split()) == 25

    def test_clamp_never_drops_a_metric(self, rewriter, backend_jd):
        bullet = "Built " + " ".join(f"thing{i}" for i in range(30)) + " saving 40%"
        candidate = rewriter.generate_candidate(bullet, backend_jd)
        assert candidate.endswith("saving 40%")


# --- Stage run ---

def test_run_rewrites_every_nonblank_bullet(rewriter, backend_jd, sample_resume):
    rewrites = rewriter.run(resume=sample_resume, jd_analysis=backend_jd, matches=[], evidence=set())
    assert [(r.section, r.entry_index, r.bullet_index) for r in rewrites] == [
        ("experience", 0, 0),
        ("experience", 0, 1),
        ("project", 0, 0),
    ]
    assert all(r.validation.retry_count <= 2 for r in rewrites)


def test_run_skips_blank_bullets(rewriter, backend_jd):
    resume = ResumeDocument(work_experience=[WorkExperience(bullets=["", "Helped ship releases"])])
    rewrites = rewriter.run(resume=resume, jd_analysis=backend_jd)
    assert [r.bullet_index for r in rewrites] == [1]


def test_resume_evidence_terms(sample_resume):
    assert resume_evidence_terms(sample_resume) >= {"python", "flask", "docker", "rest"}
    assert "aws" not in resume_evidence_terms(sample_resume)
