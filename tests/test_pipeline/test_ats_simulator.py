"""Tests for the ATS parsing simulation."""

import pytest

from resume_optimizer.models.schemas.resume_document import ResumeDocument
from resume_optimizer.services.pipeline.ats_simulator import ATSSimulatorService


@pytest.fixture(scope="module")
def ats():
    svc = ATSSimulatorService()
    svc.ensure_loaded()
    return svc


def test_complete_resume_parses(ats, sample_resume):
    result = ats.simulate(sample_resume)
    assert result.parsed_successfully
    assert result.score == 100
    assert result.failures == []
    fields = result.extracted_fields
    assert fields.name and fields.email and fields.phone
    assert fields.sections == ["Experience", "Education", "Skills", "Projects"]
    assert fields.dates == ["2019 - 2023", "2019"]
    assert fields.skills == ["Python", "Flask", "Docker"]


def test_empty_resume_fails_everything(ats):
    result = ats.simulate(ResumeDocument())
    assert not result.parsed_successfully
    assert result.score == 0
    assert len(result.failures) == 6
    assert len(result.recommendations) == 6


def test_short_phone_costs_one_check(ats, sample_resume):
    resume = sample_resume.model_copy(update={"phone": "555-1234"})
    result = ats.simulate(resume)
    assert result.failures == ["Phone not extracted"]
    assert result.recommendations == ["Include phone number in standard format"]
    assert result.score == 83


def test_too_few_sections(ats):
    resume = ResumeDocument(
        name="Jane Doe", email="jane@example.com", phone="5551234567",
        skills=[{"category": "Skills", "items": ["Python"]}],
    )
    result = ats.simulate(resume)
    assert "Missing standard sections" in result.failures
    assert "No dates parsed" in result.failures


def test_name_needs_three_characters(ats, sample_resume):
    result = ats.simulate(sample_resume.model_copy(update={"name": " Al "}))
    assert result.failures == ["Name not extracted"]
