"""Shared test configuration, fixtures and pytest markers."""

import pytest

from resume_optimizer.models.schemas.resume_document import (
    Education,
    Project,
    ResumeDocument,
    SkillCategory,
    WorkExperience,
)
from resume_optimizer.services.pipeline.jd_analyzer import JDAnalyzerService


BACKEND_JD = (
    "We need a backend engineer with 5+ years building services. "
    "Must have AWS, Docker, PostgreSQL."
)

VAGUE_JD = "We are looking for a motivated person to join our friendly team."


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "scenario: end-to-end acceptance scenarios"
    )


@pytest.fixture(scope="session")
def analyzer():
    svc = JDAnalyzerService()
    svc.ensure_loaded()
    return svc


@pytest.fixture
def backend_jd(analyzer):
    return analyzer.analyze(BACKEND_JD)


@pytest.fixture
def sample_resume():
    return ResumeDocument(
        name="Jane Doe",
        email="jane@example.com",
        phone="+1 (555) 123-4567",
        summary="Software engineer building web services.",
        work_experience=[
            WorkExperience(
                role="Software Engineer",
                company="Acme",
                period="2019 - 2023",
                bullets=[
                    "Worked on backend services using some cloud tools",
                    "Helped the team improve performance by 25%",
                ],
            ),
        ],
        projects=[
            Project(
                title="Inventory API",
                tech_stack=["Python", "Docker"],
                bullets=["Built a REST API with Python and Flask"],
            ),
        ],
        skills=[SkillCategory(category="Technical Skills", items=["Python", "Flask", "Docker"])],
        education=[Education(degree="B.S. Computer Science", school="State University", year="2019")],
    )
