"""ATS Simulator: can a parser pull the basics out of the optimized resume?

Six pass/fail checks on the structured document. Score is the share of
checks passed, so 5/6 gives 83.
"""

import logging
import re
from typing import Any

from resume_optimizer.models.schemas.ats_result import ATSSimulationResult, ExtractedFields
from resume_optimizer.models.schemas.resume_document import ResumeDocument
from resume_optimizer.services.pipeline.base import BaseStage

logger = logging.getLogger(__name__)

TOTAL_CHECKS = 6
MIN_PHONE_DIGITS = 10
MIN_NAME_LENGTH = 3
MIN_SECTIONS = 3

_DIGIT_RE = re.compile(r"\d")


class ATSSimulatorService(BaseStage[ATSSimulationResult]):
    stage_name = "ats_simulator"
    required_inputs = ("resume",)

    def _run(self, **inputs: Any) -> ATSSimulationResult:
        return self.simulate(inputs["resume"])

    def simulate(self, resume: ResumeDocument) -> ATSSimulationResult:
        failures: list[str] = []
        recommendations: list[str] = []

        has_email = "@" in resume.email
        has_phone = len(_DIGIT_RE.findall(resume.phone)) >= MIN_PHONE_DIGITS
        has_name = len(resume.name.strip()) >= MIN_NAME_LENGTH

        if not has_email:
            failures.append("Email not extracted")
            recommendations.append("Ensure email is clearly visible at the top of resume")
        if not has_phone:
            failures.append("Phone not extracted")
            recommendations.append("Include phone number in standard format")
        if not has_name:
            failures.append("Name not extracted")
            recommendations.append("Ensure name is prominently displayed")

        sections = []
        if resume.work_experience:
            sections.append("Experience")
        if resume.education:
            sections.append("Education")
        if resume.skills:
            sections.append("Skills")
        if resume.projects:
            sections.append("Projects")
        if resume.certifications:
            sections.append("Certifications")
        if len(sections) < MIN_SECTIONS:
            failures.append("Missing standard sections")
            recommendations.append("Include Experience, Education, and Skills sections")

        dates = [e.period for e in resume.work_experience if e.period.strip()]
        dates += [e.year for e in resume.education if e.year.strip()]
        if not dates:
            failures.append("No dates parsed")
            recommendations.append("Include dates for all experience and education entries")

        skills = [s for s in resume.all_skills() if s.strip()]
        if not skills:
            failures.append("No skills extracted")
            recommendations.append("List skills in a dedicated Skills section")

        score = round((TOTAL_CHECKS - len(failures)) / TOTAL_CHECKS * 100)
        logger.info("ATS simulation: score=%d failures=%d", score, len(failures))
        return ATSSimulationResult(
            parsed_successfully=not failures,
            score=score,
            extracted_fields=ExtractedFields(
                name=has_name,
                email=has_email,
                phone=has_phone,
                sections=sections,
                dates=dates,
                skills=skills,
            ),
            failures=failures,
            recommendations=recommendations,
        )
