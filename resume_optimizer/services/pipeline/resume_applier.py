"""Resume Applier: writes accepted rewrites back into a copy of the resume.

Also tops up the skills section with missing JD skills, nudges the summary
toward the role's emphasis terms, and produces the warning report for
gaps that cannot be filled automatically.
"""

import logging
from typing import Any

from resume_optimizer.config import settings
from resume_optimizer.models.responses import SynthesizedProject, WarningReport
from resume_optimizer.models.schemas.jd_analysis import JDAnalysis
from resume_optimizer.models.schemas.resume_document import ResumeDocument, SkillCategory
from resume_optimizer.models.schemas.rewrite import RewrittenBullet
from resume_optimizer.services import lexicon
from resume_optimizer.services.keyword_extractor import display_form
from resume_optimizer.services.pipeline.base import BaseStage
from resume_optimizer.services.synonym_expander import get_expander

logger = logging.getLogger(__name__)

TECHNICAL_CATEGORY = "Technical Skills"
SOFT_CATEGORY = "Soft Skills"
TECHNICAL_MARKERS = ("technical", "programming")
SOFT_MARKERS = ("soft", "interpersonal")
MAX_SUGGESTED_STACK = 4


def _find_category(skills: list[SkillCategory], markers: tuple[str, ...]) -> SkillCategory | None:
    for cat in skills:
        name = cat.category.lower()
        if any(m in name for m in markers):
            return cat
    return None


def missing_skills(wanted: list[str], resume: ResumeDocument) -> list[str]:
    """JD skills with no case-insensitive or synonym match in the resume's skills."""
    existing = resume.all_skills()
    expander = get_expander()
    return [s for s in wanted if not expander.is_present(s, existing)]


class ResumeApplierService(BaseStage[ResumeDocument]):
    stage_name = "resume_applier"
    lookup_tables = ("action_verbs", "synonyms", "vocabulary")
    required_inputs = ("resume", "jd_analysis")

    def load(self) -> None:
        self._emphasis = lexicon.role_emphasis()

    def _run(self, **inputs: Any) -> ResumeDocument:
        resume: ResumeDocument = inputs["resume"]
        rewrites: list[RewrittenBullet] = inputs.get("rewrites") or []
        jd_analysis: JDAnalysis = inputs["jd_analysis"]
        return self.apply(resume, rewrites, jd_analysis)

    def apply(
        self,
        resume: ResumeDocument,
        rewrites: list[RewrittenBullet],
        jd_analysis: JDAnalysis,
    ) -> ResumeDocument:
        optimized = resume.model_copy(deep=True)

        applied = 0
        for rw in rewrites:
            if not (rw.validation.passed or rw.semantic_similarity >= settings.apply_similarity_floor):
                continue
            entries = optimized.work_experience if rw.section == "experience" else optimized.projects
            if rw.entry_index < len(entries) and rw.bullet_index < len(entries[rw.entry_index].bullets):
                entries[rw.entry_index].bullets[rw.bullet_index] = rw.rewritten
                applied += 1

        added = self.enhance_skills(optimized, jd_analysis)
        if optimized.summary and settings.augment_summary:
            optimized.summary = self.enhance_summary(optimized.summary, jd_analysis)

        logger.info("Applied %d/%d rewrites, added %d skills", applied, len(rewrites), added)
        return optimized

    def enhance_skills(self, resume: ResumeDocument, jd_analysis: JDAnalysis) -> int:
        """Add missing JD skills in place. Returns how many were added."""
        # Both lists are computed before either category grows
        hard = missing_skills(jd_analysis.hard_skills, resume)[:settings.max_added_hard_skills]
        soft = missing_skills(jd_analysis.soft_skills, resume)[:settings.max_added_soft_skills]

        if hard:
            cat = _find_category(resume.skills, TECHNICAL_MARKERS)
            if cat is None:
                cat = SkillCategory(category=TECHNICAL_CATEGORY)
                resume.skills.append(cat)
            cat.items.extend(display_form(s) for s in hard)
        if soft:
            cat = _find_category(resume.skills, SOFT_MARKERS)
            if cat is None:
                cat = SkillCategory(category=SOFT_CATEGORY)
                resume.skills.append(cat)
            cat.items.extend(s.title() for s in soft)
        return len(hard) + len(soft)

    def enhance_summary(self, summary: str, jd_analysis: JDAnalysis) -> str:
        emphasis = self._emphasis.get(jd_analysis.role_type.value, [])
        lowered = summary.lower()
        if not emphasis or any(term.lower() in lowered for term in emphasis):
            return summary
        clause = f"Experienced in {' and '.join(emphasis[:2])}."
        summary = summary.rstrip()
        if not summary.endswith("."):
            summary += "."
        return f"{summary} {clause}"


def build_warning_report(resume: ResumeDocument, jd_analysis: JDAnalysis) -> WarningReport:
    """Gaps against the JD that rewriting cannot close."""
    report = WarningReport()

    if not resume.education:
        report.missing_sections.append("Education")
        if jd_analysis.education_requirements:
            report.required_additions.append(f"JD requires: {jd_analysis.education_requirements[0]}")
    if not resume.skills:
        report.missing_sections.append("Skills")
    if not resume.work_experience:
        report.missing_sections.append("Work Experience")

    if jd_analysis.certifications and not resume.certifications:
        report.required_additions.append(
            f"JD requires certifications: {', '.join(jd_analysis.certifications)}"
        )

    soft = missing_skills(jd_analysis.soft_skills, resume)
    if soft:
        report.suggested_improvements.append(f"Add soft skills: {', '.join(soft)}")

    if jd_analysis.project_types:
        project_texts = [f"{p.title} {' '.join(p.bullets)}".lower() for p in resume.projects]
        covered = any(t in text for text in project_texts for t in jd_analysis.project_types)
        if not covered:
            project_type = jd_analysis.project_types[0]
            stack = [display_form(s) for s in jd_analysis.hard_skills[:MAX_SUGGESTED_STACK]]
            description = f"Developed {project_type} solution"
            if stack:
                description += f" using {', '.join(stack)}"
            report.synthesized_projects.append(SynthesizedProject(
                title=f"{project_type[:1].upper()}{project_type[1:]} Application",
                description=description,
                technologies=stack,
            ))
            report.suggested_improvements.append(
                f"Consider adding a {project_type} project to match JD requirements"
            )

    return report
