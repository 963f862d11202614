"""Structured resume supplied by the caller and returned optimized."""

from collections.abc import Iterator

from pydantic import BaseModel


class WorkExperience(BaseModel):
    role: str = ""
    company: str = ""
    period: str = ""  # free-form, e.g. "2019 - 2023"
    location: str = ""
    bullets: list[str] = []


class Project(BaseModel):
    title: str = ""
    tech_stack: list[str] = []
    period: str = ""
    bullets: list[str] = []


class SkillCategory(BaseModel):
    category: str = ""
    items: list[str] = []


class Education(BaseModel):
    degree: str = ""
    school: str = ""
    field: str = ""
    year: str = ""


class Certification(BaseModel):
    title: str = ""
    issuer: str = ""
    year: str = ""


class ResumeDocument(BaseModel):
    """A resume broken into the sections the optimizer understands.

    The engine never mutates an instance it receives; every stage that
    changes content works on ``model_copy(deep=True)``.
    """
    name: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    github: str = ""
    location: str = ""
    summary: str = ""
    work_experience: list[WorkExperience] = []
    projects: list[Project] = []
    skills: list[SkillCategory] = []
    education: list[Education] = []
    certifications: list[Certification] = []

    def iter_bullets(self) -> Iterator[tuple[str, int, int, str]]:
        """Yield (section, entry_index, bullet_index, text), experience first."""
        for i, exp in enumerate(self.work_experience):
            for j, bullet in enumerate(exp.bullets):
                yield "experience", i, j, bullet
        for i, proj in enumerate(self.projects):
            for j, bullet in enumerate(proj.bullets):
                yield "project", i, j, bullet

    def all_bullets(self) -> list[str]:
        return [text for _, _, _, text in self.iter_bullets()]

    def all_skills(self) -> list[str]:
        return [item for cat in self.skills for item in cat.items]

    def section_names(self) -> list[str]:
        sections = []
        if self.work_experience:
            sections.append("experience")
        if self.education:
            sections.append("education")
        if self.skills:
            sections.append("skills")
        if self.projects:
            sections.append("projects")
        if self.certifications:
            sections.append("certifications")
        if self.summary:
            sections.append("summary")
        return sections

    def to_text(self) -> str:
        """Flatten the document into plain text for whole-document audits."""
        parts: list[str] = []
        if self.name:
            parts.append(self.name)
        if self.summary:
            parts.append(self.summary)
        for exp in self.work_experience:
            parts.append(f"{exp.role} at {exp.company}")
            parts.extend(exp.bullets)
        for proj in self.projects:
            parts.append(proj.title)
            parts.extend(proj.bullets)
        for cat in self.skills:
            parts.append(" ".join(cat.items))
        for edu in self.education:
            parts.append(f"{edu.degree} {edu.school}")
        return " ".join(parts)
