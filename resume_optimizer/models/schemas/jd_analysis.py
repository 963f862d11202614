"""JD Analyzer output: requirements, role/seniority and skill inventories."""

from enum import Enum

from pydantic import BaseModel


class RoleType(str, Enum):
    BACKEND = "Backend"
    FRONTEND = "Frontend"
    FULL_STACK = "Full Stack"
    DEVOPS = "DevOps"
    ML_AI = "ML/AI"
    DATA_ENGINEER = "Data Engineer"
    MOBILE = "Mobile"
    GENERAL = "General"


class SeniorityLevel(str, Enum):
    JUNIOR = "Junior"
    MID = "Mid"
    SENIOR = "Senior"
    LEAD = "Lead"
    PRINCIPAL = "Principal"


class RequirementCategory(str, Enum):
    SKILL = "skill"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    CERTIFICATION = "certification"
    SOFT_SKILL = "soft_skill"


class RequirementPriority(str, Enum):
    CRITICAL = "critical"
    IMPORTANT = "important"
    NICE_TO_HAVE = "nice_to_have"


class KeywordContext(BaseModel):
    """A technical keyword with every JD sentence it appeared in."""
    keyword: str
    category: str = "Technical"
    frequency: int = 0
    contexts: list[str] = []

    model_config = {"frozen": True}


class Requirement(BaseModel):
    text: str  # source sentence
    category: RequirementCategory = RequirementCategory.SKILL
    priority: RequirementPriority = RequirementPriority.IMPORTANT
    keywords: list[str] = []

    model_config = {"frozen": True}


class JDAnalysis(BaseModel):
    """Structured view of a job description, derived once per optimize() call."""
    requirements: list[Requirement] = []
    keywords: list[KeywordContext] = []  # sorted by frequency, most frequent first
    role_type: RoleType = RoleType.GENERAL
    seniority_level: SeniorityLevel = SeniorityLevel.MID
    hard_skills: list[str] = []
    soft_skills: list[str] = []
    certifications: list[str] = []
    education_requirements: list[str] = []
    project_types: list[str] = []

    model_config = {"frozen": True}

    @property
    def keyword_terms(self) -> list[str]:
        return [k.keyword for k in self.keywords]
