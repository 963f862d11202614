"""JD Analyzer: turns raw job-description text into a JDAnalysis.

Role and seniority come from ordered regex priority lists (first match
wins, not a scored ensemble). Requirements are sentence-level with a
category and a priority. Keyword, skill, certification, education and
project-type inventories are all driven by the bundled lookup tables.

Pure function of the text; sparse or empty input yields empty lists.
"""

import logging
import re
from collections import Counter
from typing import Any

from resume_optimizer.models.schemas.jd_analysis import (
    JDAnalysis,
    KeywordContext,
    Requirement,
    RequirementCategory,
    RequirementPriority,
    RoleType,
    SeniorityLevel,
)
from resume_optimizer.services import lexicon
from resume_optimizer.services.keyword_extractor import (
    categorize_keyword,
    contains_term,
    extract_hard_skills,
    extract_tech_keywords,
    find_tech_keywords,
)
from resume_optimizer.services.pipeline.base import BaseStage

logger = logging.getLogger(__name__)

MIN_SENTENCE_LENGTH = 10
MAX_KEYWORD_CONTEXTS = 5

# A period only ends a sentence when followed by whitespace or the end of
# text, so "node.js" and ".net" stay intact.
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+(?=\s|$)|\n+")

# "5+ years of experience" is preferred; bare "5+ years" is the fallback.
_EXP_YEARS_RE = re.compile(
    r"(\d+)\s*\+?\s*(?:years?|yrs?)\s*(?:of\s+)?(?:experience|exp\b)",
    re.IGNORECASE,
)
_BARE_YEARS_RE = re.compile(r"(\d+)\s*\+?\s*(?:years?|yrs?)\b", re.IGNORECASE)


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_SPLIT_RE.split(text) if s and s.strip()]


def parse_required_years(text: str) -> int | None:
    m = _EXP_YEARS_RE.search(text) or _BARE_YEARS_RE.search(text)
    return int(m.group(1)) if m else None


class JDAnalyzerService(BaseStage[JDAnalysis]):
    stage_name = "jd_analyzer"
    lookup_tables = ("jd_patterns", "vocabulary")

    def __init__(self) -> None:
        self._role_patterns: list[tuple[RoleType, re.Pattern]] = []
        self._seniority_patterns: list[tuple[SeniorityLevel, re.Pattern]] = []
        self._seniority_years: list[tuple[int, SeniorityLevel]] = []
        self._category_patterns: list[tuple[RequirementCategory, re.Pattern]] = []
        self._priority_patterns: list[tuple[RequirementPriority, re.Pattern]] = []
        self._soft_skills: list[str] = []
        self._cert_patterns: list[re.Pattern] = []
        self._education_patterns: list[re.Pattern] = []
        self._project_patterns: list[re.Pattern] = []

    def load(self) -> None:
        rules = lexicon.jd_patterns()

        def compile_all(entries: list[Any], key: str, enum_cls: Any) -> list[tuple[Any, re.Pattern]]:
            return [(enum_cls(e[key]), re.compile(e["pattern"], re.IGNORECASE)) for e in entries]

        self._role_patterns = compile_all(rules["role_patterns"], "role", RoleType)
        self._seniority_patterns = compile_all(rules["seniority_keywords"], "level", SeniorityLevel)
        self._seniority_years = [
            (int(e["min_years"]), SeniorityLevel(e["level"])) for e in rules["seniority_years"]
        ]
        self._category_patterns = compile_all(
            rules["requirement_categories"], "category", RequirementCategory,
        )
        self._priority_patterns = compile_all(
            rules["requirement_priorities"], "priority", RequirementPriority,
        )
        self._soft_skills = list(rules["soft_skills"])
        self._cert_patterns = [re.compile(p, re.IGNORECASE) for p in rules["certification_patterns"]]
        self._education_patterns = [re.compile(p, re.IGNORECASE) for p in rules["education_patterns"]]
        self._project_patterns = [re.compile(p, re.IGNORECASE) for p in rules["project_types"]]
        logger.info(
            "JD analyzer loaded %d role patterns, %d soft skills",
            len(self._role_patterns), len(self._soft_skills),
        )

    def _run(self, **inputs: Any) -> JDAnalysis:
        jd_text: str = inputs.get("jd_text") or ""
        return self.analyze(jd_text)

    def analyze(self, jd_text: str) -> JDAnalysis:
        analysis = JDAnalysis(
            requirements=self.extract_requirements(jd_text),
            keywords=self.extract_keyword_contexts(jd_text),
            role_type=self.classify_role(jd_text),
            seniority_level=self.classify_seniority(jd_text),
            hard_skills=extract_hard_skills(jd_text),
            soft_skills=self.extract_soft_skills(jd_text),
            certifications=self.extract_certifications(jd_text),
            education_requirements=self.extract_education_requirements(jd_text),
            project_types=self.extract_project_types(jd_text),
        )
        logger.info(
            "JD analysis: role=%s seniority=%s requirements=%d hard_skills=%d",
            analysis.role_type.value,
            analysis.seniority_level.value,
            len(analysis.requirements),
            len(analysis.hard_skills),
        )
        return analysis

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify_role(self, jd_text: str) -> RoleType:
        for role, pattern in self._role_patterns:
            if pattern.search(jd_text):
                return role
        return RoleType.GENERAL

    def classify_seniority(self, jd_text: str) -> SeniorityLevel:
        for level, pattern in self._seniority_patterns:
            if pattern.search(jd_text):
                return level

        years = parse_required_years(jd_text)
        if years is None:
            return SeniorityLevel.MID
        for min_years, level in self._seniority_years:
            if years >= min_years:
                return level
        return SeniorityLevel.JUNIOR

    # ------------------------------------------------------------------
    # Requirements
    # ------------------------------------------------------------------

    def _categorize(self, sentence: str) -> RequirementCategory:
        for category, pattern in self._category_patterns:
            if pattern.search(sentence):
                return category
        return RequirementCategory.SKILL

    def _prioritize(self, sentence: str) -> RequirementPriority:
        for priority, pattern in self._priority_patterns:
            if pattern.search(sentence):
                return priority
        return RequirementPriority.IMPORTANT

    def extract_requirements(self, jd_text: str) -> list[Requirement]:
        requirements = []
        for sentence in split_sentences(jd_text):
            if len(sentence) < MIN_SENTENCE_LENGTH:
                continue
            keywords = extract_tech_keywords(sentence)
            if not keywords:
                continue
            requirements.append(Requirement(
                text=sentence,
                category=self._categorize(sentence),
                priority=self._prioritize(sentence),
                keywords=keywords,
            ))
        return requirements

    # ------------------------------------------------------------------
    # Inventories
    # ------------------------------------------------------------------

    def extract_keyword_contexts(self, jd_text: str) -> list[KeywordContext]:
        frequency: Counter = Counter()
        contexts: dict[str, list[str]] = {}
        for sentence in split_sentences(jd_text):
            for term in find_tech_keywords(sentence):
                frequency[term] += 1
                bucket = contexts.setdefault(term, [])
                if sentence not in bucket and len(bucket) < MAX_KEYWORD_CONTEXTS:
                    bucket.append(sentence)
        # Counter preserves first-seen order, sorted() is stable
        ranked = sorted(frequency.items(), key=lambda kv: kv[1], reverse=True)
        return [
            KeywordContext(
                keyword=term,
                category=categorize_keyword(term),
                frequency=count,
                contexts=contexts[term],
            )
            for term, count in ranked
        ]

    def extract_soft_skills(self, jd_text: str) -> list[str]:
        return [s for s in self._soft_skills if contains_term(jd_text, s)]

    @staticmethod
    def _collect(patterns: list[re.Pattern], text: str) -> list[str]:
        found: list[str] = []
        for pattern in patterns:
            for m in pattern.finditer(text):
                value = m.group(0).strip().lower()
                if value and value not in found:
                    found.append(value)
        return found

    def extract_certifications(self, jd_text: str) -> list[str]:
        return self._collect(self._cert_patterns, jd_text)

    def extract_education_requirements(self, jd_text: str) -> list[str]:
        return self._collect(self._education_patterns, jd_text)

    def extract_project_types(self, jd_text: str) -> list[str]:
        types: list[str] = []
        for pattern in self._project_patterns:
            m = pattern.search(jd_text)
            if m and m.group(0).lower() not in types:
                types.append(m.group(0).lower())
        return types
