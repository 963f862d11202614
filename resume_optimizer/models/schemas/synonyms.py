"""Synonym expansion contracts."""

from pydantic import BaseModel


class KeywordMetadata(BaseModel):
    canonical: str
    confidence: float = 0.5  # 0.5 for terms outside the dictionary
    category: str = "Technical"
    importance: str = "low"  # high | medium | low
    in_dictionary: bool = False


class KeywordExpansion(BaseModel):
    keyword: str
    synonyms: list[str] = []
    confidence: float = 0.5
    source: str = "generated"  # dictionary | generated


class ExpansionMatch(BaseModel):
    keyword: str
    found: bool = False
    matched_as: str = ""  # surface form found in the text


class SemanticCluster(BaseModel):
    canonical: str
    members: list[str] = []
