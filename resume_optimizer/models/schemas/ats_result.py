"""ATS Simulator output."""

from pydantic import BaseModel


class ExtractedFields(BaseModel):
    name: bool = False
    email: bool = False
    phone: bool = False
    sections: list[str] = []
    dates: list[str] = []
    skills: list[str] = []


class ATSSimulationResult(BaseModel):
    parsed_successfully: bool = False
    score: int = 0  # 0-100, passed checks / 6
    extracted_fields: ExtractedFields = ExtractedFields()
    failures: list[str] = []
    recommendations: list[str] = []
