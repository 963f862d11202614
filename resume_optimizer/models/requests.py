from pydantic import BaseModel, Field

from resume_optimizer.models.schemas.resume_document import ResumeDocument


class OptimizeRequest(BaseModel):
    resume: ResumeDocument
    job_description: str = Field("", description="Job description text of any length")
    target_role: str | None = Field(None, description="Reserved; not used by the current pipeline")
