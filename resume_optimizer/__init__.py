"""JD-based resume optimization and validation engine."""

from resume_optimizer.models.responses import OptimizationResult
from resume_optimizer.services.pipeline.orchestrator import optimize
from resume_optimizer.services.result_cache import ResultCache

__all__ = ["optimize", "OptimizationResult", "ResultCache"]
