"""Lazy-loading registry for the optimization pipeline stages.

Global singletons, loaded on first use. Stages hold only read-only lookup
data, so one instance per process is shared by every optimize() call.
"""

import importlib
import logging

from resume_optimizer.services.pipeline.base import BaseStage

logger = logging.getLogger(__name__)

# Pipeline order: name -> (module under services.pipeline, class)
STAGES: dict[str, tuple[str, str]] = {
    "jd_analyzer": ("jd_analyzer", "JDAnalyzerService"),
    "matcher": ("matcher", "MatcherService"),
    "bullet_rewriter": ("bullet_rewriter", "BulletRewriterService"),
    "resume_applier": ("resume_applier", "ResumeApplierService"),
    "ats_simulator": ("ats_simulator", "ATSSimulatorService"),
    "authenticity_validator": ("authenticity_validator", "AuthenticityValidatorService"),
    "scoring": ("scoring", "ScoringService"),
}

_registry: dict[str, BaseStage] = {}


def _create_stage(name: str) -> BaseStage:
    """Import the stage module on demand and instantiate its service."""
    if name not in STAGES:
        raise ValueError(f"Unknown stage: {name}")
    module_name, class_name = STAGES[name]
    module = importlib.import_module(f"resume_optimizer.services.pipeline.{module_name}")
    stage = getattr(module, class_name)()
    if stage.stage_name != name:
        raise ValueError(f"{class_name} registers as {stage.stage_name!r}, expected {name!r}")
    return stage


def get_stage(name: str) -> BaseStage:
    """Get a stage service by name, creating and loading it on first access."""
    if name not in _registry:
        _registry[name] = _create_stage(name)
    svc = _registry[name]
    svc.ensure_loaded()
    return svc


def preload(*names: str) -> None:
    """Pre-load the named stages, or every stage when none are named."""
    for name in names or tuple(STAGES):
        get_stage(name)
    logger.info("Preloaded %d pipeline stages", len(names or STAGES))


def clear() -> None:
    """Drop all stage instances. Useful for testing."""
    _registry.clear()
