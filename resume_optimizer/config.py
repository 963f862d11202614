from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    debug: bool = False

    # Matching thresholds (tuned to the lexical similarity engine)
    relevant_threshold: float = 0.70
    partial_threshold: float = 0.50
    apply_similarity_floor: float = 0.50  # best-effort rewrites below this are never applied

    # Per-bullet validation
    semantic_threshold: float = 0.70
    metric_preservation_threshold: float = 0.90
    max_keyword_density: float = 0.08
    max_term_density: float = 0.03
    min_readability: float = 60.0
    max_attempts: int = 3
    max_bullet_words: int = 25

    # Resume augmentation
    max_added_hard_skills: int = 5
    max_added_soft_skills: int = 3
    augment_summary: bool = True

    # Authenticity audit
    max_content_change: float = 0.40
    warn_content_change: float = 0.30
    max_skill_inflation: float = 1.5
    max_new_skills: int = 10
    warn_new_skills: int = 5
    min_authenticity_score: int = 70
    penalty_per_critical: int = 5
    max_authenticity_penalty: int = 15

    # Result cache
    cache_ttl_seconds: int = 24 * 60 * 60

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "RESUME_OPTIMIZER_",
        "extra": "ignore",
    }


settings = Settings()
