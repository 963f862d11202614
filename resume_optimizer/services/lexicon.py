"""Versioned lookup tables bundled under ``resume_optimizer/data``.

Verb matrices, vocabularies, synonym clusters and JD patterns live in YAML
so they can be tuned without touching control flow. Tables are read once
and cached for the life of the process.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"

_tables: dict[str, dict[str, Any]] = {}


def load_table(name: str) -> dict[str, Any]:
    """Return the parsed ``data/<name>.yaml`` table, loading it on first use."""
    if name not in _tables:
        path = DATA_DIR / f"{name}.yaml"
        with open(path, encoding="utf-8") as f:
            table = yaml.safe_load(f)
        if not isinstance(table, dict):
            raise ValueError(f"Lookup table {path} is empty or malformed")
        _tables[name] = table
        logger.info("Loaded lookup table %s (version %s)", name, table.get("version"))
    return _tables[name]


def vocabulary() -> dict[str, dict[str, Any]]:
    return load_table("vocabulary")["terms"]


def verb_matrix() -> dict[str, dict[str, list[str]]]:
    return load_table("action_verbs")["verb_matrix"]


def role_emphasis() -> dict[str, list[str]]:
    return load_table("action_verbs")["role_emphasis"]


def jd_patterns() -> dict[str, Any]:
    return load_table("jd_patterns")


def synonym_clusters() -> list[dict[str, Any]]:
    return load_table("synonyms")["clusters"]


def authenticity_rules() -> dict[str, Any]:
    return load_table("authenticity")


def clear() -> None:
    """Drop cached tables. Useful for testing."""
    _tables.clear()
