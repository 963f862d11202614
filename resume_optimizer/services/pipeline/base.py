"""Abstract base class for all optimization pipeline stages."""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar
import logging
import time

from resume_optimizer.services import lexicon

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT")


class BaseStage(ABC, Generic[OutputT]):
    """Base class for pipeline stage services.

    Subclasses declare:
        - stage_name: identifier used in stage_registry
        - lookup_tables: ``data/*.yaml`` tables read before load()
        - required_inputs: keyword arguments run() cannot start without
    and implement _run(**inputs), which returns the stage's schema.
    Override load() to build anything derived from the lookup tables.

    run() validates inputs and loads the stage, so a stage can be driven
    directly or through stage_registry.get_stage().
    """

    stage_name: str = ""
    lookup_tables: tuple[str, ...] = ()
    required_inputs: tuple[str, ...] = ()
    _loaded: bool = False

    def load(self) -> None:
        """Derive stage data from the lookup tables. Called once."""

    @abstractmethod
    def _run(self, **inputs: Any) -> OutputT:
        """Execute the stage on validated inputs."""

    def run(self, **inputs: Any) -> OutputT:
        missing = [name for name in self.required_inputs if inputs.get(name) is None]
        if missing:
            raise TypeError(f"Stage {self.stage_name} missing required input(s): {', '.join(missing)}")
        self.ensure_loaded()
        start = time.perf_counter()
        output = self._run(**inputs)
        logger.debug("Stage %s ran in %.1f ms", self.stage_name, (time.perf_counter() - start) * 1000)
        return output

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def ensure_loaded(self) -> None:
        """Resolve lookup tables and load stage data if not already loaded.

        A missing or malformed table raises here, on first use, instead of
        midway through a run.
        """
        if not self._loaded:
            logger.info("Loading stage: %s", self.stage_name)
            for table in self.lookup_tables:
                lexicon.load_table(table)
            self.load()
            self._loaded = True
            logger.info("Stage loaded: %s (tables: %s)", self.stage_name, ", ".join(self.lookup_tables) or "none")
