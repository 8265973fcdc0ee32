"""
Generation Worker Module for Alchemy Sort

Provides a background QThread worker that generates and validates a level
off the interactive thread. Communicates with the UI via Qt signals for
thread-safe delivery of the result.
"""

import logging
import threading
from typing import Optional

from PyQt5.QtCore import QThread, pyqtSignal

from .generator import GeneratedLevel, LevelGenerator
from .tiers import Difficulty


# Configure module logger
logger = logging.getLogger(__name__)


class GenerationWorker(QThread):
    """
    Background worker thread for level generation.

    Runs LevelGenerator.generate() once and emits the result. The generator
    only hands back a board after its search has finished, so abandoning a
    worker with request_stop() never leaves a half-built level behind.

    Signals:
        status_changed(str): Emitted when worker status changes
        level_ready(object): Emitted with the GeneratedLevel
        error_occurred(str): Emitted when generation raised

    Example:
        worker = GenerationWorker(generator, Difficulty.EASY)
        worker.level_ready.connect(on_level_ready)
        worker.start()
        # ...
        worker.request_stop()
        worker.wait()
    """

    status_changed = pyqtSignal(str)
    level_ready = pyqtSignal(object)
    error_occurred = pyqtSignal(str)

    def __init__(self, generator: LevelGenerator, difficulty: Difficulty):
        """
        Initialize the generation worker.

        Args:
            generator: Generator to run (not shared with other threads)
            difficulty: Tier to generate
        """
        super().__init__()
        self.generator = generator
        self.difficulty = difficulty
        self._cancel_flag = threading.Event()
        self._result: Optional[GeneratedLevel] = None

    @property
    def result(self) -> Optional[GeneratedLevel]:
        """Last generated level, or None if not finished or failed."""
        return self._result

    def run(self):
        """
        Worker body. Called when thread starts.

        Emits level_ready on success, error_occurred if generation raised.
        """
        logger.info(f"Generation worker started ({self.difficulty.value})")
        self.status_changed.emit("Generating")

        try:
            level = self.generator.generate(self.difficulty, cancel_flag=self._cancel_flag)
        except Exception as e:
            logger.exception("Error in generation worker")
            self.status_changed.emit("Failed")
            self.error_occurred.emit(str(e))
            return

        self._result = level
        status = "Ready" if level.validated else "Ready (unvalidated)"
        self.status_changed.emit(status)
        self.level_ready.emit(level)
        logger.info(f"Generation worker finished: {status}")

    def request_stop(self):
        """
        Ask the running generation to stop at its next check.

        Use wait() after calling this to block until stopped.
        """
        logger.info("Stop requested")
        self._cancel_flag.set()

    def is_cancelled(self) -> bool:
        return self._cancel_flag.is_set()
