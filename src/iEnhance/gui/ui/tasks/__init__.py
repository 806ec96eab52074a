"""Background worker helpers for GUI tasks."""

from .ingest_worker import IngestSignals, IngestWorker

__all__ = ["IngestSignals", "IngestWorker"]
