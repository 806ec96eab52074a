"""Worker that decodes and bounds an uploaded image off the GUI thread."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QRunnable, Signal

from ....config import INGEST_JPEG_QUALITY, MAX_DIMENSION
from ....core.ingest import IngestResult, ingest_bytes

_LOGGER = logging.getLogger(__name__)


class IngestSignals(QObject):
    """Signals emitted by :class:`IngestWorker`."""

    finished = Signal(object, int)
    """Emitted with the :class:`IngestResult` and the request identifier."""

    error = Signal(str, int)
    """Emitted if an unexpected exception aborts the worker."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)


class IngestWorker(QRunnable):
    """Run :func:`ingest_bytes` for one upload."""

    def __init__(
        self,
        data: bytes,
        request_id: int,
        *,
        max_dimension: int = MAX_DIMENSION,
        quality: int = INGEST_JPEG_QUALITY,
    ) -> None:
        super().__init__()
        self._data = bytes(data)
        self._request_id = int(request_id)
        self._max_dimension = int(max_dimension)
        self._quality = int(quality)
        self.signals = IngestSignals()

    @property
    def request_id(self) -> int:
        return self._request_id

    def run(self) -> None:  # type: ignore[override]
        """Ingest the bytes and notify listeners when done."""

        try:
            result: IngestResult = ingest_bytes(
                self._data,
                max_dimension=self._max_dimension,
                quality=self._quality,
            )
        except Exception as exc:  # pragma: no cover - safety net for unexpected decoder failures
            _LOGGER.exception("Ingestion %d failed", self._request_id)
            self.signals.error.emit(str(exc), self._request_id)
            return
        self.signals.finished.emit(result, self._request_id)
