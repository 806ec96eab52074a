"""Controller that keeps the rendered frame in sync with the adjustments."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from PySide6.QtCore import QObject, QThreadPool, QTimer, Signal

from ....config import INGEST_JPEG_QUALITY, MAX_DIMENSION, RENDER_DEBOUNCE_MS
from ....core.adjustments import AdjustmentState, canonical_key
from ....core.export import export_frame
from ....core.ingest import IngestResult
from ....core.pipeline import render
from ....core.presets import FilterPreset, apply_preset
from ....core.raster import RasterStore, RenderedFrame
from ....errors import ExportError, IngestInProgressError
from ..tasks.ingest_worker import IngestWorker

_LOGGER = logging.getLogger(__name__)


class EditController(QObject):
    """Own the source, the adjustment state and the latest rendered frame.

    Every accepted edit produces a fresh :class:`AdjustmentState` and schedules
    a full re-render from the untouched source.  With a debounce interval the
    edits are coalesced, but the last applied state always ends in a matching
    frame.
    """

    frameReady = Signal(object)
    """Emitted with the :class:`RenderedFrame` once a render completes."""

    sourceChanged = Signal(int, int)
    sourceCleared = Signal()
    stateChanged = Signal(object)
    ingestStarted = Signal()
    ingestFinished = Signal(bool)
    """Emitted with ``True`` when the ingestion took the degraded path."""

    ingestFailed = Signal(str)

    def __init__(
        self,
        *,
        thread_pool: Optional[QThreadPool] = None,
        debounce_ms: int = RENDER_DEBOUNCE_MS,
        max_dimension: int = MAX_DIMENSION,
        quality: int = INGEST_JPEG_QUALITY,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._store = RasterStore()
        self._state = AdjustmentState()
        self._thread_pool = thread_pool
        self._max_dimension = int(max_dimension)
        self._quality = int(quality)
        self._request_counter = 0
        self._pending_request: Optional[int] = None
        self._active_worker: Optional[IngestWorker] = None
        self._last_ingest: Optional[IngestResult] = None

        self._debounce_ms = max(0, int(debounce_ms))
        self._render_timer = QTimer(self)
        self._render_timer.setSingleShot(True)
        self._render_timer.setInterval(self._debounce_ms)
        self._render_timer.timeout.connect(self.render_now)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def state(self) -> AdjustmentState:
        return self._state

    @property
    def store(self) -> RasterStore:
        return self._store

    @property
    def last_ingest(self) -> Optional[IngestResult]:
        return self._last_ingest

    def has_image(self) -> bool:
        return self._store.has_source

    def is_ingesting(self) -> bool:
        return self._pending_request is not None

    def current_frame(self) -> Optional[RenderedFrame]:
        return self._store.frame

    def can_edit(self) -> bool:
        """Edits are only accepted for a loaded image with no upload in flight."""

        return self._store.has_source and not self.is_ingesting()

    # ------------------------------------------------------------------
    # Adjustments
    # ------------------------------------------------------------------
    def set_adjustment(self, key: str, value: Any) -> bool:
        """Set one adjustment; returns ``False`` if the edit was ignored."""

        return self.set_adjustments({key: value})

    def set_adjustments(self, changes: Mapping[str, Any]) -> bool:
        # Validate the keys even when the edit is going to be ignored.
        normalised = {canonical_key(key): value for key, value in changes.items()}
        if not self.can_edit():
            _LOGGER.debug("Ignoring edit of %s: no editable image", sorted(normalised))
            return False
        self._update_state(self._state.with_changes(**normalised))
        return True

    def apply_preset(self, preset: Union[FilterPreset, str]) -> bool:
        """Apply *preset* (or the preset with that name) to the current state."""

        updated = apply_preset(self._state, preset)
        if not self.can_edit():
            return False
        self._update_state(updated)
        return True

    def reset(self) -> None:
        """Restore the default adjustments."""

        self._update_state(AdjustmentState())

    def _update_state(self, state: AdjustmentState) -> None:
        if state == self._state:
            return
        self._state = state
        self.stateChanged.emit(state)
        self.schedule_render()

    # ------------------------------------------------------------------
    # Source lifecycle
    # ------------------------------------------------------------------
    def _next_request(self) -> int:
        if self._pending_request is not None:
            raise IngestInProgressError("An image is already being loaded")
        self._request_counter += 1
        self._pending_request = self._request_counter
        self.ingestStarted.emit()
        return self._request_counter

    def _make_worker(self, data: bytes, request_id: int) -> IngestWorker:
        worker = IngestWorker(
            data,
            request_id,
            max_dimension=self._max_dimension,
            quality=self._quality,
        )
        worker.signals.finished.connect(self._handle_ingest_finished)
        worker.signals.error.connect(self._handle_ingest_error)
        return worker

    def load_bytes(self, data: bytes) -> int:
        """Start ingesting *data* on the thread pool and return the request id.

        Only one ingestion may be outstanding; a second request raises
        :class:`IngestInProgressError`.
        """

        request_id = self._next_request()
        worker = self._make_worker(data, request_id)
        # Keep the worker alive until its signals have been delivered.
        self._active_worker = worker
        pool = self._thread_pool or QThreadPool.globalInstance()
        pool.start(worker)
        return request_id

    def load_bytes_sync(self, data: bytes) -> int:
        """Ingest *data* on the calling thread; signals fire before this returns."""

        request_id = self._next_request()
        worker = self._make_worker(data, request_id)
        self._active_worker = worker
        worker.run()
        return request_id

    def load_path(self, path: Path | str, *, synchronous: bool = False) -> int:
        data = Path(path).read_bytes()
        if synchronous:
            return self.load_bytes_sync(data)
        return self.load_bytes(data)

    def remove_image(self) -> None:
        """Tear down the source; rendering stays suppressed until a new image is ingested."""

        self._render_timer.stop()
        self._pending_request = None
        self._active_worker = None
        self._last_ingest = None
        self._store.clear()
        self.sourceCleared.emit()

    def _handle_ingest_finished(self, result: IngestResult, request_id: int) -> None:
        if request_id != self._pending_request:
            _LOGGER.debug("Dropping superseded ingestion result %d", request_id)
            return
        self._pending_request = None
        self._active_worker = None

        if result.source is None:
            _LOGGER.warning("Uploaded image could not be decoded")
            self._fail_ingest("Image data could not be decoded")
            return

        self._last_ingest = result
        self._store.publish_source(result.source)
        self._state = AdjustmentState()
        self.sourceChanged.emit(result.width, result.height)
        self.stateChanged.emit(self._state)
        self.ingestFinished.emit(result.degraded)
        self.schedule_render()

    def _handle_ingest_error(self, message: str, request_id: int) -> None:
        if request_id != self._pending_request:
            return
        self._pending_request = None
        self._active_worker = None
        self._fail_ingest(message)

    def _fail_ingest(self, message: str) -> None:
        # A failed upload replaces the previous image with the no-source state.
        had_source = self._store.has_source
        self._render_timer.stop()
        self._last_ingest = None
        self._store.clear()
        self._state = AdjustmentState()
        if had_source:
            self.sourceCleared.emit()
            self.stateChanged.emit(self._state)
        self.ingestFailed.emit(message)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def schedule_render(self) -> None:
        """Render now, or restart the debounce timer when coalescing is enabled."""

        if not self._store.has_source:
            return
        if self._debounce_ms <= 0:
            self.render_now()
        else:
            self._render_timer.start()

    def render_now(self) -> Optional[RenderedFrame]:
        """Render the current state synchronously and publish the frame."""

        source = self._store.source
        if source is None:
            return None
        generation = self._store.generation
        frame = render(source, self._state, generation=generation)
        if frame is None or not self._store.publish_frame(frame):
            return None
        self.frameReady.emit(frame)
        return frame

    def flush(self) -> Optional[RenderedFrame]:
        """Run a pending debounced render immediately."""

        if self._render_timer.isActive():
            self._render_timer.stop()
            return self.render_now()
        return self._store.frame

    def export_png(self, target: Path | str | None = None) -> Path:
        """Write the latest frame as PNG; see :func:`export_frame`."""

        frame = self.flush()
        if frame is None:
            raise ExportError("There is no rendered image to export")
        return export_frame(frame, target)


__all__ = ["EditController"]
