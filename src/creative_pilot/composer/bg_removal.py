from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, Optional

from creative_pilot.app.errors import RemoteServiceError
from creative_pilot.composer.layer_schema import ImageSource
from creative_pilot.composer.layer_store import LayerStore
from creative_pilot.core.ids import new_job_id
from creative_pilot.tools.image_ops.remove_bg import BackgroundRemover

logger = logging.getLogger(__name__)

FAILURE_NOTICE = "Remove BG failed!"

Notifier = Callable[[str], None]


class RemovalState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    APPLIED = "applied"
    FAILED = "failed"
    # result arrived after the target layer was deleted (or replaced by a non-image)
    DISCARDED = "discarded"
    # target absent or not an image at submit time; nothing was sent
    SKIPPED = "skipped"


TERMINAL_STATES = {
    RemovalState.APPLIED,
    RemovalState.FAILED,
    RemovalState.DISCARDED,
    RemovalState.SKIPPED,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RemovalJob:
    """One submit() invocation. Terminal once state is in TERMINAL_STATES."""
    layer_id: str
    job_id: str = field(default_factory=new_job_id)
    state: RemovalState = RemovalState.IDLE
    error: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def done(self) -> bool:
        return self.state in TERMINAL_STATES

    def log_context(self) -> Dict[str, str]:
        return {"layer_id": self.layer_id, "job_id": self.job_id}

    def finish(self, state: RemovalState, error: Optional[str] = None) -> "RemovalJob":
        self.state = state
        self.error = error
        self.finished_at = _utcnow()
        return self


def _log_notice(message: str) -> None:
    logger.warning("user notice: %s", message)


class BackgroundRemovalOrchestrator:
    """
    Sends an image layer's payload to the remote remover and swaps the
    result into the same layer. Id, position, scale and rotation survive;
    only the image source changes.

    Repeated submissions for the same layer are neither queued nor merged.
    """

    def __init__(
        self,
        store: LayerStore,
        remover: BackgroundRemover,
        *,
        notify: Optional[Notifier] = None,
        timeout_s: Optional[float] = None,
    ):
        self.store = store
        self.remover = remover
        self.notify = notify or _log_notice
        self.timeout_s = timeout_s

    async def submit(self, layer_id: str) -> RemovalJob:
        job = RemovalJob(layer_id=layer_id)
        layer = self.store.get(layer_id)
        if layer is None or layer.type != "image":
            logger.debug("remove-bg skipped, %s is not a live image layer", layer_id)
            return job.finish(RemovalState.SKIPPED)

        source = layer.data.source
        job.state = RemovalState.SUBMITTING
        job.started_at = _utcnow()
        logger.info("remove-bg submitting (%s)", source.sha256[:12], extra=job.log_context())

        try:
            result = await asyncio.wait_for(
                self.remover.remove_background(source.payload, filename=source.filename),
                timeout=self.timeout_s,
            )
        except asyncio.TimeoutError:
            return self._fail(job, f"timed out after {self.timeout_s}s")
        except RemoteServiceError as e:
            return self._fail(job, str(e), status_code=e.status_code)
        except Exception as e:
            # CancelledError is a BaseException and still propagates
            logger.warning("remove-bg remover raised", exc_info=True, extra=job.log_context())
            return self._fail(job, f"{type(e).__name__}: {e}")

        if not result:
            return self._fail(job, "empty payload")

        return self._apply(job, result)

    def _apply(self, job: RemovalJob, result: bytes) -> RemovalJob:
        # the layer may have been deleted while the request was in flight
        current = self.store.get(job.layer_id)
        if current is None or current.type != "image":
            logger.info("remove-bg result discarded, layer is gone", extra=job.log_context())
            return job.finish(RemovalState.DISCARDED)

        new_source = ImageSource.from_bytes(result, filename="removed.png", mime="image/png")
        self.store.update(job.layer_id, current.data.model_copy(update={"source": new_source}))
        logger.info("remove-bg applied (%s)", new_source.sha256[:12], extra=job.log_context())
        return job.finish(RemovalState.APPLIED)

    def _fail(self, job: RemovalJob, error: str, *, status_code: Optional[int] = None) -> RemovalJob:
        logger.warning("remove-bg failed: %s", error, extra={**job.log_context(), "status_code": status_code})
        self.notify(FAILURE_NOTICE)
        return job.finish(RemovalState.FAILED, error)
