from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from creative_pilot.composer import transforms
from creative_pilot.composer.bg_removal import BackgroundRemovalOrchestrator, RemovalJob
from creative_pilot.composer.layer_store import LayerStore

logger = logging.getLogger(__name__)


class GlobalAction(str, Enum):
    """Toolbar actions issued without an explicit target layer."""
    ZOOM_IN = "zoom-in"
    ZOOM_OUT = "zoom-out"
    ROTATE_LEFT = "rotate-left"
    ROTATE_RIGHT = "rotate-right"
    REMOVE_BACKGROUND = "remove-background"

# -----------------------------
# Pending slot: NoPending | PendingAction
# -----------------------------

@dataclass(frozen=True)
class NoPending:
    pass


@dataclass(frozen=True)
class PendingAction:
    action: GlobalAction
    candidates: Tuple[str, ...]


Pending = Union[NoPending, PendingAction]

NO_PENDING = NoPending()

# -----------------------------
# Outcomes
# -----------------------------

class Resolution(str, Enum):
    NOOP = "noop"
    APPLIED = "applied"
    PENDING = "pending"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ActionOutcome:
    resolution: Resolution
    action: Optional[GlobalAction] = None
    target_id: Optional[str] = None
    candidates: Tuple[str, ...] = ()
    removal: Optional[RemovalJob] = None


class ActionRouter:
    """
    Resolves a global action to one image layer:
      0 image layers  -> no-op
      1 image layer   -> applied directly
      2+ image layers -> parked until choose() or cancel()

    Only one action can be parked; a newer one replaces it.
    """

    def __init__(self, store: LayerStore, orchestrator: BackgroundRemovalOrchestrator):
        self.store = store
        self.orchestrator = orchestrator
        self._pending: Pending = NO_PENDING

    @property
    def pending(self) -> Pending:
        return self._pending

    async def issue(self, action: GlobalAction) -> ActionOutcome:
        action = GlobalAction(action)
        image_ids = tuple(l.id for l in self.store.image_layers())

        if not image_ids:
            self._pending = NO_PENDING
            return ActionOutcome(Resolution.NOOP, action=action)

        if len(image_ids) == 1:
            self._pending = NO_PENDING
            return await self._apply(action, image_ids[0])

        if isinstance(self._pending, PendingAction):
            logger.debug("pending %s replaced by %s", self._pending.action.value, action.value)
        self._pending = PendingAction(action=action, candidates=image_ids)
        return ActionOutcome(Resolution.PENDING, action=action, candidates=image_ids)

    async def choose(self, layer_id: str) -> ActionOutcome:
        pending = self._pending
        if not isinstance(pending, PendingAction):
            return ActionOutcome(Resolution.NOOP)

        self._pending = NO_PENDING
        layer = self.store.get(layer_id)
        if layer is None or layer.type != "image":
            logger.debug("choice %s is not a live image layer; %s dropped", layer_id, pending.action.value)
            return ActionOutcome(Resolution.NOOP, action=pending.action)
        return await self._apply(pending.action, layer_id)

    def cancel(self) -> ActionOutcome:
        pending = self._pending
        self._pending = NO_PENDING
        if not isinstance(pending, PendingAction):
            return ActionOutcome(Resolution.NOOP)
        return ActionOutcome(Resolution.CANCELLED, action=pending.action)

    async def _apply(self, action: GlobalAction, layer_id: str) -> ActionOutcome:
        removal: Optional[RemovalJob] = None
        if action is GlobalAction.ZOOM_IN:
            transforms.scale_by(self.store, layer_id, transforms.ZOOM_STEP)
        elif action is GlobalAction.ZOOM_OUT:
            transforms.scale_by(self.store, layer_id, -transforms.ZOOM_STEP)
        elif action is GlobalAction.ROTATE_LEFT:
            transforms.rotate_by(self.store, layer_id, -transforms.ROTATE_STEP)
        elif action is GlobalAction.ROTATE_RIGHT:
            transforms.rotate_by(self.store, layer_id, transforms.ROTATE_STEP)
        elif action is GlobalAction.REMOVE_BACKGROUND:
            removal = await self.orchestrator.submit(layer_id)
        return ActionOutcome(Resolution.APPLIED, action=action, target_id=layer_id, removal=removal)
