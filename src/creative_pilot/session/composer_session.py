from __future__ import annotations

import logging
from typing import Optional

from creative_pilot.app.settings import Settings
from creative_pilot.composer import transforms
from creative_pilot.composer.actions import ActionOutcome, ActionRouter, GlobalAction
from creative_pilot.composer.bg_removal import BackgroundRemovalOrchestrator, Notifier
from creative_pilot.composer.canvas_schema import (
    BACKGROUND_PRESETS,
    Background,
    BackgroundPreset,
    Canvas,
    CanvasPreset,
    FillBackground,
    ImageBackground,
)
from creative_pilot.composer.layer_schema import (
    ImageLayer,
    ImageLayerData,
    ImageSource,
    TextLayer,
    TextLayerData,
)
from creative_pilot.composer.layer_store import LayerStore
from creative_pilot.tools.exporters.render_plan import RenderInstruction, build_render_plan
from creative_pilot.tools.image_ops.remove_bg import BackgroundRemover, RelayClient

logger = logging.getLogger(__name__)

HEADLINE_ID = "text-headline"
CTA_ID = "text-cta"

# A+/A- step per control; other text layers use the headline step
_FONT_STEPS = {
    HEADLINE_ID: 4.0,
    CTA_ID: 2.0,
}


class ComposerSession:
    """
    One open composition: canvas, background, layers and the toolbar router.
    Every UI event lands on one of these methods.
    """

    def __init__(
        self,
        remover: BackgroundRemover,
        *,
        store: Optional[LayerStore] = None,
        canvas: Optional[Canvas] = None,
        background: Optional[Background] = None,
        notify: Optional[Notifier] = None,
        timeout_s: Optional[float] = None,
    ):
        self.store = store if store is not None else LayerStore()
        self.canvas = canvas or Canvas()
        self.background: Background = background or FillBackground()
        self.orchestrator = BackgroundRemovalOrchestrator(
            self.store, remover, notify=notify, timeout_s=timeout_s,
        )
        self.router = ActionRouter(self.store, self.orchestrator)

    @classmethod
    def from_settings(cls, settings: Settings, *, notify: Optional[Notifier] = None) -> "ComposerSession":
        remover = RelayClient(settings.relay_url, timeout_s=settings.bg_removal_timeout_s)
        return cls(remover, notify=notify, timeout_s=settings.bg_removal_timeout_s)

    # ---------- Layers ----------
    def add_image(self, payload: bytes, *, filename: str = "image.png") -> Optional[str]:
        """Uploaded file → new image layer centred on the canvas, on top."""
        if not payload:
            return None
        cx, cy = self.canvas.center
        layer = ImageLayer(
            data=ImageLayerData(
                source=ImageSource.from_bytes(payload, filename=filename),
                x=cx,
                y=cy,
            ),
        )
        layer_id = self.store.add(layer)
        logger.info("image layer %s added (%d bytes)", layer_id, len(payload))
        return layer_id

    def add_text(
        self,
        text: str = "New Text",
        *,
        x: float = 60.0,
        y: float = 60.0,
        font_size: float = 36.0,
        fill: str = "#ffffff",
        font_style: str = "normal",
    ) -> Optional[str]:
        """New text layer on top; it becomes the selection."""
        layer = TextLayer(
            data=TextLayerData(
                text=text, x=x, y=y, font_size=font_size, fill=fill, font_style=font_style,
            ),
        )
        layer_id = self.store.add(layer)
        self.store.select(layer_id)
        return layer_id

    def delete_layer(self, layer_id: str) -> None:
        self.store.remove(layer_id)

    def move_layer(self, layer_id: str, direction: str) -> None:
        if direction == "up":
            self.store.move_up(layer_id)
        elif direction == "down":
            self.store.move_down(layer_id)

    def clear_all(self) -> None:
        self.store.clear()
        self.router.cancel()

    # ---------- Selection ----------
    def select(self, layer_id: Optional[str]) -> None:
        self.store.select(layer_id)

    def click_empty_canvas(self) -> None:
        self.store.select(None)

    # ---------- Renderer callbacks ----------
    def drag_end(self, layer_id: str, x: float, y: float) -> None:
        transforms.apply_drag_end(self.store, layer_id, x, y)

    def transform_end(self, layer_id: str, event: transforms.TransformEnd) -> None:
        transforms.apply_transform_end(self.store, layer_id, event)

    # ---------- Headline / CTA controls ----------
    def set_text(self, layer_id: str, text: str) -> None:
        transforms.set_text(self.store, layer_id, text)

    def set_fill(self, layer_id: str, color: str) -> None:
        transforms.set_fill(self.store, layer_id, color)

    def bump_font_size(self, layer_id: str, direction: int = 1) -> Optional[float]:
        step = _FONT_STEPS.get(layer_id, 4.0)
        return transforms.adjust_font_size(self.store, layer_id, step if direction >= 0 else -step)

    # ---------- Toolbar ----------
    async def issue(self, action: GlobalAction) -> ActionOutcome:
        return await self.router.issue(action)

    async def choose(self, layer_id: str) -> ActionOutcome:
        return await self.router.choose(layer_id)

    def cancel(self) -> ActionOutcome:
        return self.router.cancel()

    # ---------- Canvas / background ----------
    def set_canvas_preset(self, preset: CanvasPreset) -> None:
        self.canvas = Canvas.from_preset(preset)

    def set_canvas_size(self, width: int, height: int) -> None:
        self.canvas = Canvas(width=width, height=height)

    def set_background_preset(self, preset: BackgroundPreset) -> None:
        self.background = FillBackground(value=BACKGROUND_PRESETS[preset])

    def set_background_fill(self, value: str) -> None:
        self.background = FillBackground(value=value)

    def set_background_image(self, payload: bytes, *, filename: str = "background.png") -> None:
        if not payload:
            return
        self.background = ImageBackground(source=ImageSource.from_bytes(payload, filename=filename))

    # ---------- Output ----------
    def render_plan(self) -> RenderInstruction:
        return build_render_plan(store=self.store, canvas=self.canvas, background=self.background)
