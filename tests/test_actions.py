"""Tests for global-action routing and target disambiguation."""

import pytest

from creative_pilot.composer.actions import (
    ActionRouter,
    GlobalAction,
    NoPending,
    PendingAction,
    Resolution,
)
from creative_pilot.composer.bg_removal import BackgroundRemovalOrchestrator, RemovalState
from creative_pilot.composer.layer_schema import ImageLayer, ImageLayerData, ImageSource

from conftest import fake_png


def _add_photo(store, tag: bytes) -> str:
    data = ImageLayerData(source=ImageSource.from_bytes(fake_png(tag)), x=0, y=0)
    return store.add(ImageLayer(data=data))


@pytest.fixture
def router(store, remover) -> ActionRouter:
    return ActionRouter(store, BackgroundRemovalOrchestrator(store, remover))


class TestNoImages:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", list(GlobalAction))
    async def test_action_is_noop(self, store, router, remover, action):
        before = store.layers
        outcome = await router.issue(action)
        assert outcome.resolution is Resolution.NOOP
        assert store.layers == before
        assert isinstance(router.pending, NoPending)
        assert remover.calls == []


class TestSingleImage:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "action,scale,rotation",
        [
            (GlobalAction.ZOOM_IN, 1.1, 0),
            (GlobalAction.ZOOM_OUT, 0.9, 0),
            (GlobalAction.ROTATE_LEFT, 1.0, -15),
            (GlobalAction.ROTATE_RIGHT, 1.0, 15),
        ],
    )
    async def test_applies_directly(self, store, router, action, scale, rotation):
        layer_id = _add_photo(store, b"only")
        outcome = await router.issue(action)

        assert outcome.resolution is Resolution.APPLIED
        assert outcome.target_id == layer_id
        assert outcome.candidates == ()
        assert isinstance(router.pending, NoPending)
        data = store.get(layer_id).data
        assert data.scale == pytest.approx(scale)
        assert data.rotation == pytest.approx(rotation)

    @pytest.mark.asyncio
    async def test_remove_background_applies_directly(self, store, router, remover):
        layer_id = _add_photo(store, b"only")
        outcome = await router.issue(GlobalAction.REMOVE_BACKGROUND)
        assert outcome.removal.state is RemovalState.APPLIED
        assert store.get(layer_id).data.source.payload == remover.result

    @pytest.mark.asyncio
    async def test_accepts_action_value_strings(self, store, router):
        layer_id = _add_photo(store, b"only")
        await router.issue("zoom-in")
        assert store.get(layer_id).data.scale == pytest.approx(1.1)


class TestManyImages:
    @pytest.mark.asyncio
    async def test_action_waits_for_a_choice(self, store, router):
        first = _add_photo(store, b"1")
        second = _add_photo(store, b"2")
        before = store.layers

        outcome = await router.issue(GlobalAction.ZOOM_IN)

        assert outcome.resolution is Resolution.PENDING
        assert outcome.candidates == (first, second)
        assert router.pending == PendingAction(GlobalAction.ZOOM_IN, (first, second))
        assert store.layers == before

    @pytest.mark.asyncio
    async def test_choice_applies_to_exactly_that_layer(self, store, router):
        first = _add_photo(store, b"1")
        second = _add_photo(store, b"2")
        first_before = store.get(first)

        await router.issue(GlobalAction.ROTATE_RIGHT)
        outcome = await router.choose(second)

        assert outcome.resolution is Resolution.APPLIED
        assert outcome.target_id == second
        assert store.get(second).data.rotation == pytest.approx(15)
        assert store.get(first) == first_before
        assert isinstance(router.pending, NoPending)

    @pytest.mark.asyncio
    async def test_cancel_discards_pending(self, store, router):
        _add_photo(store, b"1")
        second = _add_photo(store, b"2")
        before = store.layers

        await router.issue(GlobalAction.ZOOM_OUT)
        outcome = router.cancel()

        assert outcome.resolution is Resolution.CANCELLED
        assert outcome.action is GlobalAction.ZOOM_OUT
        assert isinstance(router.pending, NoPending)
        # a late choice has nothing to apply
        assert (await router.choose(second)).resolution is Resolution.NOOP
        assert store.layers == before

    @pytest.mark.asyncio
    async def test_last_issued_action_wins(self, store, router):
        _add_photo(store, b"1")
        second = _add_photo(store, b"2")

        await router.issue(GlobalAction.ZOOM_IN)
        await router.issue(GlobalAction.ROTATE_LEFT)
        assert router.pending.action is GlobalAction.ROTATE_LEFT

        await router.choose(second)
        data = store.get(second).data
        assert data.rotation == pytest.approx(-15)
        assert data.scale == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_choosing_a_non_image_drops_the_action(self, store, router):
        _add_photo(store, b"1")
        _add_photo(store, b"2")
        before = store.layers

        await router.issue(GlobalAction.ZOOM_IN)
        outcome = await router.choose("text-headline")

        assert outcome.resolution is Resolution.NOOP
        assert isinstance(router.pending, NoPending)
        assert store.layers == before

    @pytest.mark.asyncio
    async def test_remove_background_after_choice(self, store, router, remover):
        first = _add_photo(store, b"1")
        second = _add_photo(store, b"2")

        await router.issue(GlobalAction.REMOVE_BACKGROUND)
        assert remover.calls == []

        outcome = await router.choose(first)
        assert outcome.removal.state is RemovalState.APPLIED
        assert remover.calls == [fake_png(b"1")]
        assert store.get(second).data.source.payload == fake_png(b"2")

    @pytest.mark.asyncio
    async def test_action_with_no_images_clears_pending(self, store, router):
        first = _add_photo(store, b"1")
        second = _add_photo(store, b"2")
        await router.issue(GlobalAction.ZOOM_IN)

        store.remove(first)
        store.remove(second)
        outcome = await router.issue(GlobalAction.ROTATE_LEFT)
        assert outcome.resolution is Resolution.NOOP
        assert isinstance(router.pending, NoPending)

        # the earlier zoom must not reach an image added later
        third = _add_photo(store, b"3")
        assert (await router.choose(third)).resolution is Resolution.NOOP
        assert store.get(third).data.scale == pytest.approx(1.0)


def test_cancel_without_pending_is_noop(router):
    assert router.cancel().resolution is Resolution.NOOP
