import io
import logging

import pytest
from PIL import Image

from gradientgen.cache import CacheStore, MemoryBackend
from gradientgen.config import GradientConfig
from gradientgen.errors import StorageError
from gradientgen.service import GradientService


def decode(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


def test_render_and_cache(config):
    service = GradientService(config)
    result = service.get_from_params("ff0000", "0000ff", 10, 0, 0)

    assert result.key == "00ff0000-000000ff-10-0-0"
    assert result.data.startswith(b"\x89PNG")
    assert result.not_modified is False
    assert result.media_type == "image/png"
    assert (config.cache_dir / f"{result.key}.png").read_bytes() == result.data

    img = decode(result.data)
    assert img.size == (10, 4)
    for y in range(4):
        assert img.getpixel((0, y)) == (255, 0, 0)
        assert img.getpixel((9, y)) == (0, 0, 255)


def test_second_request_is_served_from_cache(config, monkeypatch):
    service = GradientService(config)
    first = service.get_from_params("abc", "def", 64, 30, 1)

    def fail(spec):
        raise AssertionError("should not re-render")

    monkeypatch.setattr(service, "render", fail)
    second = service.get_from_params("abc", "def", 64, 30, 1)
    assert second.data == first.data
    assert second.last_modified == pytest.approx(first.last_modified)


def test_not_modified_since(config):
    service = GradientService(config)
    spec = service.normalize("ff0000", "00ff00", 20)
    first = service.get(spec)

    fresh = service.get(spec, if_modified_since=first.last_modified + 10)
    assert fresh.not_modified is True
    assert fresh.data is None
    assert fresh.last_modified == pytest.approx(first.last_modified)

    stale = service.get(spec, if_modified_since=first.last_modified - 10)
    assert stale.not_modified is False
    assert stale.data == first.data


def test_not_modified_needs_an_entry(config):
    service = GradientService(config)
    result = service.get_from_params("f00", "00f", 10, if_modified_since=1e12)
    assert result.not_modified is False
    assert result.data is not None


def test_rendering_is_byte_identical(config):
    service = GradientService(config)
    spec = service.normalize("7f112233", "00ffeedd", 333, 123, 1)
    first = service.get(spec).data
    service.store.clear()
    assert service.get(spec).data == first
    assert service.render(spec) == first


def test_translucent_colors_produce_alpha(config):
    service = GradientService(config)
    img = decode(service.get_from_params("7fff0000", "00ff0000", 10).data)
    assert img.mode == "RGBA"
    assert img.getpixel((0, 0))[3] == 0
    assert img.getpixel((9, 0))[3] == 255


def test_tiny_budget_still_returns_image(tmp_path):
    service = GradientService(GradientConfig(cache_dir=tmp_path, cache_size_budget=1))
    result = service.get_from_params("f00", "00f", 100)
    assert result.data.startswith(b"\x89PNG")
    assert result.last_modified > 0
    assert service.store.entries() == []


def test_storage_failure_propagates(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    service = GradientService(GradientConfig(cache_dir=blocker))
    with pytest.raises(StorageError):
        service.get_from_params("f00", "00f", 10)


def test_explicit_store_and_diffusion_flag(clock):
    store = CacheStore(MemoryBackend(clock=clock), 10_000)
    on = GradientService(GradientConfig(error_diffusion=True), store=store)
    off = GradientService(GradientConfig(error_diffusion=False), store=CacheStore(MemoryBackend(clock=clock), 10_000))
    spec = on.normalize("ff8800", "0077ff", 200, 33)
    assert on.get(spec).last_modified == 1000.0
    assert on.render(spec) != off.render(spec)


def test_render_logs_event(config, caplog):
    caplog.set_level(logging.INFO, logger="gradientgen")
    GradientService(config).get_from_params("abc", "def", 16)
    events = [getattr(r, "event", None) for r in caplog.records]
    assert "gradient_rendered" in events
