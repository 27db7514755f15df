"""Pytest configuration and shared fixtures."""

import logging

import pytest

from helpers import FakeCodec, make_image_bytes


@pytest.fixture
def fake_codec():
    """Provide a fresh in-memory codec."""
    return FakeCodec()


@pytest.fixture
def sample_config():
    """Provide a sample configuration for testing."""
    from heic2jpeg.models import Config

    return Config(quality=85, output_dir=None, recursive=False, verbose=False)


@pytest.fixture
def image_bytes():
    """Provide encoded image bytes usable as HEIC stand-in input."""
    return make_image_bytes()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Keep handlers from leaking between tests."""
    yield
    logger = logging.getLogger("heic2jpeg")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
