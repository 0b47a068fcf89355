# tests/conftest.py
import pytest

from subparse import settings


@pytest.fixture
def debug_mode():
    settings.set_debug_mode(True)
    yield
    settings.set_debug_mode(False)


@pytest.fixture
def verbose_mode():
    settings.set_verbose_mode(True)
    yield
    settings.set_verbose_mode(False)
