from collections.abc import Iterable

import pytest
from pytest import MonkeyPatch

from tinyurl.constants import ENV
from tinyurl.models import AccessMetadata
from tinyurl.registry import InMemoryUrlRegistry
from tinyurl.utils.keygen import RandomKeyGenerator


class ScriptedKeyGenerator(RandomKeyGenerator):
    """Key generator handing out a fixed sequence of keys."""

    def __init__(self, keys: Iterable[str]):
        super().__init__(pool_size=1)
        self._scripted = iter(keys)
        self.calls = 0

    def get_key(self) -> str:
        self.calls += 1
        return next(self._scripted)


@pytest.fixture(autouse=True)
def _env(monkeypatch: MonkeyPatch) -> None:
    """Isolate tests from AppConfig and SAM settings of the host environment."""
    for name in (*ENV.AppConfig, *ENV.Registry, ENV.App.AWS_SAM_LOCAL, ENV.App.APP_ENV):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def domain() -> str:
    return 'sho.rt'


@pytest.fixture
def registry(domain: str) -> InMemoryUrlRegistry:
    return InMemoryUrlRegistry(domain=domain)


@pytest.fixture
def metadata() -> AccessMetadata:
    return AccessMetadata(ip='203.0.113.7', user_agent='pytest', timestamp='2026-01-01T12:00:00Z')


@pytest.fixture
def scripted_key_generator():
    return ScriptedKeyGenerator
