import pytest
from helpers import make_client
from proxy_engine.data.settings import Settings, reset_settings
from proxy_engine.proxy_managers.fetcher import Fetcher
from proxy_engine.proxy_managers.pipeline import ProxyPipeline


@pytest.fixture(autouse=True)
def clean_settings():
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def make_pipeline(settings):
    def _make(handler, gate=None, compressor=None, strategy=None):
        effective = settings
        if strategy is not None:
            effective = settings.model_copy(update={"option_strategy": strategy})
        fetcher = Fetcher(make_client(handler), timeout=effective.fetch_timeout)
        return ProxyPipeline(fetcher, effective, gate=gate, compressor=compressor)

    return _make
