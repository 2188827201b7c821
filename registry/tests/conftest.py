import pytest
from django.core.cache import cache


@pytest.fixture(autouse=True)
def _reset_throttles():
    # throttle counters live in the cache and would leak between tests
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def _geocoder_settings(settings):
    settings.GEOAPIFY_API_KEY = 'test-key'
    settings.GEOAPIFY_URL = 'https://geocoder.invalid/v1/geocode/search'
    settings.GEOCODING_TIMEOUT = 5
