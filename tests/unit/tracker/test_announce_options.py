"""Tests for announce option resolution."""

from __future__ import annotations

import pytest

from ccannounce.models import AnnounceConfig
from ccannounce.tracker.options import AnnounceOptionsProvider, resolve_options

pytestmark = [pytest.mark.unit, pytest.mark.tracker]

URL = "http://tracker.example.com/announce"


class StaticProvider:
    def __init__(self, options):
        self.options = options
        self.seen = []

    async def get_options(self, announce_url, info_hash):
        self.seen.append((announce_url, info_hash))
        return self.options


def test_default_options_match_protocol_defaults():
    assert AnnounceConfig().default_options() == {
        "downloaded": 0,
        "uploaded": 0,
        "left": 0,
        "compact": 1,
        "numwant": 50,
    }


def test_static_provider_satisfies_protocol():
    assert isinstance(StaticProvider({}), AnnounceOptionsProvider)


@pytest.mark.asyncio
async def test_no_provider_returns_copy_of_defaults():
    defaults = {"left": 0}
    options = await resolve_options(defaults, None, URL, "ab")

    assert options == defaults
    assert options is not defaults


@pytest.mark.asyncio
async def test_provider_result_replaces_defaults_wholesale():
    provider = StaticProvider({"left": 5, "event_hint": "x"})
    options = await resolve_options({"left": 0, "numwant": 50}, provider, URL, "ab")

    assert options == {"left": 5, "event_hint": "x"}
    assert provider.seen == [(URL, "ab")]


@pytest.mark.asyncio
@pytest.mark.parametrize("empty", [None, {}])
async def test_empty_provider_result_keeps_defaults(empty):
    options = await resolve_options({"numwant": 50}, StaticProvider(empty), URL, "ab")
    assert options == {"numwant": 50}


@pytest.mark.asyncio
async def test_provider_error_propagates():
    class FailingProvider:
        async def get_options(self, announce_url, info_hash):
            raise ConnectionError("stats service down")

    with pytest.raises(ConnectionError):
        await resolve_options({}, FailingProvider(), URL, "ab")
