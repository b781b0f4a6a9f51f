"""Per-announce option resolution."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class AnnounceOptionsProvider(Protocol):
    """Supplies per-announce query options for a tracker.

    One provider may serve many trackers concurrently.
    """

    async def get_options(
        self, announce_url: str, info_hash: str
    ) -> dict[str, Any] | None:
        """Return the options for the next announce, or None for defaults."""
        ...


async def resolve_options(
    defaults: dict[str, Any],
    provider: AnnounceOptionsProvider | None,
    announce_url: str,
    info_hash: str,
) -> dict[str, Any]:
    """Return the options for one announce.

    A non-empty mapping from ``provider`` replaces ``defaults`` entirely;
    fields are not merged. Provider errors propagate.
    """
    options = dict(defaults)
    if provider is not None:
        opt = await provider.get_options(announce_url, info_hash)
        if opt:
            options = dict(opt)
    return options
