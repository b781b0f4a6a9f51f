"""HTTP(S) tracker announces over aiohttp."""

from __future__ import annotations

import secrets
import urllib.parse
from typing import Any

import aiohttp

from ccannounce.core.bencode import decode
from ccannounce.models import AnnounceEvent, PeerEvent
from ccannounce.tracker.base import Tracker
from ccannounce.tracker.options import AnnounceOptionsProvider
from ccannounce.utils.exceptions import BencodeError, TrackerError

# Events that are sent on the wire; ``update`` is a regular announce
_WIRE_EVENTS = frozenset(
    {AnnounceEvent.STARTED, AnnounceEvent.COMPLETED, AnnounceEvent.STOPPED}
)


def _text(value: Any) -> str | None:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="ignore")
    return value


class HttpTracker(Tracker):
    """Tracker that announces with HTTP GET requests."""

    def __init__(
        self,
        announce_url: str,
        info_hash_buffer: bytes,
        provider: AnnounceOptionsProvider | None = None,
        peer_id: bytes | None = None,
        port: int | None = None,
        session: aiohttp.ClientSession | None = None,
    ):
        """Initialize the HTTP tracker.

        Args:
            announce_url: http:// or https:// announce URL, also used as id
            info_hash_buffer: Raw info hash of the torrent
            provider: Optional source of per-announce options
            peer_id: 20-byte peer ID (generated if omitted)
            port: Listening port reported to the tracker
            session: Shared aiohttp session; one is created lazily otherwise

        """
        super().__init__(announce_url, announce_url, info_hash_buffer, provider)
        self.peer_id = peer_id or self._generate_peer_id()
        self.port = port or self.config.announce.listen_port
        self.session = session
        self._owns_session = session is None

    def _generate_peer_id(self) -> bytes:
        """Generate a peer ID: the configured prefix plus random bytes."""
        prefix = self.config.announce.peer_id_prefix.encode("utf-8")
        return prefix + secrets.token_bytes(20 - len(prefix))

    def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.network.tracker_timeout)
            self.session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": self.config.network.user_agent},
            )
            self._owns_session = True
        return self.session

    def build_announce_url(
        self, event: AnnounceEvent | None, options: dict[str, Any]
    ) -> str:
        """Build the complete announce URL with query parameters."""
        params: dict[str, Any] = {
            "info_hash": urllib.parse.quote_from_bytes(self.info_hash_buffer),
            "peer_id": urllib.parse.quote_from_bytes(self.peer_id),
            "port": self.port,
        }
        for key, value in options.items():
            if key in params:
                continue
            params[key] = urllib.parse.quote(str(value), safe="")
        if event in _WIRE_EVENTS:
            params["event"] = event.value

        query_string = "&".join(f"{key}={value}" for key, value in params.items())
        separator = "&" if "?" in self.announce_url else "?"
        return f"{self.announce_url}{separator}{query_string}"

    async def announce(
        self, event: AnnounceEvent | None, options: dict[str, Any]
    ) -> PeerEvent:
        """Announce over HTTP and parse the bencoded answer."""
        url = self.build_announce_url(event, options)
        self.logger.debug("Announcing %s to %s", event, self.announce_url)
        data = await self._make_request(url)
        return self.parse_response(data)

    async def _make_request(self, url: str) -> bytes:
        """Make async HTTP GET request to tracker."""
        session = self._get_session()
        try:
            async with session.get(url) as response:
                if response.status != 200:
                    msg = f"HTTP {response.status}: {response.reason}"
                    raise TrackerError(msg)
                return await response.read()
        except TrackerError:
            raise
        except aiohttp.ClientError as e:
            msg = f"Network error: {e}"
            raise TrackerError(msg) from e
        except Exception as e:
            msg = f"Request failed: {e!r}"
            raise TrackerError(msg) from e

    def parse_response(self, data: bytes) -> PeerEvent:
        """Parse a bencoded announce response.

        Raises:
            TrackerError: on malformed data or a ``failure reason``

        """
        try:
            decoded = decode(data)
        except BencodeError as e:
            msg = f"Failed to parse tracker response: {e}"
            raise TrackerError(msg) from e

        if not isinstance(decoded, dict):
            msg = "Tracker response is not a dictionary"
            raise TrackerError(msg)

        if b"failure reason" in decoded:
            reason = _text(decoded[b"failure reason"])
            msg = f"Tracker failure: {reason}"
            raise TrackerError(msg, details={"url": self.announce_url})

        warning = _text(decoded.get(b"warning message"))
        if warning:
            self.logger.warning("Tracker %s warning: %s", self.announce_url, warning)

        try:
            return PeerEvent(
                interval=decoded.get(b"interval"),
                min_interval=decoded.get(b"min interval"),
                complete=decoded.get(b"complete"),
                incomplete=decoded.get(b"incomplete"),
                tracker_id=_text(decoded.get(b"tracker id")),
                warning_message=warning,
                peers=decoded.get(b"peers"),
            )
        except ValueError as e:
            msg = f"Invalid tracker response: {e}"
            raise TrackerError(msg) from e

    async def stop(self, force: bool = False) -> Any:
        """Stop announcing and release the HTTP session."""
        try:
            return await super().stop(force)
        finally:
            # A start() during the final announce owns the session now
            if self.is_stopped:
                await self.close()

    async def complete(self) -> Any:
        """Send ``completed`` and release the HTTP session."""
        try:
            return await super().complete()
        finally:
            if self.is_stopped:
                await self.close()

    async def close(self) -> None:
        """Close the HTTP session if this tracker created it."""
        if self._owns_session and self.session is not None:
            await self.session.close()
            self.session = None
