"""Pydantic models for ccAnnounce.

Provides validated data models for tracker results and configuration.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AnnounceEvent(str, Enum):
    """Event kind attached to an announce request."""

    STARTED = "started"
    UPDATE = "update"
    COMPLETED = "completed"
    STOPPED = "stopped"


class PeerEvent(BaseModel):
    """Structured result of one announce round trip.

    The scheduler only reads ``interval`` and ``min_interval``; everything
    else is carried through for the caller.
    """

    interval: int | None = Field(
        None, gt=0, description="Suggested seconds between announces"
    )
    min_interval: int | None = Field(
        None, gt=0, description="Minimum seconds between announces"
    )
    complete: int | None = Field(None, ge=0, description="Number of seeders")
    incomplete: int | None = Field(None, ge=0, description="Number of leechers")
    tracker_id: str | None = Field(None, description="Tracker ID")
    warning_message: str | None = Field(None, description="Warning message")
    peers: Any = Field(None, description="Raw peer data as sent by the tracker")

    model_config = {"arbitrary_types_allowed": True}


class AnnounceConfig(BaseModel):
    """Announce scheduling defaults."""

    default_interval: float = Field(
        default=1800.0,
        gt=0,
        description="Announce interval used until a tracker dictates one (seconds)",
    )
    downloaded: int = Field(default=0, ge=0, description="Default downloaded bytes")
    uploaded: int = Field(default=0, ge=0, description="Default uploaded bytes")
    left: int = Field(default=0, ge=0, description="Default bytes left")
    compact: int = Field(default=1, ge=0, le=1, description="Request compact peers")
    numwant: int = Field(default=50, ge=0, description="Number of peers wanted")
    listen_port: int = Field(
        default=6881, ge=1, le=65535, description="Port reported to trackers"
    )
    peer_id_prefix: str = Field(
        default="-CA0100-", description="Prefix for generated peer IDs"
    )

    @field_validator("peer_id_prefix")
    @classmethod
    def validate_peer_id_prefix(cls, v: str) -> str:
        """Peer IDs are 20 bytes, so the prefix must leave room for randomness."""
        if not v or len(v.encode("utf-8")) >= 20:
            msg = "peer_id_prefix must be 1-19 bytes"
            raise ValueError(msg)
        return v

    def default_options(self) -> dict[str, Any]:
        """Return the options mapping sent when no provider overrides it."""
        return {
            "downloaded": self.downloaded,
            "uploaded": self.uploaded,
            "left": self.left,
            "compact": self.compact,
            "numwant": self.numwant,
        }


class NetworkConfig(BaseModel):
    """Network configuration."""

    tracker_timeout: float = Field(
        default=30.0, gt=0, le=600.0, description="Tracker request timeout (seconds)"
    )
    user_agent: str = Field(
        default="ccAnnounce/0.1.0", description="User-Agent sent to HTTP trackers"
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Log level")
    log_file: str | None = Field(None, description="Log file path")
    structured_logging: bool = Field(
        default=True, description="Use structured logging for the log file"
    )
    log_correlation_id: bool = Field(
        default=False,
        description="Include correlation IDs in console output",
    )


class Config(BaseModel):
    """Main configuration model."""

    announce: AnnounceConfig = Field(
        default_factory=AnnounceConfig,
        description="Announce configuration",
    )
    network: NetworkConfig = Field(
        default_factory=NetworkConfig,
        description="Network configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )
