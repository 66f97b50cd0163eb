# bouncer_relay/models.py
"""
Relay data model.

Host entities (comments, flags) are read-only views built from whatever the
host pipeline hands to a hook. Request bodies are pydantic models validated
strictly at the HTTP boundary.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, StringConstraints


class NotificationSource(Enum):
    """Which event produced a notification."""
    COMMENT = "comment"
    FLAG = "flag"


class CommentStatus(Enum):
    """Moderation statuses a comment can pass through."""
    ACCEPTED = "ACCEPTED"
    NONE = "NONE"
    REJECTED = "REJECTED"
    PREMOD = "PREMOD"
    SYSTEM_WITHHELD = "SYSTEM_WITHHELD"


# Statuses that leave a comment untouched by moderation
UNACTIONED_STATUSES = frozenset({CommentStatus.ACCEPTED.value, CommentStatus.NONE.value})

# Flags on anything other than comments are ignored
COMMENTS_ITEM_TYPE = "COMMENTS"

# Required request strings reject ""
NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]


def read_field(obj: Any, name: str, default: Any = None) -> Any:
    """Read a field from a mapping or an attribute-style host object."""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


@dataclass(frozen=True)
class NotificationPayload:
    """Body POSTed to the bouncer."""
    id: str
    source: Optional[NotificationSource] = None

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"id": self.id}
        # The first released relay sent only the id
        if self.source is not None:
            body["source"] = self.source.value
        return body


@dataclass(frozen=True)
class StatusEntry:
    """One entry of a comment's status history."""
    type: str


@dataclass(frozen=True)
class Comment:
    """Read-only view of a host comment."""
    id: str
    action_counts: Dict[str, int] = field(default_factory=dict)
    status_history: List[StatusEntry] = field(default_factory=list)

    @property
    def flag_count(self) -> int:
        return int(self.action_counts.get("flag") or 0)

    @classmethod
    def from_host(cls, obj: Any) -> "Comment":
        """Build a view from a host comment (mapping or object)."""
        counts = read_field(obj, "action_counts") or {}
        if not isinstance(counts, Mapping):
            counts = {"flag": read_field(counts, "flag", 0)}

        history = [
            entry if isinstance(entry, StatusEntry) else StatusEntry(type=read_field(entry, "type"))
            for entry in (read_field(obj, "status_history") or [])
        ]

        return cls(
            id=str(read_field(obj, "id")),
            action_counts=dict(counts),
            status_history=history,
        )


@dataclass(frozen=True)
class Flag:
    """Read-only view of a host flag."""
    item_id: str
    item_type: str

    @classmethod
    def from_host(cls, obj: Any) -> "Flag":
        return cls(
            item_id=str(read_field(obj, "item_id")),
            item_type=read_field(obj, "item_type"),
        )


@dataclass
class DeliveryRecord:
    """Diagnostic record of one delivery attempt."""
    payload: Dict[str, Any]
    url: str
    response_status: Optional[int]
    success: bool
    error: Optional[str]
    delivered_at: datetime


class HandshakeRequest(BaseModel):
    """Handshake test sent by the bouncer operator."""
    model_config = ConfigDict(strict=True, extra="ignore")

    challenge: NonEmptyStr
    handshake_token: NonEmptyStr
    injestion_url: NonEmptyStr  # Wire name used by the bouncer


class HandshakeResponse(BaseModel):
    """Proof that the relay shares the bouncer's secret and endpoint."""
    challenge: str
    client_version: str


class TranslateRequest(BaseModel):
    """Lookup of a localized string."""
    model_config = ConfigDict(strict=True, extra="ignore")

    key: str
    replacements: Optional[List[str]] = None
