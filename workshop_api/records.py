"""
Record types persisted in (or composed from) the document store.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import List, Optional

from dacite import Config, from_dict

from workshop_api.json_utils import convert_keys

_DACITE_CONFIG = Config(check_types=True)


@dataclass
class Attendee:
    created_at: datetime
    name: str = ""
    email: str = ""
    designation: str = ""
    id: str = ""


@dataclass
class Speaker:
    name: str = ""
    bio: str = ""
    avatar: str = ""
    linkedin: str = ""
    twitter: str = ""
    id: str = ""


@dataclass
class Session:
    title: str = ""
    description: str = ""
    time: str = ""
    speakers: List[str] = field(default_factory=list)
    id: str = ""


@dataclass
class SessionWithSpeakers:
    """A session plus the speaker records its ids resolve to. Never persisted."""

    session: Session
    speaker_details: List[Speaker] = field(default_factory=list)


@dataclass
class DesignationCount:
    designation: str
    count: int


def to_document(record) -> dict:
    """Serialize a record to a camelCase Firestore document body (without id)."""
    data = asdict(record)
    data.pop("id", None)
    return convert_keys(data, "snake_to_camel")


def from_document(data_class, doc_id: str, data: Optional[dict]):
    """
    Build a record from a camelCase document body.

    Raises dacite errors (or ValueError for an empty body) when the document
    does not match the record type; callers doing bulk reads skip such
    documents.
    """
    if not data:
        raise ValueError(f"Document {doc_id} has no data")
    # Null fields fall back to record defaults (or fail as missing).
    fields = {
        k: v
        for k, v in convert_keys(dict(data), "camel_to_snake").items()
        if v is not None
    }
    fields["id"] = doc_id
    return from_dict(data_class=data_class, data=fields, config=_DACITE_CONFIG)
