"""
Entity operations on top of a DbClient.

Routes call these rather than the store directly wherever an operation does
more than pass a record through: attendee registration, the designation
breakdown, the speaker partial-update policy, and the session/speaker join.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from workshop_api.db import DbClient
from workshop_api.errors import StoreError
from workshop_api.records import (
    Attendee,
    DesignationCount,
    Session,
    SessionWithSpeakers,
    Speaker,
)

logger = logging.getLogger(__name__)

# Overwritten on update only when the incoming value is non-empty. Name and
# bio are always overwritten, even with "".
SPEAKER_OPTIONAL_FIELDS = ("avatar", "linkedin", "twitter")


def register_attendee(
    db: DbClient,
    *,
    name: str,
    email: str,
    designation: str,
    now: Optional[datetime] = None,
) -> Attendee:
    attendee = Attendee(
        name=name,
        email=email,
        designation=designation,
        created_at=now or datetime.now(timezone.utc),
    )
    return db.create_attendee(attendee)


def designation_breakdown(attendees: Iterable[Attendee]) -> list[DesignationCount]:
    """
    Count attendees per exact designation string.

    Designations are compared as-is (case-sensitive, untrimmed). The result
    follows first-seen order, which callers must not rely on.
    """
    counts: dict[str, int] = {}
    for attendee in attendees:
        counts[attendee.designation] = counts.get(attendee.designation, 0) + 1
    return [
        DesignationCount(designation=designation, count=count)
        for designation, count in counts.items()
    ]


def get_designation_breakdown(db: DbClient) -> list[DesignationCount]:
    return designation_breakdown(db.list_attendees(newest_first=False))


def speaker_update_fields(speaker: Speaker) -> dict:
    fields = {"name": speaker.name, "bio": speaker.bio}
    for name in SPEAKER_OPTIONAL_FIELDS:
        value = getattr(speaker, name)
        if value:
            fields[name] = value
    return fields


def update_speaker(db: DbClient, speaker_id: str, speaker: Speaker) -> Speaker:
    """Apply a partial update and echo the submitted speaker with its id."""
    db.update_speaker(speaker_id, speaker_update_fields(speaker))
    speaker.id = speaker_id
    return speaker


def update_session(db: DbClient, session_id: str, session: Session) -> Session:
    """Overwrite the whole session document, creating it if absent."""
    session.id = session_id
    db.replace_session(session_id, session)
    return session


def join_speakers(
    sessions: Iterable[Session], speakers: Iterable[Speaker]
) -> list[SessionWithSpeakers]:
    """Resolve each session's speaker ids, dropping ids with no speaker."""
    by_id = {speaker.id: speaker for speaker in speakers}
    return [
        SessionWithSpeakers(
            session=session,
            speaker_details=[by_id[sid] for sid in session.speakers if sid in by_id],
        )
        for session in sessions
    ]


def list_sessions_with_speakers(db: DbClient) -> list[SessionWithSpeakers]:
    """
    List sessions with their speaker records attached.

    A failed or empty speaker fetch still returns every session, just without
    speaker details. Only a failure to fetch the sessions themselves raises.
    """
    sessions = db.list_sessions()
    if not sessions:
        return []

    try:
        speakers = db.list_speakers()
    except StoreError as e:
        logger.warning("Could not load speakers for sessions: %s", e)
        speakers = []

    if not speakers:
        return [SessionWithSpeakers(session=session) for session in sessions]
    return join_speakers(sessions, speakers)
