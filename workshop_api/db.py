"""
Document store abstraction for Firestore and an in-memory test implementation.

Both clients keep documents as camelCase dicts and share the same record
parsing, so a malformed document is skipped the same way in tests as in
production.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, Optional, Protocol

from dacite import DaciteError
from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud.firestore_v1 import Query

from workshop_api.errors import ConfigurationError, StoreError
from workshop_api.json_utils import convert_keys
from workshop_api.records import (
    Attendee,
    Session,
    Speaker,
    from_document,
    to_document,
)

logger = logging.getLogger(__name__)

WORKSHOPS_COLLECTION = "workshops"
ATTENDEES_COLLECTION = "attendees"
SPEAKERS_COLLECTION = "speakers"
SESSIONS_COLLECTION = "sessions"


class DbClient(Protocol):
    """Interface for document store access."""

    def create_attendee(self, attendee: Attendee) -> Attendee:
        ...

    def list_attendees(self, *, newest_first: bool = True) -> list[Attendee]:
        ...

    def count_attendees(self) -> int:
        ...

    def delete_attendee(self, attendee_id: str) -> None:
        ...

    def create_speaker(self, speaker: Speaker) -> Speaker:
        ...

    def list_speakers(self) -> list[Speaker]:
        ...

    def get_speaker(self, speaker_id: str) -> Optional[Speaker]:
        ...

    def update_speaker(self, speaker_id: str, fields: dict) -> None:
        ...

    def delete_speaker(self, speaker_id: str) -> None:
        ...

    def create_session(self, session: Session) -> Session:
        ...

    def list_sessions(self) -> list[Session]:
        ...

    def get_session(self, session_id: str) -> Optional[Session]:
        ...

    def replace_session(self, session_id: str, session: Session) -> None:
        ...

    def delete_session(self, session_id: str) -> None:
        ...


def _parse_documents(data_class, docs: Iterable[tuple[str, Optional[dict]]]) -> list:
    """Parse (doc_id, data) pairs, logging and skipping unparseable documents."""
    records = []
    for doc_id, data in docs:
        try:
            records.append(from_document(data_class, doc_id, data))
        except (DaciteError, ValueError) as e:
            logger.error(
                "Error parsing %s %s: %s", data_class.__name__.lower(), doc_id, e
            )
            continue
    return records


def _parse_document(data_class, doc_id: str, data: Optional[dict]):
    try:
        return from_document(data_class, doc_id, data)
    except (DaciteError, ValueError) as e:
        raise StoreError(f"Malformed document {doc_id}: {e}") from e


class InMemoryDbClient:
    """Simple in-memory document store for development and tests."""

    def __init__(self):
        self.collections: Dict[str, Dict[str, dict]] = {
            ATTENDEES_COLLECTION: {},
            SPEAKERS_COLLECTION: {},
            SESSIONS_COLLECTION: {},
        }

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        for docs in self.collections.values():
            docs.clear()

    def _add(self, collection: str, record) -> str:
        doc_id = uuid.uuid4().hex
        self.collections[collection][doc_id] = to_document(record)
        return doc_id

    def _get(self, data_class, collection: str, doc_id: str):
        data = self.collections[collection].get(doc_id)
        if data is None:
            return None
        return _parse_document(data_class, doc_id, data)

    def create_attendee(self, attendee: Attendee) -> Attendee:
        attendee.id = self._add(ATTENDEES_COLLECTION, attendee)
        return attendee

    def list_attendees(self, *, newest_first: bool = True) -> list[Attendee]:
        attendees = _parse_documents(
            Attendee, self.collections[ATTENDEES_COLLECTION].items()
        )
        if newest_first:
            attendees.sort(key=lambda a: a.created_at, reverse=True)
        return attendees

    def count_attendees(self) -> int:
        return len(self.collections[ATTENDEES_COLLECTION])

    def delete_attendee(self, attendee_id: str) -> None:
        self.collections[ATTENDEES_COLLECTION].pop(attendee_id, None)

    def create_speaker(self, speaker: Speaker) -> Speaker:
        speaker.id = self._add(SPEAKERS_COLLECTION, speaker)
        return speaker

    def list_speakers(self) -> list[Speaker]:
        return _parse_documents(Speaker, self.collections[SPEAKERS_COLLECTION].items())

    def get_speaker(self, speaker_id: str) -> Optional[Speaker]:
        return self._get(Speaker, SPEAKERS_COLLECTION, speaker_id)

    def update_speaker(self, speaker_id: str, fields: dict) -> None:
        existing = self.collections[SPEAKERS_COLLECTION].get(speaker_id)
        if existing is None:
            raise StoreError(f"No document to update: speakers/{speaker_id}")
        existing.update(convert_keys(fields, "snake_to_camel"))

    def delete_speaker(self, speaker_id: str) -> None:
        self.collections[SPEAKERS_COLLECTION].pop(speaker_id, None)

    def create_session(self, session: Session) -> Session:
        session.id = self._add(SESSIONS_COLLECTION, session)
        return session

    def list_sessions(self) -> list[Session]:
        return _parse_documents(Session, self.collections[SESSIONS_COLLECTION].items())

    def get_session(self, session_id: str) -> Optional[Session]:
        return self._get(Session, SESSIONS_COLLECTION, session_id)

    def replace_session(self, session_id: str, session: Session) -> None:
        self.collections[SESSIONS_COLLECTION][session_id] = to_document(session)

    def delete_session(self, session_id: str) -> None:
        self.collections[SESSIONS_COLLECTION].pop(session_id, None)


@contextmanager
def _firestore_errors(action: str) -> Iterator[None]:
    try:
        yield
    except (google_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as e:
        raise StoreError(f"Firestore {action} failed: {e}") from e


def _init_firestore_client(
    service_account_path: Optional[str] = None, project_id: Optional[str] = None
):
    """
    Return a Firestore client from the default firebase_admin app.

    A service account file is used when given (local development); otherwise
    Application Default Credentials are used, with an explicit project id if
    one is configured.
    """
    import firebase_admin
    from firebase_admin import credentials, firestore

    try:
        app = firebase_admin.get_app()
    except ValueError:
        if service_account_path:
            app = firebase_admin.initialize_app(
                credentials.Certificate(service_account_path)
            )
        else:
            options = {"projectId": project_id} if project_id else None
            app = firebase_admin.initialize_app(options=options)
    return firestore.client(app)


class FirestoreDbClient:
    """
    Firestore-backed implementation. Collections live under
    workshops/{subcollection_id}/.
    """

    def __init__(
        self,
        subcollection_id: Optional[str],
        *,
        client=None,
        service_account_path: Optional[str] = None,
        project_id: Optional[str] = None,
    ):
        if not subcollection_id:
            raise ConfigurationError(
                "FIRESTORE_SUBCOLLECTION_ID environment variable is required"
            )
        self.subcollection_id = subcollection_id
        self.client = client or _init_firestore_client(
            service_account_path, project_id
        )

    def _collection(self, name: str):
        return (
            self.client.collection(WORKSHOPS_COLLECTION)
            .document(self.subcollection_id)
            .collection(name)
        )

    def _add(self, collection: str, record) -> str:
        with _firestore_errors(f"add to {collection}"):
            _, doc_ref = self._collection(collection).add(to_document(record))
        return doc_ref.id

    def _stream(self, data_class, query, label: str) -> list:
        with _firestore_errors(f"list {label}"):
            docs = [(doc.id, doc.to_dict()) for doc in query.stream()]
        return _parse_documents(data_class, docs)

    def _get(self, data_class, collection: str, doc_id: str):
        with _firestore_errors(f"get {collection}/{doc_id}"):
            snapshot = self._collection(collection).document(doc_id).get()
        if not snapshot.exists:
            return None
        return _parse_document(data_class, snapshot.id, snapshot.to_dict())

    def _delete(self, collection: str, doc_id: str) -> None:
        with _firestore_errors(f"delete {collection}/{doc_id}"):
            self._collection(collection).document(doc_id).delete()

    def create_attendee(self, attendee: Attendee) -> Attendee:
        attendee.id = self._add(ATTENDEES_COLLECTION, attendee)
        return attendee

    def list_attendees(self, *, newest_first: bool = True) -> list[Attendee]:
        collection = self._collection(ATTENDEES_COLLECTION)
        if newest_first:
            ordered = collection.order_by("createdAt", direction=Query.DESCENDING)
            try:
                docs = [(doc.id, doc.to_dict()) for doc in ordered.stream()]
                return _parse_documents(Attendee, docs)
            except google_exceptions.GoogleAPIError as e:
                logger.warning(
                    "Ordered attendee query failed, listing unordered: %s", e
                )
        return self._stream(Attendee, collection, ATTENDEES_COLLECTION)

    def count_attendees(self) -> int:
        with _firestore_errors("count attendees"):
            results = self._collection(ATTENDEES_COLLECTION).count(alias="all").get()
        return int(results[0][0].value) if results else 0

    def delete_attendee(self, attendee_id: str) -> None:
        self._delete(ATTENDEES_COLLECTION, attendee_id)

    def create_speaker(self, speaker: Speaker) -> Speaker:
        speaker.id = self._add(SPEAKERS_COLLECTION, speaker)
        return speaker

    def list_speakers(self) -> list[Speaker]:
        return self._stream(
            Speaker, self._collection(SPEAKERS_COLLECTION), SPEAKERS_COLLECTION
        )

    def get_speaker(self, speaker_id: str) -> Optional[Speaker]:
        return self._get(Speaker, SPEAKERS_COLLECTION, speaker_id)

    def update_speaker(self, speaker_id: str, fields: dict) -> None:
        # update() fails with NotFound for a missing document
        with _firestore_errors(f"update speakers/{speaker_id}"):
            self._collection(SPEAKERS_COLLECTION).document(speaker_id).update(
                convert_keys(fields, "snake_to_camel")
            )

    def delete_speaker(self, speaker_id: str) -> None:
        self._delete(SPEAKERS_COLLECTION, speaker_id)

    def create_session(self, session: Session) -> Session:
        session.id = self._add(SESSIONS_COLLECTION, session)
        return session

    def list_sessions(self) -> list[Session]:
        return self._stream(
            Session, self._collection(SESSIONS_COLLECTION), SESSIONS_COLLECTION
        )

    def get_session(self, session_id: str) -> Optional[Session]:
        return self._get(Session, SESSIONS_COLLECTION, session_id)

    def replace_session(self, session_id: str, session: Session) -> None:
        with _firestore_errors(f"set sessions/{session_id}"):
            self._collection(SESSIONS_COLLECTION).document(session_id).set(
                to_document(session)
            )

    def delete_session(self, session_id: str) -> None:
        self._delete(SESSIONS_COLLECTION, session_id)
