import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions

from workshop_api.db import FirestoreDbClient, InMemoryDbClient
from workshop_api.errors import ConfigurationError, StoreError
from workshop_api.records import Attendee, Session, Speaker

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_attendee(name: str, created_at: datetime) -> Attendee:
    return Attendee(
        name=name,
        email=f"{name.lower()}@example.com",
        designation="Engineer",
        created_at=created_at,
    )


def make_snapshot(doc_id: str, data: dict) -> MagicMock:
    snapshot = MagicMock()
    snapshot.id = doc_id
    snapshot.exists = True
    snapshot.to_dict.return_value = data
    return snapshot


class InMemoryDbClientTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()

    def test_attendees_newest_first(self):
        self.db.create_attendee(make_attendee("Old", NOW - timedelta(days=1)))
        self.db.create_attendee(make_attendee("New", NOW))
        self.db.create_attendee(make_attendee("Middle", NOW - timedelta(hours=1)))

        names = [a.name for a in self.db.list_attendees()]
        self.assertEqual(names, ["New", "Middle", "Old"])

    def test_documents_are_camel_case(self):
        created = self.db.create_attendee(make_attendee("Ada", NOW))
        stored = self.db.collections["attendees"][created.id]
        self.assertIn("createdAt", stored)
        self.assertNotIn("id", stored)

    def test_malformed_documents_are_skipped(self):
        self.db.create_speaker(Speaker(name="Ada"))
        self.db.collections["speakers"]["bad"] = {"name": 42}
        self.db.collections["sessions"]["empty"] = {}

        self.assertEqual([s.name for s in self.db.list_speakers()], ["Ada"])
        self.assertEqual(self.db.list_sessions(), [])

    def test_null_fields_use_defaults(self):
        self.db.collections["sessions"]["s1"] = {"title": "Keynote", "speakers": None}
        [session] = self.db.list_sessions()
        self.assertEqual(session.speakers, [])
        self.assertEqual(session.id, "s1")

    def test_delete_is_idempotent(self):
        created = self.db.create_attendee(make_attendee("Ada", NOW))
        self.db.delete_attendee(created.id)
        self.db.delete_attendee(created.id)
        self.db.delete_attendee("never-existed")
        self.assertEqual(self.db.count_attendees(), 0)

    def test_get_missing(self):
        self.assertIsNone(self.db.get_speaker("missing"))
        self.assertIsNone(self.db.get_session("missing"))

    def test_update_missing_speaker(self):
        with self.assertRaises(StoreError):
            self.db.update_speaker("missing", {"name": "x"})

    def test_reset(self):
        self.db.create_speaker(Speaker(name="Ada"))
        self.db.reset()
        self.assertEqual(self.db.list_speakers(), [])


class FirestoreDbClientTests(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.db = FirestoreDbClient("ai-workshop-2025", client=self.client)
        self.collection = (
            self.client.collection.return_value.document.return_value.collection.return_value
        )

    def test_requires_subcollection(self):
        with self.assertRaises(ConfigurationError):
            FirestoreDbClient("", client=self.client)
        with self.assertRaises(ConfigurationError):
            FirestoreDbClient(None, client=self.client)

    @patch("workshop_api.db._init_firestore_client")
    def test_initializes_client_from_credentials(self, mock_init):
        FirestoreDbClient(
            "ws", service_account_path="/secrets/sa.json", project_id="proj"
        )
        mock_init.assert_called_once_with("/secrets/sa.json", "proj")

    def test_collections_live_under_workshop(self):
        self.collection.stream.return_value = []
        self.db.list_speakers()
        self.client.collection.assert_called_with("workshops")
        self.client.collection.return_value.document.assert_called_with(
            "ai-workshop-2025"
        )
        self.client.collection.return_value.document.return_value.collection.assert_called_with(
            "speakers"
        )

    def test_create_attendee_assigns_id(self):
        self.collection.add.return_value = (NOW, MagicMock(id="generated"))
        created = self.db.create_attendee(make_attendee("Ada", NOW))

        self.assertEqual(created.id, "generated")
        body = self.collection.add.call_args[0][0]
        self.assertEqual(body["createdAt"], NOW)
        self.assertEqual(body["designation"], "Engineer")
        self.assertNotIn("id", body)

    def test_list_attendees_ordered(self):
        ordered = self.collection.order_by.return_value
        ordered.stream.return_value = [
            make_snapshot(
                "a1",
                {
                    "name": "Ada",
                    "email": "ada@example.com",
                    "designation": "Engineer",
                    "createdAt": NOW,
                },
            ),
            make_snapshot("bad", {"name": "Broken"}),
        ]

        attendees = self.db.list_attendees()

        self.assertEqual([a.id for a in attendees], ["a1"])
        self.assertEqual(self.collection.order_by.call_args[0][0], "createdAt")

    def test_list_attendees_falls_back_to_unordered(self):
        self.collection.order_by.return_value.stream.side_effect = (
            google_exceptions.FailedPrecondition("index required")
        )
        self.collection.stream.return_value = [
            make_snapshot(
                "a1",
                {
                    "name": "Ada",
                    "email": "ada@example.com",
                    "designation": "Engineer",
                    "createdAt": NOW,
                },
            )
        ]

        attendees = self.db.list_attendees()
        self.assertEqual([a.name for a in attendees], ["Ada"])

    def test_list_failure_raises_store_error(self):
        self.collection.stream.side_effect = google_exceptions.ServiceUnavailable("down")
        with self.assertRaises(StoreError):
            self.db.list_sessions()

    def test_credential_failure_raises_store_error(self):
        self.collection.stream.side_effect = auth_exceptions.RefreshError("expired")
        with self.assertRaises(StoreError):
            self.db.list_sessions()

        self.collection.add.side_effect = auth_exceptions.DefaultCredentialsError("none")
        with self.assertRaises(StoreError):
            self.db.create_speaker(Speaker(name="Ada"))

    def test_count_uses_aggregation(self):
        self.collection.count.return_value.get.return_value = [[MagicMock(value=7)]]
        self.assertEqual(self.db.count_attendees(), 7)
        self.collection.stream.assert_not_called()

    def test_update_speaker_sends_only_given_fields(self):
        self.db.update_speaker("sp1", {"name": "Ada", "bio": "", "twitter": "@ada"})
        self.collection.document.assert_called_with("sp1")
        self.collection.document.return_value.update.assert_called_once_with(
            {"name": "Ada", "bio": "", "twitter": "@ada"}
        )

    def test_update_missing_speaker(self):
        self.collection.document.return_value.update.side_effect = (
            google_exceptions.NotFound("no document")
        )
        with self.assertRaises(StoreError):
            self.db.update_speaker("missing", {"name": "x"})

    def test_replace_session_sets_whole_document(self):
        self.db.replace_session("s1", Session(title="Keynote"))
        self.collection.document.return_value.set.assert_called_once_with(
            {"title": "Keynote", "description": "", "time": "", "speakers": []}
        )

    def test_get_session(self):
        self.collection.document.return_value.get.return_value = make_snapshot(
            "s1", {"title": "Keynote", "speakers": ["a", "b"]}
        )
        session = self.db.get_session("s1")
        self.assertEqual(session.id, "s1")
        self.assertEqual(session.speakers, ["a", "b"])

    def test_get_missing_speaker(self):
        snapshot = MagicMock()
        snapshot.exists = False
        self.collection.document.return_value.get.return_value = snapshot
        self.assertIsNone(self.db.get_speaker("missing"))

    def test_delete(self):
        self.db.delete_attendee("a1")
        self.collection.document.assert_called_with("a1")
        self.collection.document.return_value.delete.assert_called_once()


if __name__ == "__main__":
    unittest.main()
