import tempfile
import unittest

from bson import ObjectId

from api_movies.auth import link_federated_account
from api_movies.config import Settings
from api_movies.movies import create_app
from api_movies.watchlist import WatchlistStore
from helpers import FakeDatabase, insert_result, make_settings

ISSUER = "https://accounts.google.com"
PROFILE = {
    "id": "google-123",
    "displayName": "Ana Lima",
    "emails": [{"value": "ana@example.com"}],
    "photos": [{"value": "https://example.com/ana.png"}],
}


class TestLinkFederatedAccount(unittest.TestCase):
    def setUp(self) -> None:
        self.database = FakeDatabase()
        self.users = self.database.get_collection("users")
        self.credentials = self.database.get_collection("federated_credentials")

    def test_first_login_creates_user_and_credential(self) -> None:
        user_id = ObjectId()
        self.users.insert_one.return_value = insert_result(user_id)

        principal = link_federated_account(self.database, ISSUER, PROFILE)

        self.assertEqual(principal, {
            "id": user_id,
            "name": "Ana Lima",
            "email": "ana@example.com",
            "profilePicture": "https://example.com/ana.png",
        })
        credential = self.credentials.insert_one.call_args.args[0]
        self.assertEqual(credential["user_id"], user_id)
        self.assertEqual(credential["provider"], ISSUER)
        self.assertEqual(credential["subject"], "google-123")

    def test_profile_without_emails_or_photos(self) -> None:
        self.users.insert_one.return_value = insert_result()

        principal = link_federated_account(self.database, ISSUER, {"id": "x", "displayName": "No Mail"})

        self.assertIsNone(principal["email"])
        self.assertIsNone(principal["profilePicture"])

    def test_returning_user(self) -> None:
        user_id = ObjectId()
        self.credentials.find_one.return_value = {"user_id": user_id, "provider": ISSUER, "subject": "google-123"}
        self.users.find_one.return_value = {"_id": user_id, "name": "Ana Lima", "email": "ana@example.com"}

        principal = link_federated_account(self.database, ISSUER, PROFILE)

        self.assertEqual(principal["id"], user_id)
        self.users.find_one.assert_called_once_with({"_id": user_id})
        self.users.insert_one.assert_not_called()

    def test_credential_for_deleted_user(self) -> None:
        self.credentials.find_one.return_value = {"user_id": ObjectId(), "provider": ISSUER, "subject": "google-123"}

        self.assertIsNone(link_federated_account(self.database, ISSUER, PROFILE))


class TestAuthRoutes(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)
        settings = make_settings(self.tmp_dir.name)
        app = create_app(settings, database=FakeDatabase(), watchlist=WatchlistStore(settings.watchlist_path))
        self.client = app.test_client()

    def test_login_page(self) -> None:
        response = self.client.get("/login")

        self.assertEqual(response.status_code, 200)
        self.assertIn("Login with Google", response.get_data(as_text=True))

    def test_login_page_links_configured_url(self) -> None:
        settings = Settings(
            secret_key="test-secret",
            watchlist_path=f"{self.tmp_dir.name}/watchlist.json",
            federated_login_url="https://auth.example.com/start?next=/",
        )
        app = create_app(settings, database=FakeDatabase(), watchlist=WatchlistStore(settings.watchlist_path))

        text = app.test_client().get("/login").get_data(as_text=True)

        self.assertIn('href="https://auth.example.com/start?next=/"', text)
        self.assertNotIn("/login/federated/google", text)

    def test_login_page_shows_escaped_error(self) -> None:
        response = self.client.get("/login", query_string={"error": "<denied>"})

        text = response.get_data(as_text=True)
        self.assertIn("&lt;denied&gt;", text)
        self.assertIn("No description provided", text)

    def test_logout_clears_session(self) -> None:
        with self.client.session_transaction() as session:
            session["user"] = {"id": "1", "email": "ana@example.com"}

        response = self.client.get("/logout")

        self.assertEqual(response.status_code, 302)
        with self.client.session_transaction() as session:
            self.assertNotIn("user", session)


if __name__ == "__main__":
    unittest.main()
