import json
import os
import tempfile
import unittest
from unittest.mock import patch

from scripts import create_admin, seed_tours
from tourbook.auth import verify_password
from tourbook.db import InMemoryDbClient


class CreateAdminScriptTests(unittest.TestCase):
    @patch("scripts.create_admin.get_db_client")
    def test_creates_admin_with_hashed_password(self, mock_get_db):
        db = InMemoryDbClient()
        mock_get_db.return_value = db

        code = create_admin.main(
            ["--username", "ops", "--email", "ops@example.com", "--password", "pw"]
        )
        self.assertEqual(code, 0)
        admin = db.get_admin("ops")
        self.assertEqual(admin.email, "ops@example.com")
        self.assertTrue(verify_password("pw", admin.password_hash))

    @patch("scripts.create_admin.getpass.getpass", return_value="")
    @patch("scripts.create_admin.get_db_client")
    def test_empty_prompted_password_fails(self, mock_get_db, _getpass):
        db = InMemoryDbClient()
        mock_get_db.return_value = db
        self.assertEqual(create_admin.main(["--username", "ops"]), 1)
        self.assertIsNone(db.get_admin("ops"))


class SeedToursScriptTests(unittest.TestCase):
    def test_seed_skips_invalid_entries(self):
        db = InMemoryDbClient()
        created = seed_tours.seed_tours(
            db,
            [
                {
                    "title": "Edge of the World",
                    "location": "Riyadh",
                    "duration_days": 1,
                    "price": 300,
                    "max_guests": 8,
                },
                {"title": "missing fields"},
            ],
        )
        self.assertEqual(created, 1)
        self.assertEqual(
            [t.title for t in db.list_tours()], ["Edge of the World"]
        )

    @patch("scripts.seed_tours.get_db_client")
    def test_main_reads_file(self, mock_get_db):
        db = InMemoryDbClient()
        mock_get_db.return_value = db
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "tours.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump(
                    [
                        {
                            "title": "AlUla",
                            "location": "AlUla",
                            "duration_days": 2,
                            "price": 900,
                            "max_guests": 6,
                            "is_featured": True,
                        }
                    ],
                    f,
                )
            self.assertEqual(seed_tours.main(["--file", path]), 0)
        self.assertTrue(db.list_tours()[0].is_featured)


if __name__ == "__main__":
    unittest.main()
