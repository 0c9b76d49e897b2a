"""Tests for the create_role CLI against a file-backed SQLite database."""

import os
import tempfile
import unittest
from unittest.mock import patch

from sqlalchemy import create_engine
from support import make_engine, make_session_factory

from app.models import Role
from app.scripts import create_role


class TestCreateRole(unittest.TestCase):
    def setUp(self) -> None:
        fd, self.path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        self.url = f"sqlite:///{self.path}"
        make_engine(self.url).dispose()
        patcher = patch.object(create_role, "build_engine", side_effect=lambda _settings: create_engine(self.url))
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self) -> None:
        os.remove(self.path)

    def _role_names(self) -> list[str]:
        engine = create_engine(self.url)
        try:
            with make_session_factory(engine)() as db:
                return sorted(r.role_name for r in db.query(Role).all())
        finally:
            engine.dispose()

    def test_creates_upper_case_role(self) -> None:
        self.assertEqual(create_role.main(["moderator"]), 0)
        self.assertEqual(self._role_names(), ["ADMIN", "MODERATOR", "USER"])

    def test_existing_role_is_rejected(self) -> None:
        self.assertEqual(create_role.main(["user"]), 1)
        self.assertEqual(self._role_names(), ["ADMIN", "USER"])

    def test_blank_name_is_rejected(self) -> None:
        self.assertEqual(create_role.main(["   "]), 1)


if __name__ == "__main__":
    unittest.main()
