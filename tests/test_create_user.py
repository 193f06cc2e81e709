"""Tests for the app.scripts.create_user CLI."""

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from app.models import User
from app.scripts import create_user
from tests.db_utils import make_memory_engine, make_session_factory


class TestCreateUserCli(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_memory_engine()
        self.session_factory = make_session_factory(self.engine)
        patcher = patch.object(create_user, "SessionLocal", self.session_factory)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self) -> None:
        self.engine.dispose()

    def test_creates_admin(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            code = create_user.main(["root", "root-password", "--admin"])
        self.assertEqual(code, 0)
        self.assertIn("['USER', 'ADMIN']", out.getvalue())

    def test_creates_plain_user(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            code = create_user.main(["alice", "pw1"])
        self.assertEqual(code, 0)
        self.assertIn("['USER']", out.getvalue())

    def test_duplicate_username_exits_nonzero(self) -> None:
        with redirect_stdout(io.StringIO()):
            create_user.main(["alice", "pw1"])
        err = io.StringIO()
        with redirect_stderr(err):
            code = create_user.main(["alice", "pw2"])
        self.assertEqual(code, 1)
        self.assertIn("already taken", err.getvalue())
        with self.session_factory() as db:
            self.assertEqual(db.query(User).count(), 1)


if __name__ == "__main__":
    unittest.main()
