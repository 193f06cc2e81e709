"""Tests for app.services.accounts: registration with the USER role and promotion to ADMIN."""

import unittest
from unittest.mock import MagicMock, patch

from app.core.security import verify_password
from app.models import Role, User
from app.services import accounts
from app.services.accounts import (
    ADMIN_ROLE,
    DEFAULT_ROLE,
    USER_ID_MAX,
    InvalidCredentialsFormatError,
    UserNotFoundError,
    UsernameTakenError,
    get_user,
    list_users,
    promote_to_admin,
    register_user,
    role_names,
)
from tests.db_utils import make_memory_engine, make_session_factory


class AccountsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_memory_engine()
        self.session = make_session_factory(self.engine)()

    def tearDown(self) -> None:
        self.session.close()
        self.engine.dispose()


class TestRegisterUser(AccountsTestCase):
    def test_assigns_id_and_single_user_role(self) -> None:
        user = register_user(self.session, "alice", "pw1")
        self.assertIsNotNone(user.id)
        self.assertEqual(user.username, "alice")
        self.assertEqual(role_names(user), [DEFAULT_ROLE])

    def test_stores_hash_not_plaintext(self) -> None:
        user = register_user(self.session, "alice", "pw1")
        self.assertNotEqual(user.password_hash, "pw1")
        self.assertTrue(user.password_hash.startswith("$2b$04$"))
        self.assertTrue(verify_password("pw1", user.password_hash))

    def test_same_password_gets_different_hashes(self) -> None:
        alice = register_user(self.session, "alice", "same-password")
        bob = register_user(self.session, "bob", "same-password")
        self.assertNotEqual(alice.password_hash, bob.password_hash)

    def test_reuses_existing_user_role(self) -> None:
        alice = register_user(self.session, "alice", "pw1")
        bob = register_user(self.session, "bob", "pw2")
        self.assertEqual(
            next(iter(alice.roles)).id,
            next(iter(bob.roles)).id,
        )
        self.assertEqual(self.session.query(Role).count(), 1)

    def test_strips_username_whitespace(self) -> None:
        user = register_user(self.session, "  carol  ", "pw")
        self.assertEqual(user.username, "carol")

    def test_duplicate_username_raises(self) -> None:
        register_user(self.session, "alice", "pw1")
        with self.assertRaises(UsernameTakenError) as ctx:
            register_user(self.session, "alice", "other")
        self.assertEqual(ctx.exception.username, "alice")
        self.assertEqual(self.session.query(User).count(), 1)

    def test_invalid_lengths_raise(self) -> None:
        cases = [("", "pw"), ("   ", "pw"), ("u" * 256, "pw"), ("dave", ""), ("dave", "p" * 129)]
        for username, password in cases:
            with self.subTest(username=username[:10], password=password[:10]):
                with self.assertRaises(InvalidCredentialsFormatError):
                    register_user(self.session, username, password)
        self.assertEqual(self.session.query(User).count(), 0)

    def test_username_taken_at_commit_time(self) -> None:
        # Simulates a concurrent registration: the up-front check misses the
        # existing row, so the unique index on users.username rejects the insert.
        register_user(self.session, "alice", "pw1")
        real_lookup = accounts.get_user_by_username
        lookups: list[str] = []

        def lookup(session, username):
            lookups.append(username)
            if len(lookups) == 1:
                return None
            return real_lookup(session, username)

        with patch.object(accounts, "get_user_by_username", side_effect=lookup), patch.object(
            self.session, "rollback", wraps=self.session.rollback
        ) as rollback:
            with self.assertRaises(UsernameTakenError) as ctx:
                register_user(self.session, "alice", "pw2")

        self.assertEqual(ctx.exception.username, "alice")
        rollback.assert_called_once()
        self.assertEqual(self.session.query(User).count(), 1)
        stored = self.session.query(User).filter(User.username == "alice").one()
        self.assertTrue(verify_password("pw1", stored.password_hash))


class TestPromoteToAdmin(AccountsTestCase):
    def test_adds_admin_role(self) -> None:
        user = register_user(self.session, "alice", "pw1")
        promoted = promote_to_admin(self.session, user.id)
        self.assertEqual(promoted.id, user.id)
        self.assertEqual(role_names(promoted), [DEFAULT_ROLE, ADMIN_ROLE])

    def test_second_promotion_is_noop(self) -> None:
        user = register_user(self.session, "alice", "pw1")
        promote_to_admin(self.session, user.id)
        again = promote_to_admin(self.session, user.id)
        self.assertEqual(len(again.roles), 2)
        self.assertEqual(role_names(again), [DEFAULT_ROLE, ADMIN_ROLE])
        self.assertEqual(self.session.query(Role).filter(Role.name == ADMIN_ROLE).count(), 1)

    def test_admin_role_shared_between_users(self) -> None:
        alice = register_user(self.session, "alice", "pw1")
        bob = register_user(self.session, "bob", "pw2")
        promote_to_admin(self.session, alice.id)
        promote_to_admin(self.session, bob.id)
        self.assertEqual(self.session.query(Role).count(), 2)

    def test_unknown_id_raises_not_found(self) -> None:
        with self.assertRaises(UserNotFoundError) as ctx:
            promote_to_admin(self.session, 999)
        self.assertEqual(ctx.exception.user_id, 999)
        self.assertIn("999", ctx.exception.message)
        self.assertEqual(self.session.query(Role).count(), 0)

    def test_out_of_range_ids_not_found(self) -> None:
        register_user(self.session, "alice", "pw1")
        for user_id in (0, -1, USER_ID_MAX + 1, 2**70):
            with self.subTest(user_id=user_id):
                with self.assertRaises(UserNotFoundError) as ctx:
                    promote_to_admin(self.session, user_id)
                self.assertEqual(ctx.exception.user_id, user_id)
        self.assertEqual(self.session.query(Role).filter(Role.name == ADMIN_ROLE).count(), 0)


class TestLookups(AccountsTestCase):
    def test_get_user_and_list_users(self) -> None:
        alice = register_user(self.session, "alice", "pw1")
        bob = register_user(self.session, "bob", "pw2")
        self.assertEqual(get_user(self.session, bob.id).username, "bob")
        self.assertEqual([u.id for u in list_users(self.session)], [alice.id, bob.id])

    def test_get_user_missing(self) -> None:
        with self.assertRaises(UserNotFoundError):
            get_user(self.session, 42)


class TestCommitFailure(unittest.TestCase):
    """Storage errors propagate and the session is rolled back."""

    def test_promote_rolls_back_and_reraises(self) -> None:
        user = User(id=1, username="alice", password_hash="x")
        user.roles = set()
        session = MagicMock()
        session.get.return_value = user
        session.query.return_value.filter.return_value.order_by.return_value.first.return_value = Role(
            id=2, name=ADMIN_ROLE
        )
        session.commit.side_effect = RuntimeError("connection lost")
        with self.assertRaises(RuntimeError):
            promote_to_admin(session, 1)
        session.rollback.assert_called_once()


if __name__ == "__main__":
    unittest.main()
