"""Unit tests for app.services.user_service against the in-memory account store."""

import unittest
from datetime import UTC, datetime
from unittest.mock import MagicMock

from app.core.exceptions import (
    BootstrapError,
    DuplicateKeyError,
    InvalidCredentialsError,
    InvalidPasswordError,
    PasswordHashError,
    PasswordUnchangedError,
    RecordNotFoundError,
    TokenSigningError,
)
from app.core.security import TokenIssuer, hash_password, verify_password
from app.models.user import User
from app.repositories.memory import InMemoryUserRepository
from app.schemas.auth import CreateUserRequest, LoginRequest, PasswordChangeRequest
from app.services.user_service import UserService

SECRET = "test-secret-key-that-is-long-enough-for-hs256"


def _service(repo: object | None = None, issuer: TokenIssuer | None = None) -> UserService:
    """Build a UserService with a cheap bcrypt cost."""
    return UserService(
        repo if repo is not None else InMemoryUserRepository(),
        issuer or TokenIssuer(SECRET),
        bcrypt_rounds=4,
    )


class TestCreateUser(unittest.TestCase):
    """create_user hashes the password, persists once and rejects duplicate usernames."""

    def setUp(self) -> None:
        self.repo = InMemoryUserRepository()
        self.service = _service(self.repo)

    def test_creates_account_with_hashed_password(self) -> None:
        user = self.service.create_user(CreateUserRequest(username="alice", password="wonderland"))
        self.assertEqual(user.id, 1)
        self.assertEqual(user.username, "alice")
        self.assertFalse(user.is_admin)
        self.assertNotEqual(user.password_hash, "wonderland")
        self.assertTrue(verify_password("wonderland", user.password_hash))

    def test_admin_flag_is_kept(self) -> None:
        user = self.service.create_user(CreateUserRequest(username="root", password="toor", is_admin=True))
        self.assertTrue(user.is_admin)
        self.assertEqual(user.role.value, "admin")

    def test_duplicate_username_is_rejected(self) -> None:
        self.service.create_user(CreateUserRequest(username="alice", password="first"))
        with self.assertRaises(DuplicateKeyError):
            self.service.create_user(CreateUserRequest(username="alice", password="second"))
        self.assertEqual(len(self.repo), 1)

    def test_existence_check_error_takes_priority(self) -> None:
        repo = MagicMock()
        repo.exists_by_username.side_effect = RuntimeError("db down")
        with self.assertRaises(RuntimeError):
            _service(repo).create_user(CreateUserRequest(username="alice", password="pass"))
        repo.create.assert_not_called()

    def test_store_level_duplicate_propagates(self) -> None:
        repo = MagicMock()
        repo.exists_by_username.return_value = False
        repo.create.side_effect = DuplicateKeyError()
        with self.assertRaises(DuplicateKeyError):
            _service(repo).create_user(CreateUserRequest(username="alice", password="pass"))

    def test_create_does_not_revalidate(self) -> None:
        user = self.service.create_user(CreateUserRequest(username="al", password="p"))
        self.assertEqual(user.username, "al")

    def test_validate_user_creation_entry_point(self) -> None:
        errors = self.service.validate_user_creation(CreateUserRequest(username="", password=""))
        self.assertEqual(len(errors), 4)

    def test_password_over_72_bytes_is_a_hash_error(self) -> None:
        with self.assertRaises(PasswordHashError):
            self.service.create_user(CreateUserRequest(username="alice", password="y" * 80))
        self.assertEqual(len(self.repo), 0)


class TestAuthenticate(unittest.TestCase):
    """authenticate returns the account or fails with the opaque credentials error."""

    def setUp(self) -> None:
        self.repo = InMemoryUserRepository()
        self.service = _service(self.repo)
        self.user = self.service.create_user(CreateUserRequest(username="alice", password="wonderland"))

    def test_correct_credentials(self) -> None:
        user = self.service.authenticate(LoginRequest(username="alice", password="wonderland"))
        self.assertEqual(user.id, self.user.id)

    def test_wrong_password(self) -> None:
        with self.assertRaises(InvalidCredentialsError):
            self.service.authenticate(LoginRequest(username="alice", password="looking-glass"))

    def test_malformed_input_is_invalid_credentials(self) -> None:
        for username, password in [("", "wonderland"), ("al", "wonderland"), ("alice", "won"), ("alice", "")]:
            with self.subTest(username=username, password=password):
                with self.assertRaises(InvalidCredentialsError):
                    self.service.authenticate(LoginRequest(username=username, password=password))

    def test_unknown_username_propagates_not_found(self) -> None:
        # the store's not-found error is passed through, not remapped
        with self.assertRaises(RecordNotFoundError):
            self.service.authenticate(LoginRequest(username="nobody", password="wonderland"))

    def test_account_without_id_is_invalid_credentials(self) -> None:
        repo = MagicMock()
        repo.get_by_username.return_value = User(
            id=0, username="ghost", password_hash=hash_password("boo!", rounds=4), is_admin=False
        )
        with self.assertRaises(InvalidCredentialsError):
            _service(repo).authenticate(LoginRequest(username="ghost", password="boo!"))

    def test_malformed_stored_hash_is_invalid_credentials(self) -> None:
        repo = MagicMock()
        repo.get_by_username.return_value = User(id=5, username="broken", password_hash="garbage", is_admin=False)
        with self.assertRaises(InvalidCredentialsError):
            _service(repo).authenticate(LoginRequest(username="broken", password="whatever"))

    def test_store_errors_propagate(self) -> None:
        repo = MagicMock()
        repo.get_by_username.side_effect = RuntimeError("db down")
        with self.assertRaises(RuntimeError):
            _service(repo).authenticate(LoginRequest(username="alice", password="wonderland"))

    def test_password_extending_the_stored_one_is_rejected(self) -> None:
        self.service.create_user(CreateUserRequest(username="carol", password="y" * 72))
        with self.assertRaises(InvalidCredentialsError):
            self.service.authenticate(LoginRequest(username="carol", password="y" * 80))
        with self.assertRaises(InvalidCredentialsError):
            self.service.authenticate(LoginRequest(username="carol", password="y" * 71))


class TestCreateAccessToken(unittest.TestCase):
    """create_access_token derives the role claim from is_admin."""

    def setUp(self) -> None:
        self.issuer = TokenIssuer(SECRET)
        self.service = _service(issuer=self.issuer)
        self.service.create_user(CreateUserRequest(username="admin2", password="secret", is_admin=True))
        self.service.create_user(CreateUserRequest(username="bob", password="builder"))

    def test_admin_token(self) -> None:
        token = self.service.create_access_token(LoginRequest(username="admin2", password="secret"))
        claims = self.issuer.decode_token(token)
        self.assertEqual(claims["role"], "admin")
        self.assertEqual(claims["ID"], "1")

    def test_user_token(self) -> None:
        before = int(datetime.now(UTC).timestamp())
        token = self.service.create_access_token(LoginRequest(username="bob", password="builder"))
        claims = self.issuer.decode_token(token)
        self.assertEqual(claims["role"], "user")
        self.assertEqual(claims["ID"], "2")
        self.assertAlmostEqual(claims["exp"], before + 86400, delta=5)

    def test_wrong_password_issues_nothing(self) -> None:
        with self.assertRaises(InvalidCredentialsError):
            self.service.create_access_token(LoginRequest(username="bob", password="wrong!"))

    def test_signing_failure_propagates(self) -> None:
        repo = InMemoryUserRepository()
        service = _service(repo, issuer=TokenIssuer(""))
        service.create_user(CreateUserRequest(username="bob", password="builder"))
        with self.assertRaises(TokenSigningError):
            service.create_access_token(LoginRequest(username="bob", password="builder"))


class TestUpdatePassword(unittest.TestCase):
    """update_password rejects bad or unchanged passwords and replaces the hash otherwise."""

    def setUp(self) -> None:
        self.repo = InMemoryUserRepository()
        self.service = _service(self.repo)
        self.user = self.service.create_user(CreateUserRequest(username="alice", password="wonderland"))

    def test_same_password_is_rejected(self) -> None:
        old_hash = self.user.password_hash
        with self.assertRaises(PasswordUnchangedError):
            self.service.update_password(self.user.id, PasswordChangeRequest(password="wonderland"))
        self.assertEqual(self.repo.get_by_id(self.user.id).password_hash, old_hash)

    def test_new_password_replaces_old(self) -> None:
        self.service.update_password(self.user.id, PasswordChangeRequest(password="looking-glass"))
        user = self.service.authenticate(LoginRequest(username="alice", password="looking-glass"))
        self.assertEqual(user.id, self.user.id)
        with self.assertRaises(InvalidCredentialsError):
            self.service.authenticate(LoginRequest(username="alice", password="wonderland"))

    def test_short_password_is_invalid(self) -> None:
        for password in ("", "abc"):
            with self.subTest(password=password):
                with self.assertRaises(InvalidPasswordError):
                    self.service.update_password(self.user.id, PasswordChangeRequest(password=password))

    def test_unknown_account(self) -> None:
        with self.assertRaises(RecordNotFoundError):
            self.service.update_password(99, PasswordChangeRequest(password="newpass"))

    def test_account_without_id_is_not_found(self) -> None:
        repo = MagicMock()
        repo.get_by_id.return_value = User(id=0, username="ghost", password_hash="x", is_admin=False)
        with self.assertRaises(RecordNotFoundError):
            _service(repo).update_password(0, PasswordChangeRequest(password="newpass"))
        repo.update_password.assert_not_called()

    def test_long_new_password_is_not_mistaken_for_unchanged(self) -> None:
        user = self.service.create_user(CreateUserRequest(username="zed", password="z" * 72))
        old_hash = user.password_hash
        with self.assertRaises(PasswordHashError):
            self.service.update_password(user.id, PasswordChangeRequest(password="z" * 72 + "new"))
        self.assertEqual(self.repo.get_by_id(user.id).password_hash, old_hash)

    def test_new_password_differing_after_many_characters(self) -> None:
        user = self.service.create_user(CreateUserRequest(username="zoe", password="z" * 69 + "old"))
        self.service.update_password(user.id, PasswordChangeRequest(password="z" * 69 + "new"))
        self.service.authenticate(LoginRequest(username="zoe", password="z" * 69 + "new"))

    def test_malformed_hash_is_overwritten(self) -> None:
        repo = MagicMock()
        repo.get_by_id.return_value = User(id=4, username="broken", password_hash="garbage", is_admin=False)
        _service(repo).update_password(4, PasswordChangeRequest(password="newpass"))
        user_id, new_hash = repo.update_password.call_args.args
        self.assertEqual(user_id, 4)
        self.assertTrue(verify_password("newpass", new_hash))


class TestGetInfos(unittest.TestCase):
    def test_returns_account(self) -> None:
        service = _service()
        created = service.create_user(CreateUserRequest(username="alice", password="wonderland"))
        self.assertIs(service.get_infos(created.id), created)

    def test_not_found(self) -> None:
        with self.assertRaises(RecordNotFoundError):
            _service().get_infos(42)


class TestEnsureDefaultAdmin(unittest.TestCase):
    """ensure_default_admin is idempotent and reports failures as BootstrapError."""

    def test_creates_admin_once(self) -> None:
        repo = InMemoryUserRepository()
        service = _service(repo)
        first = service.ensure_default_admin()
        second = service.ensure_default_admin()
        self.assertEqual(len(repo), 1)
        self.assertEqual(first.id, second.id)
        self.assertTrue(first.is_admin)
        self.assertEqual(first.username, "admin")
        self.assertTrue(verify_password("admin", first.password_hash))

    def test_default_admin_can_log_in(self) -> None:
        service = _service()
        service.ensure_default_admin()
        token = service.create_access_token(LoginRequest(username="admin", password="admin"))
        self.assertEqual(service.token_issuer.decode_token(token)["role"], "admin")

    def test_existing_admin_is_left_alone(self) -> None:
        repo = InMemoryUserRepository()
        service = _service(repo)
        existing = service.create_user(CreateUserRequest(username="admin", password="changed-already"))
        self.assertIs(service.ensure_default_admin(), existing)
        self.assertTrue(verify_password("changed-already", existing.password_hash))

    def test_lookup_failure_is_bootstrap_error(self) -> None:
        repo = MagicMock()
        repo.get_by_username.side_effect = RuntimeError("db down")
        with self.assertRaises(BootstrapError) as ctx:
            _service(repo).ensure_default_admin()
        self.assertIsInstance(ctx.exception.cause, RuntimeError)
        repo.create.assert_not_called()

    def test_create_failure_is_bootstrap_error(self) -> None:
        repo = MagicMock()
        repo.get_by_username.side_effect = RecordNotFoundError()
        repo.create.side_effect = DuplicateKeyError()
        with self.assertRaises(BootstrapError):
            _service(repo).ensure_default_admin()


if __name__ == "__main__":
    unittest.main()
