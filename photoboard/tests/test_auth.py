import unittest

from photoboard.db import InMemoryDbClient
from photoboard.errors import InvalidCredentialsError, InvalidTokenError
from photoboard.passwords import (
    find_account_by_credentials,
    hash_password,
    verify_password,
)
from photoboard.tokens import TokenIssuer


class PasswordTests(unittest.TestCase):
    def test_hash_and_verify(self):
        hashed = hash_password("pw", rounds=4)
        self.assertNotEqual(hashed, "pw")
        self.assertTrue(verify_password("pw", hashed))
        self.assertFalse(verify_password("other", hashed))

    def test_malformed_hash_does_not_verify(self):
        self.assertFalse(verify_password("pw", "not-a-bcrypt-hash"))

    def test_find_account_by_credentials(self):
        db = InMemoryDbClient()
        account = db.create_account("carol", hash_password("pw", rounds=4))
        self.assertEqual(
            find_account_by_credentials(db, "carol", "pw").account_id,
            account.account_id,
        )
        with self.assertRaises(InvalidCredentialsError):
            find_account_by_credentials(db, "carol", "nope")
        with self.assertRaises(InvalidCredentialsError):
            find_account_by_credentials(db, "dave", "pw")


class TokenIssuerTests(unittest.TestCase):
    def test_issue_and_decode(self):
        issuer = TokenIssuer("secret")
        claims = issuer.decode(issuer.issue("user-1"))
        self.assertEqual(claims["userId"], "user-1")

    def test_wrong_secret_rejected(self):
        token = TokenIssuer("secret").issue("user-1")
        with self.assertRaises(InvalidTokenError):
            TokenIssuer("other").decode(token)

    def test_expired_token_rejected(self):
        issuer = TokenIssuer("secret", expires_in=-10)
        token = issuer.issue("user-1")
        with self.assertRaises(InvalidTokenError):
            issuer.decode(token)

    def test_generated_secret_when_missing(self):
        issuer = TokenIssuer(None)
        self.assertTrue(issuer.secret_key)
        self.assertEqual(issuer.decode(issuer.issue("u"))["userId"], "u")


if __name__ == "__main__":
    unittest.main()
