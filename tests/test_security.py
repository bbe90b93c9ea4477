import time
import unittest
from datetime import timedelta

import jwt

from app.core.security import (
    TokenExpired,
    TokenMalformed,
    hash_password,
    parse_duration,
    sign_token,
    verify_password,
    verify_token,
)
from testing_utils import PASSWORD, PASSWORD_HASH

SECRET = "unit-test-secret"


class TokenCodecTests(unittest.TestCase):
    def test_round_trip_claims(self):
        token = sign_token({"email": "a@b.com", "role": "user"}, SECRET, timedelta(hours=1))
        claims = verify_token(token, SECRET)
        self.assertEqual(claims["email"], "a@b.com")
        self.assertEqual(claims["role"], "user")
        self.assertIn("iat", claims)
        self.assertIn("exp", claims)

    def test_short_ttl_token_expires(self):
        # exp is stored in whole seconds; start right after a second boundary
        time.sleep(1 - (time.time() % 1) + 0.01)
        token = sign_token({"email": "a@b.com", "role": "user"}, SECRET, timedelta(seconds=1))
        self.assertEqual(verify_token(token, SECRET)["email"], "a@b.com")
        time.sleep(1.1)
        with self.assertRaises(TokenExpired):
            verify_token(token, SECRET)

    def test_wrong_secret_is_malformed(self):
        token = sign_token({"email": "a@b.com"}, SECRET, timedelta(minutes=5))
        with self.assertRaises(TokenMalformed):
            verify_token(token, "another-secret")

    def test_garbage_is_malformed(self):
        for token in ("not-a-token", "a.b.c", ""):
            with self.assertRaises(TokenMalformed):
                verify_token(token, SECRET)

    def test_token_without_exp_is_rejected(self):
        token = jwt.encode({"email": "a@b.com"}, SECRET, algorithm="HS256")
        with self.assertRaises(TokenMalformed):
            verify_token(token, SECRET)

    def test_blank_secret_is_a_configuration_error(self):
        with self.assertRaises(ValueError):
            sign_token({"email": "a@b.com"}, "", timedelta(minutes=5))
        with self.assertRaises(ValueError):
            verify_token("x.y.z", "")

    def test_parse_duration(self):
        self.assertEqual(parse_duration("7d"), timedelta(days=7))
        self.assertEqual(parse_duration("12h"), timedelta(hours=12))
        self.assertEqual(parse_duration("30m"), timedelta(minutes=30))
        self.assertEqual(parse_duration("45s"), timedelta(seconds=45))
        self.assertEqual(parse_duration("3600"), timedelta(hours=1))
        with self.assertRaises(ValueError):
            parse_duration("soon")


class PasswordHashTests(unittest.TestCase):
    def test_verify_matching_password(self):
        self.assertTrue(verify_password(PASSWORD, PASSWORD_HASH))

    def test_verify_other_password(self):
        self.assertFalse(verify_password(PASSWORD + "x", PASSWORD_HASH))

    def test_hash_is_salted_bcrypt(self):
        other = hash_password(PASSWORD)
        self.assertNotEqual(other, PASSWORD_HASH)
        self.assertTrue(other.startswith("$2b$12$"))

    def test_malformed_hash_never_raises(self):
        self.assertFalse(verify_password(PASSWORD, "plain-text"))
        self.assertFalse(verify_password(PASSWORD, None))
        self.assertFalse(verify_password("", PASSWORD_HASH))


if __name__ == "__main__":
    unittest.main()
