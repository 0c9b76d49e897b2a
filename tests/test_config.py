"""Unit tests for app.core.config.Settings validators."""

import unittest

from pydantic import SecretStr, ValidationError

from app.core.config import Settings


class TestSettingsValidation(unittest.TestCase):
    def test_defaults_are_valid(self) -> None:
        s = Settings(_env_file=None)
        self.assertEqual(s.API_PREFIX, "/api")
        self.assertEqual(s.JWT_ALGORITHM, "HS256")

    def test_database_url_must_be_postgres(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, DATABASE_URL="mysql://root@localhost/auth")
        s = Settings(_env_file=None, DATABASE_URL=" postgresql+psycopg2://u:p@db:5432/auth ")
        self.assertEqual(s.DATABASE_URL, "postgresql+psycopg2://u:p@db:5432/auth")

    def test_jwt_secret_must_not_be_blank(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, JWT_SECRET=SecretStr("   "))

    def test_smtp_port_range(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, SMTP_PORT=0)
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, SMTP_PORT=70000)

    def test_tls_modes_are_exclusive(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, SMTP_USE_TLS=True, SMTP_START_TLS=True)
        s = Settings(_env_file=None, SMTP_USE_TLS=True, SMTP_START_TLS=False, SMTP_PORT=465)
        self.assertTrue(s.SMTP_USE_TLS)

    def test_mail_from_falls_back_to_username(self) -> None:
        s = Settings(_env_file=None, SMTP_USERNAME="bot@example.com", MAIL_FROM="  ")
        self.assertIsNone(s.MAIL_FROM)
        self.assertEqual(s.mail_from, "bot@example.com")

    def test_cors_origin_normalized(self) -> None:
        s = Settings(_env_file=None, CORS_ALLOWED_ORIGIN="https://app.example.com/")
        self.assertEqual(s.CORS_ALLOWED_ORIGIN, "https://app.example.com")
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, CORS_ALLOWED_ORIGIN="app.example.com")

    def test_log_level_normalized(self) -> None:
        self.assertEqual(Settings(_env_file=None, LOG_LEVEL="debug").LOG_LEVEL, "DEBUG")
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, LOG_LEVEL="chatty")


if __name__ == "__main__":
    unittest.main()
