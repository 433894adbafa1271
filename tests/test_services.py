"""
Unit tests for service helpers
"""
from agerapp_api.database import BlogPost
from agerapp_api.middleware.error_handler import ErrorSanitizer
from agerapp_api.schemas import is_valid_email, like_pattern
from agerapp_api.services.account_deletion_service import redact_email
from agerapp_api.services.otp_service import generate_otp, hash_email
from agerapp_api.services.slug_service import generate_unique_slug, slugify
from agerapp_api.services.storage_provider import LocalDiskStorageProvider
from agerapp_api.services.user_service import merge_social, normalize_socials


class TestSlugs:
    """Blog slug generation"""

    def test_slugify(self):
        assert slugify("  Hello, World!  ") == "hello-world"
        assert slugify("Naira -- and   Kobo") == "naira-and-kobo"
        assert slugify("!!!") == ""

    def test_unique_slug_falls_back_and_suffixes(self, db_session, admin_user):
        assert generate_unique_slug(db_session, "???") == "post"

        db_session.add(BlogPost(title="Hello", slug="hello", content="x", author_id=admin_user.id))
        db_session.commit()

        assert generate_unique_slug(db_session, "Hello") == "hello-1"


class TestOtp:
    """One-time codes and email hashing"""

    def test_otp_is_six_digits(self):
        code = generate_otp()

        assert len(code) == 6
        assert code.isdigit()

    def test_hash_email_normalises(self):
        assert hash_email(" Ada@Example.com ") == hash_email("ada@example.com")
        assert hash_email("ada@example.com") != hash_email("bola@example.com")


class TestSocials:
    """Social link normalisation"""

    def test_legacy_shapes(self):
        assert normalize_socials({"social": "instagram", "link": "https://ig/ada"}) == [
            {"social": "INSTAGRAM", "link": "https://ig/ada"}
        ]
        assert normalize_socials({"facebook": "https://fb/ada", "myspace": "x"}) == [
            {"social": "FACEBOOK", "link": "https://fb/ada"}
        ]
        assert normalize_socials(None) == []

    def test_merge_replaces_platform(self):
        existing = [{"social": "INSTAGRAM", "link": "old"}, {"social": "FACEBOOK", "link": "fb"}]

        merged = merge_social(existing, "INSTAGRAM", "new")

        assert merged == [{"social": "FACEBOOK", "link": "fb"}, {"social": "INSTAGRAM", "link": "new"}]


class TestQueryHelpers:
    def test_like_pattern_escapes_wildcards(self):
        assert like_pattern("50%_off") == "%50\\%\\_off%"

    def test_email_validation(self):
        assert is_valid_email("ada@example.com")
        assert not is_valid_email("ada@example")
        assert not is_valid_email(None)


class TestStorageKeys:
    """Mapping public URLs back to storage keys"""

    def test_key_from_url(self, tmp_path):
        provider = LocalDiskStorageProvider(base_path=str(tmp_path))

        assert provider.key_from_url("users", "http://api.example.com/uploads/users/1-2.png") == "users/1-2.png"
        assert provider.key_from_url("users", "https://lh3.googleusercontent.com/a/photo") is None
        assert provider.key_from_url("users", "/uploads/blogs/1-2.png") is None
        assert provider.key_from_url("users", None) is None

    def test_put_get_delete(self, tmp_path):
        provider = LocalDiskStorageProvider(base_path=str(tmp_path))

        key = provider.put("products/a.png", b"data", "image/png")

        assert provider.get_url(key) == "/uploads/products/a.png"
        assert provider.get("products/a.png") == b"data"
        assert provider.delete("products/a.png") is True
        assert provider.get("products/a.png") is None


class TestRedaction:
    def test_sanitizer_strips_connection_and_email(self):
        message = "could not connect postgresql://u:p@db:5432/agerapp for ada@example.com"

        sanitized = ErrorSanitizer.sanitize_message(message)

        assert "postgresql://" not in sanitized
        assert "ada@example.com" not in sanitized

    def test_redact_email(self):
        redacted = redact_email("adetola@example.com")

        assert redacted.startswith("ad***")
        assert redacted.endswith("@example.com")
        assert redact_email("ab@example.com") == "**@example.com"
        assert redact_email("nonsense") == "***@***"
