"""
Tests for codec factory functions.
"""

import pytest
from cryptography.fernet import Fernet

from globalnode.codecs import (
    Base64Codec,
    FernetCodec,
    UriCodec,
    create_codec,
    get_default_codec,
)
from globalnode.config import settings


class TestCreateCodec:
    """Tests for create_codec."""

    def test_create_base64(self):
        codec = create_codec("base64")

        assert isinstance(codec, Base64Codec)
        assert codec.urlsafe is True
        assert codec.padded is False

    def test_create_relay(self):
        codec = create_codec("relay")

        assert isinstance(codec, Base64Codec)
        assert codec.encode("Post", "10") == "UG9zdDoxMA=="

    def test_create_uri_with_app(self):
        codec = create_codec("uri", app="shop")

        assert isinstance(codec, UriCodec)
        assert codec.encode("Order", "1") == "gid://shop/Order/1"

    def test_create_fernet_with_keys(self):
        codec = create_codec("fernet", keys=[Fernet.generate_key()])

        assert isinstance(codec, FernetCodec)

    def test_create_fernet_from_settings(self, monkeypatch):
        key = Fernet.generate_key().decode()
        monkeypatch.setattr(settings, "encryption_keys", [key])

        codec = create_codec("fernet")

        assert codec.decode(FernetCodec([key]).encode("A", "1")) == ("A", "1")

    def test_create_fernet_without_key_fails(self, monkeypatch):
        monkeypatch.setattr(settings, "encryption_keys", [])

        with pytest.raises(ValueError, match="requires an encryption key"):
            create_codec("fernet")

    def test_name_is_case_insensitive(self):
        assert isinstance(create_codec("BASE64"), Base64Codec)

    def test_unknown_codec(self):
        with pytest.raises(ValueError, match="Unknown codec: rot13"):
            create_codec("rot13")

    def test_delimiter_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "delimiter", "|")

        codec = create_codec("base64")

        assert codec.decode(codec.encode("A:B", "1")) == ("A:B", "1")

    def test_default_name_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "codec", "uri")

        assert isinstance(create_codec(), UriCodec)


class TestDefaultCodec:
    def test_default_codec_is_cached(self, monkeypatch):
        monkeypatch.setattr(settings, "codec", "base64")

        first = get_default_codec()

        assert first is get_default_codec()
        assert isinstance(first, Base64Codec)
