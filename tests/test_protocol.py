"""Tests for the saslauthd wire codec."""

import struct

import pytest

from core.domain.models import CredentialRequest
from core.errors import CredentialsRequired
from core.protocol import (
    FieldTooLong,
    decode_request,
    encode_field,
    encode_request,
    encode_response,
    is_success,
    read_length_prefix,
)


def _request(**overrides) -> CredentialRequest:
    values = {
        "user": "alice",
        "password": "s3cret",
        "service": "imap",
        "realm": "EXAMPLE.ORG",
        "client_addr": "192.0.2.7",
    }
    values.update(overrides)
    return CredentialRequest(**values)


class TestEncodeField:
    """Test encode_field function."""

    def test_non_empty_field(self):
        assert encode_field("imap") == b"\x00\x04imap"

    def test_empty_field_is_only_prefix(self):
        assert encode_field("") == b"\x00\x00"

    def test_length_counts_utf8_bytes(self):
        encoded = encode_field("contraseña")
        assert struct.unpack(">H", encoded[:2])[0] == len("contraseña".encode("utf-8")) == 11
        assert encoded[2:] == "contraseña".encode("utf-8")

    def test_max_length_accepted(self):
        encoded = encode_field("a" * 0xFFFF)
        assert encoded[:2] == b"\xff\xff"
        assert len(encoded) == 0xFFFF + 2

    def test_oversized_field_rejected(self):
        with pytest.raises(FieldTooLong):
            encode_field("a" * 0x10000)


class TestEncodeRequest:
    """Test encode_request function."""

    def test_exact_wire_bytes(self):
        payload = encode_request(_request(realm="", client_addr=""))
        assert payload == (
            b"\x00\x05alice" b"\x00\x06s3cret" b"\x00\x04imap" b"\x00\x00" b"\x00\x00"
        )

    @pytest.mark.parametrize(
        "overrides",
        [
            {},
            {"realm": "", "client_addr": ""},
            {"user": "ü" * 40, "password": "p" * 300, "service": "smtp"},
        ],
    )
    def test_length_is_sum_of_prefixed_fields(self, overrides):
        request = _request(**overrides)
        payload = encode_request(request)
        expected = sum(2 + len(value.encode("utf-8")) for value in request.fields())
        assert len(payload) == expected

        offset = 0
        for value in request.fields():
            (length,) = struct.unpack_from(">H", payload, offset)
            assert length == len(value.encode("utf-8"))
            offset += 2 + length
        assert offset == len(payload)

    def test_empty_optional_fields_are_two_bytes_each(self):
        full = encode_request(_request(realm="R", client_addr=""))
        assert full.endswith(b"\x00\x01R\x00\x00")

    def test_decoder_round_trip(self):
        request = _request(realm="", client_addr="::1")
        assert decode_request(encode_request(request)) == request

    @pytest.mark.parametrize("overrides", [{"user": ""}, {"password": ""}])
    def test_requires_user_and_password(self, overrides):
        with pytest.raises(CredentialsRequired):
            encode_request(_request(**overrides))


class TestDecodeRequest:
    """Test decode_request error handling."""

    def test_truncated_prefix(self):
        with pytest.raises(ValueError):
            decode_request(b"\x00\x01a\x00")

    def test_truncated_field(self):
        with pytest.raises(ValueError):
            decode_request(b"\x00\x05ali")

    def test_trailing_bytes(self):
        payload = encode_request(_request()) + b"x"
        with pytest.raises(ValueError):
            decode_request(payload)


class TestResponseHelpers:
    """Test response framing helpers."""

    def test_encode_response(self):
        assert encode_response("OK") == b"\x00\x02OK"

    def test_read_length_prefix(self):
        assert read_length_prefix(b"\x01\x00") == 256

    @pytest.mark.parametrize(
        "body,expected",
        [(b"OK", True), (b"OK Success.", True), (b"NO", False), (b"ok", False), (b"", False), (b"O", False)],
    )
    def test_is_success(self, body, expected):
        assert is_success(body) is expected
