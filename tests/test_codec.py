"""Tests for the bearer token codec."""

from datetime import timedelta

import jwt
import pytest

from forms_api.auth.codec import TokenCodec
from tests.conftest import TEST_SECRET


class TestMint:
    """Tests for token minting."""

    def test_minted_token_verifies_to_its_subject(self, codec):
        issued = codec.mint(42)
        claims = codec.verify(issued.token)

        assert claims is not None
        assert claims.subject_id == 42
        assert claims.expires_at == issued.expires_at

    def test_default_lifetime_is_seven_days(self, codec, clock):
        issued = codec.mint(1)
        assert issued.issued_at == clock.now
        assert issued.expires_at - issued.issued_at == timedelta(days=7)

    def test_same_subject_same_second_gives_distinct_tokens(self, codec):
        first = codec.mint(7)
        second = codec.mint(7)
        assert first.token != second.token
        assert first.issued_at == second.issued_at

    def test_empty_secret_is_rejected(self):
        with pytest.raises(ValueError):
            TokenCodec("")


class TestVerify:
    """Every bad token collapses to None."""

    @pytest.mark.parametrize("token", [None, "", "not-a-jwt", "a.b.c", 12345])
    def test_malformed_input(self, codec, token):
        assert codec.verify(token) is None

    def test_tampered_payload(self, codec):
        header, payload, signature = codec.mint(1).token.split(".")
        forged = jwt.encode({"sub": "2", "iat": 0, "exp": 4102444800, "jti": "x"}, "other-secret-key-of-sufficient-length!!")
        forged_payload = forged.split(".")[1]
        assert codec.verify(f"{header}.{forged_payload}.{signature}") is None

    def test_wrong_secret(self, clock):
        other = TokenCodec("another-secret-key-that-is-long-enough-for-hs256", clock=clock)
        codec = TokenCodec(TEST_SECRET, clock=clock)
        assert codec.verify(other.mint(1).token) is None

    def test_expired_by_injected_clock(self, codec, clock):
        issued = codec.mint(1)
        clock.advance(days=7)
        assert codec.verify(issued.token) is None

    def test_valid_until_the_last_second(self, codec, clock):
        issued = codec.mint(1)
        clock.advance(days=7, seconds=-1)
        assert codec.verify(issued.token) is not None

    def test_non_numeric_subject(self, codec):
        token = jwt.encode(
            {"sub": "alice", "iat": 0, "exp": 4102444800, "jti": "x"},
            TEST_SECRET,
            algorithm="HS256",
        )
        assert codec.verify(token) is None

    def test_missing_required_claim(self, codec):
        token = jwt.encode({"sub": "1", "iat": 0, "exp": 4102444800}, TEST_SECRET, algorithm="HS256")
        assert codec.verify(token) is None
