"""
Unit tests for Quorum SDK secret sharing
"""

import itertools
from unittest.mock import patch

import pytest
from hypothesis import given, settings, strategies as st

from quorum_sdk import SecretSharingService, SecureRandom, ShareInfo, encode, decode
from quorum_sdk.finite_field import modulus_for_chunk_size
from quorum_sdk.models import Share
from quorum_sdk.polynomials import Point
from quorum_sdk.services import CryptographyService, DecryptionService, EncryptionService
from quorum_sdk.sharing import bytes_to_int, int_to_bytes
from quorum_sdk.errors import ReconstructionError, ValidationError


def make_info(chunk_size=4, shares=5, degree=2, **kwargs):
    return ShareInfo.create(chunk_size, shares, degree, modulus_for_chunk_size(chunk_size), **kwargs)


class RecordingRandom(SecureRandom):
    """Random source that remembers every instance it hands out"""

    instances = []

    def __init__(self):
        super().__init__()
        RecordingRandom.instances.append(self)


class TestByteConversion:
    """Test cases for chunk/integer conversion"""

    def test_signed_little_endian(self):
        """Test bytes are read as signed little-endian"""
        assert bytes_to_int(b"\x01\x00") == 1
        assert bytes_to_int(b"\xff") == -1
        assert bytes_to_int(b"\x00\x80") == -32768
        assert bytes_to_int(b"") == 0

    def test_round_trip_keeps_length(self):
        """Test zero bytes are preserved by the recorded length"""
        for chunk in (b"\x00\x00\x00", b"\x05\x00\x00", b"\xff\xff", b"\x00"):
            assert int_to_bytes(bytes_to_int(chunk), len(chunk)) == chunk

    def test_overflow(self):
        """Test values too large for the length are rejected"""
        with pytest.raises(ReconstructionError):
            int_to_bytes(1 << 20, 2)


class TestSecureRandom:
    """Test cases for SecureRandom"""

    def test_token_bytes(self):
        """Test requested number of bytes is returned"""
        with SecureRandom() as rng:
            assert len(rng.token_bytes(16)) == 16
            assert rng.token_bytes(16) != rng.token_bytes(16)

    def test_closed_after_context(self):
        """Test source is unusable after release"""
        with SecureRandom() as rng:
            pass

        assert rng.closed
        with pytest.raises(RuntimeError):
            rng.token_bytes(4)


class TestEncode:
    """Test cases for encoding"""

    def test_end_to_end_shape(self):
        """Test 8 bytes with chunk size 4 give 5 shares of 2 points"""
        shares = encode(b"12345678", make_info())

        assert len(shares) == 5
        for k, share in enumerate(shares):
            assert len(share.points) == 2
            assert share.index == k
            assert share.secret_length == 8

    def test_first_input_offset(self):
        """Test share indices start at first_input"""
        shares = encode(b"abc", make_info(first_input=1))

        assert [s.index for s in shares] == [1, 2, 3, 4, 5]

    def test_share_zero_is_constant_term(self):
        """Test the share at input 0 carries the chunk values"""
        shares = encode(b"\x01\x02\x03\x04", make_info())

        assert shares[0].points[0].output == bytes_to_int(b"\x01\x02\x03\x04")

    def test_randomized(self):
        """Test repeated encoding draws fresh coefficients"""
        info = make_info()

        first = encode(b"same secret", info)
        second = encode(b"same secret", info)

        assert first[1].points != second[1].points

    def test_accepts_bytearray_and_memoryview(self):
        """Test bytes-like inputs"""
        info = make_info()

        assert decode(encode(bytearray(b"abcdef"), info), info) == b"abcdef"
        assert decode(encode(memoryview(b"abcdef"), info), info) == b"abcdef"

    def test_rejects_text(self):
        """Test non-bytes input is rejected"""
        with pytest.raises(ValidationError):
            encode("secret", make_info())

    def test_empty_secret(self):
        """Test empty secret gives empty shares"""
        info = make_info()
        shares = encode(b"", info)

        assert len(shares) == 5
        assert all(share.points == () for share in shares)
        assert decode(shares[:3], info) == b""

    def test_one_random_source_per_call(self):
        """Test a single random source is used and released per encode"""
        RecordingRandom.instances = []
        service = SecretSharingService(make_info(), random_factory=RecordingRandom)

        service.encrypt(b"0123456789abcdef")

        assert len(RecordingRandom.instances) == 1
        assert RecordingRandom.instances[0].closed

    def test_random_source_released_on_failure(self):
        """Test the random source is closed when encoding fails"""
        RecordingRandom.instances = []
        service = SecretSharingService(make_info(), random_factory=RecordingRandom)

        with patch.object(SecretSharingService, "_encrypt_chunk", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError, match="boom"):
                service.encrypt(b"0123456789")

        assert RecordingRandom.instances[0].closed

    def test_invalid_info(self):
        """Test service requires ShareInfo"""
        with pytest.raises(ValidationError):
            SecretSharingService({"chunk_size": 4})


class TestDecode:
    """Test cases for decoding"""

    def test_every_threshold_subset(self):
        """Test any 3 of 5 shares reconstruct the secret"""
        info = make_info()
        secret = b"\x00secret\xff"
        shares = encode(secret, info)

        for subset in itertools.combinations(shares, 3):
            assert decode(list(subset), info) == secret

    def test_order_of_shares_does_not_matter(self):
        """Test shares can be supplied in any order"""
        info = make_info()
        shares = encode(b"reordered", info)

        assert decode([shares[4], shares[0], shares[2]], info) == b"reordered"

    def test_more_than_threshold(self):
        """Test extra shares are accepted"""
        info = make_info()
        shares = encode(b"plenty of shares", info)

        assert decode(shares, info) == b"plenty of shares"

    def test_insufficient_shares(self):
        """Test any 2 of 5 shares fail"""
        info = make_info()
        shares = encode(b"12345678", info)

        for subset in itertools.combinations(shares, 2):
            with pytest.raises(ValidationError, match="Need at least 3 shares"):
                decode(list(subset), info)

    def test_uneven_final_chunk(self):
        """Test a 9-byte secret decodes to exactly 9 bytes"""
        info = make_info()
        secret = b"123456789"

        result = decode(encode(secret, info)[1:4], info)

        assert result == secret
        assert len(result) == 9

    def test_zero_bytes_preserved(self):
        """Test leading and trailing zero bytes survive"""
        info = make_info()
        secret = b"\x00\x00\x00\x00\x00\x01\x00\x00\x00"

        assert decode(encode(secret, info)[2:], info) == secret

    def test_negative_chunks(self):
        """Test chunks with the high bit set round-trip"""
        info = make_info()
        secret = b"\xff\xff\xff\xff\x00\x00\x00\x80\xfe"

        assert decode(encode(secret, info)[:3], info) == secret

    def test_degree_zero_outputs_in_field(self):
        """Test degree-zero shares hold reduced values"""
        info = make_info(chunk_size=1, shares=2, degree=0)
        modulus = info.polynomial_info.field.modulus

        shares = encode(b"\xff", info)

        for share in shares:
            assert 0 <= share.points[0].output < modulus
        assert decode(shares[1:], info) == b"\xff"

    def test_threshold_of_one(self):
        """Test degree zero lets each share reconstruct alone"""
        info = make_info(shares=3, degree=0)
        shares = encode(b"solo", info)

        for share in shares:
            assert decode([share], info) == b"solo"

    def test_integer_field(self):
        """Test unmodulated arithmetic with consecutive inputs"""
        info = ShareInfo.create(4, 5, 2)
        secret = b"integers!"
        shares = encode(secret, info)

        assert decode(shares[:3], info) == secret
        assert decode(shares[1:4], info) == secret

    def test_serialized_shares(self):
        """Test shares survive JSON serialization"""
        info = make_info(chunk_size=16, first_input=1)
        secret = b"serialize me please, across the wire"
        payloads = [share.to_json() for share in encode(secret, info)]

        restored = [Share.from_json(p) for p in payloads[2:]]

        assert decode(restored, info) == secret

    def test_mismatched_secret_length(self):
        """Test shares from different secrets are rejected"""
        info = make_info()
        a = encode(b"12345678", info)
        b = encode(b"123456789", info)

        with pytest.raises(ValidationError, match="disagree"):
            decode([a[0], a[1], b[2]], info)

    def test_wrong_point_count(self):
        """Test shares truncated in transit are rejected"""
        info = make_info()
        shares = encode(b"12345678", info)
        truncated = Share(shares[2].points[:1], shares[2].secret_length)

        with pytest.raises(ValidationError, match="must hold 2 points"):
            decode([shares[0], shares[1], truncated], info)

    def test_not_a_share(self):
        """Test non-share input is rejected"""
        info = make_info()

        with pytest.raises(ValidationError):
            decode([object(), object(), object()], info)

    def test_corrupted_share_detected_by_length(self):
        """Test a garbage point outside the chunk range is reported"""
        info = make_info()
        shares = encode(b"abcd", info)
        point = shares[3].points[0]
        forged = Share([Point(point.input, point.output + 2 ** 40)], 4)

        with pytest.raises(ReconstructionError):
            decode([shares[1], shares[2], forged], info)

    @settings(max_examples=50, deadline=None)
    @given(
        secret=st.binary(max_size=64),
        chunk_size=st.integers(1, 12),
        degree=st.integers(0, 4),
        extra=st.integers(0, 3),
        data=st.data()
    )
    def test_round_trip_property(self, secret, chunk_size, degree, extra, data):
        """Test any threshold subset reconstructs any secret"""
        info = make_info(chunk_size=chunk_size, shares=degree + 1 + extra, degree=degree)
        shares = encode(secret, info)

        indices = data.draw(st.permutations(range(len(shares))))[:info.threshold]

        assert decode([shares[i] for i in indices], info) == secret


class TestServiceContract:
    """Test cases for the encrypt/decrypt contract"""

    def test_sharing_service_is_cryptography_service(self):
        """Test the sharing service implements both directions"""
        service = SecretSharingService(make_info())

        assert isinstance(service, CryptographyService)
        assert isinstance(service, EncryptionService)
        assert isinstance(service, DecryptionService)

    def test_contract_is_abstract(self):
        """Test the contract cannot be instantiated directly"""
        with pytest.raises(TypeError):
            CryptographyService()
