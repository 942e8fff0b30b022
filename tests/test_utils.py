import pytest

from otpkit import EncodingError, HashAlgorithm, InvalidCounter, utils
from otpkit.algorithms import as_algorithm, hmac_digest


def test_decode_secret_case_insensitive():
    assert utils.decode_secret("GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ") == b"12345678901234567890"
    assert utils.decode_secret("gezdgnbvgy3tqojqgezdgnbvgy3tqojq") == b"12345678901234567890"


def test_decode_secret_requires_padding():
    with pytest.raises(EncodingError):
        utils.decode_secret("MFRGG")
    assert utils.decode_secret("MFRGG===") == b"abc"


def test_decode_secret_chains_cause():
    with pytest.raises(EncodingError) as excinfo:
        utils.decode_secret("01234567")
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_encode_secret():
    assert utils.encode_secret(b"12345678901234567890") == "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
    assert utils.encode_secret(b"abc") == "MFRGG==="


def test_pad_secret():
    assert utils.pad_secret("MFRGG") == "MFRGG==="
    assert utils.pad_secret("GEZDGNBV") == "GEZDGNBV"


def test_int_to_bytestring():
    assert utils.int_to_bytestring(0) == b"\x00" * 8
    assert utils.int_to_bytestring(1) == b"\x00\x00\x00\x00\x00\x00\x00\x01"
    assert utils.int_to_bytestring(0x3039) == b"\x00\x00\x00\x00\x00\x00\x30\x39"
    assert utils.int_to_bytestring(2**64 - 1) == b"\xff" * 8


def test_int_to_bytestring_range():
    with pytest.raises(InvalidCounter):
        utils.int_to_bytestring(-1)
    with pytest.raises(InvalidCounter):
        utils.int_to_bytestring(2**64)


def test_dynamic_truncate_rfc4226_example():
    # RFC 4226 section 5.4
    digest = bytes.fromhex("1f8698690e02ca16618550ef7f19da8e945b555a")
    assert utils.dynamic_truncate(digest) == 0x50EF7F19
    assert utils.format_code(utils.dynamic_truncate(digest), 6) == "872921"


def test_dynamic_truncate_clears_sign_bit():
    digest = b"\xff" * 19 + b"\x00"
    assert utils.dynamic_truncate(digest) == 0x7FFFFFFF


def test_dynamic_truncate_max_offset():
    digest = bytes(range(15)) + b"\x81\x02\x03\x04" + b"\x0f"
    assert utils.dynamic_truncate(digest) == 0x01020304


def test_format_code_pads():
    assert utils.format_code(82, 6) == "000082"
    assert utils.format_code(1357872921, 6) == "872921"
    assert utils.format_code(0, 8) == "00000000"


def test_format_code_wide():
    assert utils.format_code(2**31 - 1, 10) == "2147483647"
    assert utils.format_code(1357872921, 12) == "001357872921"


@pytest.mark.parametrize("algorithm,size", [(HashAlgorithm.SHA1, 20), (HashAlgorithm.SHA256, 32), (HashAlgorithm.SHA512, 64)])
def test_hmac_digest_size(algorithm, size):
    assert algorithm.digest_size == size
    assert len(hmac_digest(b"k" * 20, b"\x00" * 8, algorithm)) == size
    assert HashAlgorithm.from_digest_size(size) is algorithm


def test_hmac_digest_rfc2202():
    # RFC 2202 test case 2
    assert hmac_digest(b"Jefe", b"what do ya want for nothing?").hex() == "effcdf6ae5eb2fa2d27416d5f184df9c259a7c79"


def test_from_digest_size_unknown():
    with pytest.raises(ValueError):
        HashAlgorithm.from_digest_size(16)


def test_as_algorithm():
    assert as_algorithm(HashAlgorithm.SHA512) is HashAlgorithm.SHA512
    assert as_algorithm("sha-512") is HashAlgorithm.SHA512
    with pytest.raises(ValueError):
        as_algorithm(None)


def test_strings_equal():
    assert utils.strings_equal("123456", "123456")
    assert not utils.strings_equal("123456", "123457")
    assert not utils.strings_equal("123456", "12345")
    assert utils.strings_equal("１２３４５６", "123456")


def test_build_uri_defaults_omitted():
    uri = utils.build_uri("MFRGG===", "alice", algorithm=HashAlgorithm.SHA1, digits=6, period=30)
    assert uri == "otpauth://totp/alice?secret=MFRGG"


def test_build_uri_rejects_non_string_kwargs():
    with pytest.raises(ValueError):
        utils.build_uri("MFRGG", "alice", color=3)
