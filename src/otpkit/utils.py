import base64
import struct
import unicodedata
from hmac import compare_digest
from typing import Dict, Optional, Union
from urllib.parse import quote, urlencode, urlparse

from .algorithms import HashAlgorithm
from .exceptions import EncodingError, InvalidCounter

MAX_COUNTER = 2**64 - 1


def decode_secret(secret: str) -> bytes:
    """
    Decodes a base32 secret into the raw HMAC key.

    Lowercase input is accepted. Padding is not restored: a secret whose
    length is not a multiple of 8 is rejected.

    :param secret: base32 encoded secret
    :returns: key bytes
    :raises EncodingError: on invalid characters or incorrect padding
    """
    try:
        return base64.b32decode(secret, casefold=True)
    except (ValueError, TypeError) as e:
        # binascii.Error is a ValueError; non-ASCII text raises ValueError too
        raise EncodingError("Invalid base32 secret: {}".format(e)) from e


def encode_secret(key: bytes) -> str:
    """
    Base32 encodes raw key bytes, uppercase with standard padding.

    "12345678901234567890" -> "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
    """
    return base64.b32encode(key).decode("ascii")


def pad_secret(secret: str) -> str:
    # otpauth URIs drop the trailing "=" padding; put it back before decoding
    missing_padding = len(secret) % 8
    if missing_padding != 0:
        secret += "=" * (8 - missing_padding)
    return secret


def int_to_bytestring(i: int) -> bytes:
    """
    Turns a counter into the 8 byte big-endian message fed to the HMAC.

    :raises InvalidCounter: if ``i`` does not fit in an unsigned 64 bit integer
    """
    if i < 0 or i > MAX_COUNTER:
        raise InvalidCounter("counter must be between 0 and 2**64 - 1, got {}".format(i))
    return struct.pack(">Q", i)


def dynamic_truncate(hmac_hash: bytes) -> int:
    """
    RFC 4226 section 5.3 dynamic truncation.

    The low nibble of the last byte picks an offset in 0..15, the four bytes
    starting there are read big-endian and the top bit is cleared, giving a
    value in [0, 2**31 - 1]. Every supported digest is at least 20 bytes long,
    so offset + 4 never runs past the end.
    """
    offset = hmac_hash[-1] & 0xF
    # digest ... 50 ef 7f 19 ... 5a
    #            ^offset=0xa      ^last byte
    # (0x50 & 0x7f) << 24 | 0xef << 16 | 0x7f << 8 | 0x19 = 0x50ef7f19
    return (
        (hmac_hash[offset] & 0x7F) << 24
        | (hmac_hash[offset + 1] & 0xFF) << 16
        | (hmac_hash[offset + 2] & 0xFF) << 8
        | (hmac_hash[offset + 3] & 0xFF)
    )


def format_code(code: int, digits: int) -> str:
    """
    Reduces a truncated value to ``digits`` decimal characters, keeping
    leading zeros.

    With more than 10 digits the modulo never changes a 31 bit value and the
    result is only zero padded.
    """
    return str(code % 10**digits).zfill(digits)


def build_uri(
    secret: str,
    name: str,
    initial_count: Optional[int] = None,
    issuer: Optional[str] = None,
    algorithm: Optional[HashAlgorithm] = None,
    digits: Optional[int] = None,
    period: Optional[int] = None,
    **kwargs,
) -> str:
    """
    Returns the provisioning URI for the OTP; works for either TOTP or HOTP.

    This can then be encoded in a QR Code and used to provision an
    authenticator app.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param secret: the hotp/totp secret used to generate the URI
    :param name: name of the account
    :param initial_count: starting counter value. If None, the OTP type
        will be assumed as TOTP.
    :param issuer: the name of the OTP issuer; this will be the
        organization title of the OTP entry in Authenticator
    :param algorithm: the algorithm used in the OTP generation
    :param digits: the length of the OTP generated code
    :param period: the number of seconds the OTP generator is set to
        expire every code
    :param kwargs: other query string parameters to include in the URI
    :returns: provisioning uri
    """
    # initial_count may be 0 as a valid param
    otp_type = "hotp" if initial_count is not None else "totp"

    # the Key URI format carries the secret without padding
    url_args: Dict[str, Union[int, str]] = {"secret": secret.rstrip("=")}

    label = quote(name)
    if issuer is not None:
        label = quote(issuer) + ":" + label
        url_args["issuer"] = issuer

    if initial_count is not None:
        url_args["counter"] = initial_count
    # only non-defaults go in, to keep the URI (and QR code) short
    if algorithm is not None and algorithm is not HashAlgorithm.SHA1:
        url_args["algorithm"] = algorithm.value
    if digits is not None and digits != 6:
        url_args["digits"] = digits
    if period is not None and period != 30:
        url_args["period"] = period

    for k, v in kwargs.items():
        if not isinstance(v, str):
            raise ValueError("All otpauth uri parameters must be strings")
        if k == "image":
            image_uri = urlparse(v)
            if image_uri.scheme != "https" or not image_uri.netloc or not image_uri.path:
                raise ValueError("{} is not a valid url".format(v))
        url_args[k] = v

    return "otpauth://{0}/{1}?{2}".format(otp_type, label, urlencode(url_args).replace("+", "%20"))


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Both sides are NFKC normalized first, so fullwidth digits typed on some
    keyboards compare equal to ASCII ones. The length of the strings is
    still revealed.
    """
    s1 = unicodedata.normalize("NFKC", s1)
    s2 = unicodedata.normalize("NFKC", s2)
    return compare_digest(s1.encode("utf-8"), s2.encode("utf-8"))
