from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, unquote, urlparse

from . import utils
from .algorithms import HashAlgorithm as HashAlgorithm
from .exceptions import EncodingError as EncodingError
from .exceptions import InvalidCounter as InvalidCounter
from .exceptions import InvalidDigitCount as InvalidDigitCount
from .exceptions import InvalidSecretLength as InvalidSecretLength
from .exceptions import OTPError as OTPError
from .exceptions import RandomSourceError as RandomSourceError
from .hotp import HOTP as HOTP
from .hotp import generate_hotp as generate_hotp
from .otp import MIN_SECRET_BYTES
from .otp import OTP as OTP
from .random_source import RandomSource, random_bytes
from .totp import TOTP as TOTP
from .totp import generate_totp_at as generate_totp_at
from .totp import generate_totp_history as generate_totp_history
from .totp import generate_totp_now as generate_totp_now

DEFAULT_SECRET_BYTES = 20  # 160 bits, the SHA-1 block recommendation of RFC 4226


def generate_secret(length: int = DEFAULT_SECRET_BYTES, source: Optional[RandomSource] = None) -> str:
    """
    Generates a new shared secret of ``length`` random bytes, base32 encoded.

    The text is ``ceil(length / 5) * 8`` characters long, padding included,
    e.g. 32 characters for the default 20 bytes.

    :param length: secret size in bytes, at least 16
    :param source: random source, the system CSPRNG by default
    :raises InvalidSecretLength: if ``length`` is below 16
    :raises RandomSourceError: if the random source fails
    """
    if length < MIN_SECRET_BYTES:
        raise InvalidSecretLength(length, MIN_SECRET_BYTES)
    return utils.encode_secret(random_bytes(length, source))


def parse_uri(uri: str) -> OTP:
    """
    Parses the provisioning URI for the OTP; works for either TOTP or HOTP.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param uri: the hotp/totp URI to parse
    :returns: OTP object
    :raises ValueError: if the URI is not a usable otpauth URI
    """
    secret = None

    # Data we'll parse to the correct constructor
    otp_data: Dict[str, Any] = {}

    parsed_uri = urlparse(uri)

    if parsed_uri.scheme != "otpauth":
        raise ValueError("Not an otpauth URI")

    # otpauth://totp/Issuer:account?...  -> label is "Issuer:account"
    accountinfo_parts = unquote(parsed_uri.path[1:]).split(":", 1)
    if len(accountinfo_parts) == 1:
        otp_data["name"] = accountinfo_parts[0]
    else:
        otp_data["issuer"] = accountinfo_parts[0]
        otp_data["name"] = accountinfo_parts[1]

    for key, value in parse_qsl(parsed_uri.query):
        if key == "secret":
            secret = value
        elif key == "issuer":
            if otp_data.get("issuer") is not None and otp_data["issuer"] != value:
                raise ValueError("If issuer is specified in both label and parameters, it should be equal.")
            otp_data["issuer"] = value
        elif key == "algorithm":
            otp_data["algorithm"] = HashAlgorithm.from_name(value)
        elif key == "digits":
            otp_data["digits"] = int(value)
        elif key == "period":
            otp_data["interval"] = int(value)
        elif key == "counter":
            otp_data["initial_count"] = int(value)

    if not secret:
        raise ValueError("No secret found in URI")
    secret = utils.pad_secret(secret)

    if parsed_uri.netloc == "totp":
        otp_data.pop("initial_count", None)
        return TOTP(secret, **otp_data)
    elif parsed_uri.netloc == "hotp":
        otp_data.pop("interval", None)
        return HOTP(secret, **otp_data)
    raise ValueError("Not a supported OTP type")
