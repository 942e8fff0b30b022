from typing import Optional, Union

from . import utils
from .algorithms import HashAlgorithm, as_algorithm, hmac_digest
from .exceptions import InvalidDigitCount, InvalidSecretLength

DEFAULT_DIGITS = 6
MIN_DIGITS = 6
MIN_SECRET_BYTES = 16  # 128 bits, RFC 4226 section 4 R6


def secret_key(s: str) -> bytes:
    """
    Decodes a base32 secret and checks it is long enough to be used as a key.

    :raises EncodingError: if ``s`` is not valid base32
    :raises InvalidSecretLength: if the key is shorter than 128 bits
    """
    key = utils.decode_secret(s)
    if len(key) < MIN_SECRET_BYTES:
        raise InvalidSecretLength(len(key), MIN_SECRET_BYTES)
    return key


class OTP(object):
    """
    Base class for OTP handlers.

    Holds the validated secret and the output settings. Subclasses decide
    which moving factor is passed to :meth:`generate_otp`.
    """

    def __init__(
        self,
        s: str,
        digits: int = DEFAULT_DIGITS,
        algorithm: Union[HashAlgorithm, str] = HashAlgorithm.SHA1,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
    ) -> None:
        """
        :param s: secret in base32 format
        :param digits: number of integers in the OTP, at least 6
        :param algorithm: hash used in the HMAC, SHA1 unless told otherwise
        :param name: account name
        :param issuer: issuer
        :raises InvalidDigitCount: if ``digits`` is below 6
        :raises EncodingError: if ``s`` is not valid base32
        :raises InvalidSecretLength: if ``s`` decodes to fewer than 16 bytes
        """
        if digits < MIN_DIGITS:
            raise InvalidDigitCount(digits, MIN_DIGITS)
        self.digits = digits
        self.algorithm = as_algorithm(algorithm)
        self._key = secret_key(s)
        self.secret = s
        self.name = name or "Secret"
        self.issuer = issuer

    def generate_otp(self, input: int) -> str:
        """
        :param input: the HMAC counter value to use as the OTP input.
            Usually either the counter, or the computed integer based on the Unix timestamp
        """
        # Implements RFC 4226:
        #   counter -> 8 bytes -> HMAC(key, bytes) -> 31 bit int -> mod 10^digits
        hmac_hash = hmac_digest(self._key, utils.int_to_bytestring(input), self.algorithm)
        return utils.format_code(utils.dynamic_truncate(hmac_hash), self.digits)

    def byte_secret(self) -> bytes:
        return self._key
