from typing import Optional, Union

from . import utils
from .algorithms import HashAlgorithm
from .otp import DEFAULT_DIGITS, OTP


class HOTP(OTP):
    """
    Handler for HMAC-based OTP counters.
    """

    def __init__(
        self,
        s: str,
        digits: int = DEFAULT_DIGITS,
        algorithm: Union[HashAlgorithm, str] = HashAlgorithm.SHA1,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        initial_count: int = 0,
    ) -> None:
        """
        :param s: secret in base32 format
        :param digits: number of integers in the OTP, at least 6
        :param algorithm: hash used in the HMAC
        :param name: account name
        :param issuer: issuer
        :param initial_count: starting HMAC counter value, defaults to 0
        """
        self.initial_count = initial_count
        super().__init__(s=s, digits=digits, algorithm=algorithm, name=name, issuer=issuer)

    def at(self, count: int) -> str:
        """
        Generates the OTP for the given count.

        :param count: the OTP HMAC counter
        :returns: OTP
        """
        return self.generate_otp(self.initial_count + count)

    def verify(self, otp: str, counter: int) -> bool:
        """
        Verifies the OTP passed in against the OTP for ``counter``.

        Keeping the counter in sync and refusing reused codes is up to the
        caller.

        :param otp: the OTP to check against
        :param counter: the OTP HMAC counter
        """
        return utils.strings_equal(str(otp), self.at(counter))

    def provisioning_uri(
        self,
        name: Optional[str] = None,
        initial_count: Optional[int] = None,
        issuer_name: Optional[str] = None,
        **kwargs,
    ) -> str:
        """
        Returns the provisioning URI for the OTP. This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.

        :param name: name of the user account
        :param initial_count: starting HMAC counter value, defaults to
            the handler's own
        :param issuer_name: the name of the OTP issuer
        :returns: provisioning URI
        """
        return utils.build_uri(
            self.secret,
            name=name or self.name,
            initial_count=self.initial_count if initial_count is None else initial_count,
            issuer=issuer_name or self.issuer,
            algorithm=self.algorithm,
            digits=self.digits,
            **kwargs,
        )


def generate_hotp(
    secret: str,
    counter: int,
    algorithm: Union[HashAlgorithm, str] = HashAlgorithm.SHA1,
    digits: int = DEFAULT_DIGITS,
) -> str:
    """
    HMAC-based one-time password (RFC 4226) for ``counter``.

    The result is a string; leading zeros are part of the code.

    >>> generate_hotp("GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ", 0)
    '755224'

    :raises InvalidDigitCount: if ``digits`` is below 6
    :raises EncodingError: if ``secret`` is not valid base32
    :raises InvalidSecretLength: if ``secret`` decodes to fewer than 16 bytes
    :raises InvalidCounter: if ``counter`` is negative or wider than 64 bits
    """
    return HOTP(secret, digits=digits, algorithm=algorithm).at(counter)
