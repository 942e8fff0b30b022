"""
Exceptions raised by otpkit.

Every validation failure is raised immediately to the caller. Validation
errors also derive from :class:`ValueError` so callers catching that keep
working.
"""


class OTPError(Exception):
    """Base class for all otpkit errors."""


class InvalidSecretLength(OTPError, ValueError):
    """
    A secret is shorter than the 128 bit minimum.

    Raised for decoded shared secrets and for the requested size of a newly
    generated secret.
    """

    def __init__(self, length: int, minimum: int) -> None:
        self.length = length
        self.minimum = minimum
        super().__init__(
            "secret must be at least {} bytes ({} bits), got {} bytes".format(minimum, minimum * 8, length)
        )


class InvalidDigitCount(OTPError, ValueError):
    """The requested number of OTP digits is below the minimum."""

    def __init__(self, digits: int, minimum: int) -> None:
        self.digits = digits
        self.minimum = minimum
        super().__init__("digits must be at least {}, got {}".format(minimum, digits))


class EncodingError(OTPError, ValueError):
    """The secret text is not valid base32."""


class InvalidCounter(OTPError, ValueError):
    """The moving factor does not fit in an unsigned 64 bit integer."""


class RandomSourceError(OTPError, RuntimeError):
    """The random source could not supply the requested bytes."""
