import calendar
import datetime
import math
import time
from typing import List, Optional, Tuple, Union

from . import utils
from .algorithms import HashAlgorithm
from .otp import DEFAULT_DIGITS, OTP

STEP_SECONDS = 30

Timestamp = Union[int, float, datetime.datetime]


def _now() -> float:
    return time.time()


def unix_seconds(for_time: Timestamp) -> int:
    """
    Whole Unix seconds for a timestamp.

    Aware datetimes are converted to UTC. Naive datetimes are read as UTC
    already; callers holding local time must normalize it first.
    """
    if isinstance(for_time, datetime.datetime):
        return calendar.timegm(for_time.utctimetuple())
    return math.floor(for_time)


def timecode(for_time: Timestamp, interval: int = STEP_SECONDS) -> int:
    """The TOTP moving factor: floor(unix / interval)."""
    return unix_seconds(for_time) // interval


def remaining_seconds(for_time: Timestamp, interval: int = STEP_SECONDS) -> int:
    """Seconds until the step containing ``for_time`` ends, in [1, interval]."""
    return interval - unix_seconds(for_time) % interval


class TOTP(OTP):
    """
    Handler for time-based OTP counters.
    """

    def __init__(
        self,
        s: str,
        digits: int = DEFAULT_DIGITS,
        algorithm: Union[HashAlgorithm, str] = HashAlgorithm.SHA1,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        interval: int = STEP_SECONDS,
    ) -> None:
        """
        :param s: secret in base32 format
        :param digits: number of integers in the OTP, at least 6
        :param algorithm: hash used in the HMAC
        :param name: account name
        :param issuer: issuer
        :param interval: the time interval in seconds for OTP. This defaults to 30.
        """
        if not isinstance(interval, int) or interval <= 0:
            raise ValueError("interval must be a positive number of seconds, got {!r}".format(interval))
        self.interval = interval
        super().__init__(s=s, digits=digits, algorithm=algorithm, name=name, issuer=issuer)

    def at(self, for_time: Timestamp, counter_offset: int = 0) -> str:
        """
        Accepts either a Unix timestamp integer or a datetime object.

        :param for_time: the time to generate an OTP for
        :param counter_offset: the amount of ticks to add to the time counter
        :returns: OTP value
        """
        return self.generate_otp(self.timecode(for_time) + counter_offset)

    def now(self) -> str:
        """
        Generate the current time OTP

        :returns: OTP value
        """
        return self.at(_now())

    def timecode(self, for_time: Timestamp) -> int:
        return timecode(for_time, self.interval)

    def remaining(self, for_time: Optional[Timestamp] = None) -> int:
        """Seconds left before the OTP for ``for_time`` (default now) rolls over."""
        if for_time is None:
            for_time = _now()
        return remaining_seconds(for_time, self.interval)

    def history(self, length: int, for_time: Optional[Timestamp] = None) -> List[str]:
        """
        OTPs for the current step and the ``length - 1`` steps before it,
        newest first. A non-positive ``length`` gives an empty list.

        :raises InvalidCounter: if the history reaches back before counter 0
        """
        if for_time is None:
            for_time = _now()
        counter = self.timecode(for_time)
        return [self.generate_otp(counter - i) for i in range(length)]

    def verify(self, otp: str, for_time: Optional[Timestamp] = None, valid_window: int = 0) -> bool:
        """
        Verifies the OTP passed in against the current time OTP.

        :param otp: the OTP to check against
        :param for_time: Time to check OTP at (defaults to now)
        :param valid_window: extends the validity to this many counter ticks before and after the current one
        :returns: True if verification succeeded, False otherwise
        """
        if for_time is None:
            for_time = _now()
        counter = self.timecode(for_time)

        for i in range(-valid_window, valid_window + 1):
            # near the epoch a wide window reaches below counter 0
            if counter + i < 0:
                continue
            if utils.strings_equal(str(otp), self.generate_otp(counter + i)):
                return True
        return False

    def provisioning_uri(self, name: Optional[str] = None, issuer_name: Optional[str] = None, **kwargs) -> str:
        """
        Returns the provisioning URI for the OTP. This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.

        :param name: name of the user account
        :param issuer_name: the name of the OTP issuer
        :returns: provisioning URI
        """
        return utils.build_uri(
            self.secret,
            name=name or self.name,
            issuer=issuer_name or self.issuer,
            algorithm=self.algorithm,
            digits=self.digits,
            period=self.interval,
            **kwargs,
        )


def generate_totp_at(
    secret: str,
    for_time: Timestamp,
    algorithm: Union[HashAlgorithm, str] = HashAlgorithm.SHA1,
    digits: int = DEFAULT_DIGITS,
) -> Tuple[str, int]:
    """
    Time-based one-time password (RFC 6238) for ``for_time``.

    :returns: (OTP, seconds the OTP stays valid)
    """
    totp = TOTP(secret, digits=digits, algorithm=algorithm)
    return totp.at(for_time), totp.remaining(for_time)


def generate_totp_now(
    secret: str,
    algorithm: Union[HashAlgorithm, str] = HashAlgorithm.SHA1,
    digits: int = DEFAULT_DIGITS,
) -> Tuple[str, int]:
    """Same as :func:`generate_totp_at` for the current time."""
    return generate_totp_at(secret, _now(), algorithm=algorithm, digits=digits)


def generate_totp_history(
    secret: str,
    algorithm: Union[HashAlgorithm, str] = HashAlgorithm.SHA1,
    digits: int = DEFAULT_DIGITS,
    history_length: int = 0,
    for_time: Optional[Timestamp] = None,
) -> Tuple[List[str], int]:
    """
    The current TOTP followed by the ones for earlier steps.

    Element ``i`` is the OTP for ``counter - i``. The clock is read once, so
    the list and the remaining seconds always describe the same step.

    :returns: (OTPs newest first, seconds the current OTP stays valid)
    """
    if for_time is None:
        for_time = _now()
    totp = TOTP(secret, digits=digits, algorithm=algorithm)
    return totp.history(history_length, for_time), totp.remaining(for_time)
