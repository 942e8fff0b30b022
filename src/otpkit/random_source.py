import os
from typing import Optional, Protocol

from .exceptions import RandomSourceError


class RandomSource(Protocol):
    """
    Anything that can overwrite a buffer with cryptographically secure bytes.
    """

    def fill(self, buffer: bytearray) -> None:
        """
        Overwrites every byte of ``buffer``. Any exception raised here is
        reported to callers as :class:`RandomSourceError`.
        """


class SystemRandomSource(object):
    """
    The operating system CSPRNG, via :func:`os.urandom`.

    May block briefly on a freshly booted system whose entropy pool is not
    seeded yet.
    """

    def fill(self, buffer: bytearray) -> None:
        buffer[:] = os.urandom(len(buffer))


system_random = SystemRandomSource()


def random_bytes(length: int, source: Optional[RandomSource] = None) -> bytes:
    """
    Draws ``length`` bytes from ``source`` (the system CSPRNG by default).

    :raises RandomSourceError: if the source fails or fills the wrong amount
    """
    if source is None:
        source = system_random
    buffer = bytearray(length)
    try:
        source.fill(buffer)
    except RandomSourceError:
        raise
    except Exception as e:
        raise RandomSourceError("random source could not supply {} bytes".format(length)) from e
    if len(buffer) != length:
        raise RandomSourceError("random source returned {} bytes, expected {}".format(len(buffer), length))
    return bytes(buffer)
