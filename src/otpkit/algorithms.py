import enum
import hashlib
import hmac
from typing import Any, Callable, Union


class HashAlgorithm(enum.Enum):
    """
    Hash functions usable in the OTP HMAC.

    Member values are the names used by otpauth URIs.
    """

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def digest(self) -> Callable[..., Any]:
        return _DIGESTS[self]

    @property
    def digest_size(self) -> int:
        return self.digest().digest_size

    @classmethod
    def from_name(cls, name: str) -> "HashAlgorithm":
        """
        Looks up an algorithm by name, e.g. ``"sha256"`` or ``"SHA-256"``.

        :raises ValueError: if the name is not one of SHA1, SHA256, SHA512
        """
        try:
            return cls(name.upper().replace("-", ""))
        except ValueError:
            raise ValueError("Invalid value for algorithm, must be SHA1, SHA256 or SHA512") from None

    @classmethod
    def from_digest_size(cls, size: int) -> "HashAlgorithm":
        # 20 -> SHA1, 32 -> SHA256, 64 -> SHA512
        for algorithm in cls:
            if algorithm.digest_size == size:
                return algorithm
        raise ValueError("no supported algorithm produces {}-byte digests".format(size))


_DIGESTS = {
    HashAlgorithm.SHA1: hashlib.sha1,
    HashAlgorithm.SHA256: hashlib.sha256,
    HashAlgorithm.SHA512: hashlib.sha512,
}


def as_algorithm(algorithm: Union[HashAlgorithm, str]) -> HashAlgorithm:
    if isinstance(algorithm, HashAlgorithm):
        return algorithm
    if isinstance(algorithm, str):
        return HashAlgorithm.from_name(algorithm)
    raise ValueError("algorithm must be a HashAlgorithm or its name, got {!r}".format(algorithm))


def hmac_digest(key: bytes, msg: bytes, algorithm: HashAlgorithm = HashAlgorithm.SHA1) -> bytes:
    """
    Computes HMAC(key, msg) with the selected hash.

    The result has the hash's native size: 20, 32 or 64 bytes. Key length is
    not checked here; callers validate secrets before they get this far.
    """
    return hmac.new(key, msg, algorithm.digest).digest()
