"""Public key and signature adapters over pycryptodome.

The ballot format carries both the public key and the signature as base64
text. This module is the only place that touches key material:

- PublicKey: base64 of a PEM public key (RSA or Ed25519)
- Signature: base64 of the raw signature bytes

RSA signatures are PKCS#1 v1.5 over SHA-512, Ed25519 signatures are pure
EdDSA (RFC 8032) over the message itself.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import logging
from dataclasses import dataclass, field
from typing import Any

from Crypto.Hash import SHA512
from Crypto.PublicKey import ECC, RSA
from Crypto.Signature import eddsa, pkcs1_15

from .errors import EncodingError, FieldLengthError, SignatureVerificationError
from .limits import DEFAULT_LIMITS, BallotLimits

logger = logging.getLogger(__name__)

RSA_ALGORITHM = "rsa"
ED25519_ALGORITHM = "ed25519"


def _b64decode(name: str, raw: bytes) -> bytes:
    try:
        return base64.b64decode(raw, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(name, "must be base64 encoded") from e


def _import_key(der_or_pem: bytes) -> Any:
    try:
        return RSA.import_key(der_or_pem)
    except (ValueError, IndexError, TypeError):
        pass
    try:
        key = ECC.import_key(der_or_pem)
    except (ValueError, IndexError, TypeError) as e:
        raise EncodingError("public_key", "not a readable RSA or Ed25519 key") from e
    if key.curve.lower() != ED25519_ALGORITHM:
        raise EncodingError("public_key", f"unsupported curve {key.curve}")
    return key


@dataclass(frozen=True)
class PublicKey:
    text: bytes
    algorithm: str = field(compare=False)
    key: Any = field(compare=False, repr=False)

    @classmethod
    def parse(cls, raw: bytes, limits: BallotLimits = DEFAULT_LIMITS) -> "PublicKey":
        if not raw:
            raise FieldLengthError("public_key", "is empty")
        if len(raw) > limits.max_public_key_size:
            raise FieldLengthError(
                "public_key",
                f"must be at most {limits.max_public_key_size} bytes, got {len(raw)}",
            )
        key = _import_key(_b64decode("public_key", raw))
        if key.has_private():
            raise EncodingError("public_key", "contains private key material")
        algorithm = RSA_ALGORITHM if isinstance(key, RSA.RsaKey) else ED25519_ALGORITHM
        return cls(bytes(raw), algorithm, key)

    def to_canonical_bytes(self) -> bytes:
        return self.text

    def digest_hex(self) -> str:
        """SHA-512 hex digest of the base64 text, the expected ballot id."""
        return hashlib.sha512(self.text).hexdigest()


@dataclass(frozen=True)
class Signature:
    text: bytes
    raw: bytes

    @classmethod
    def parse(cls, raw: bytes, limits: BallotLimits = DEFAULT_LIMITS) -> "Signature":
        if len(raw) > limits.max_signature_size:
            raise FieldLengthError(
                "signature",
                f"must be at most {limits.max_signature_size} bytes, got {len(raw)}",
            )
        decoded = _b64decode("signature", raw)
        if not decoded:
            raise FieldLengthError("signature", "is empty")
        return cls(bytes(raw), decoded)

    def to_canonical_bytes(self) -> bytes:
        return self.text

    def verify(self, public_key: PublicKey, message: bytes) -> None:
        """Check this signature over `message`.

        Raises SignatureVerificationError on mismatch; returns None otherwise.
        """
        try:
            if public_key.algorithm == RSA_ALGORITHM:
                pkcs1_15.new(public_key.key).verify(SHA512.new(message), self.raw)
            else:
                eddsa.new(public_key.key, "rfc8032").verify(message, self.raw)
        except (ValueError, TypeError) as e:
            logger.debug("signature check failed for %s key: %s", public_key.algorithm, e)
            raise SignatureVerificationError(
                "signature", "does not match the ballot contents"
            ) from e
