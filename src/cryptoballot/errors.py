"""Errors raised while decoding or verifying a ballot.

Every error names the field it was raised for so callers can report which
part of a ballot was rejected and why.
"""

from __future__ import annotations


class BallotError(ValueError):
    """Base error for a ballot that failed decoding or verification."""

    kind = "ballot_error"

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class StructuralError(BallotError):
    """Raised when the blob does not split into 5 or 6 segments."""

    kind = "structural"


class FieldLengthError(BallotError):
    """Raised when a field is longer (or shorter) than allowed."""

    kind = "field_length"


class BallotTooLargeError(FieldLengthError):
    kind = "ballot_too_large"


class KeyTooLongError(FieldLengthError):
    kind = "key_too_long"


class ValueTooLongError(FieldLengthError):
    kind = "value_too_long"


class EncodingError(BallotError):
    """Raised for bad hex, bad base64 or an unreadable key/signature."""

    kind = "encoding"


class MalformedTagError(BallotError):
    kind = "malformed_tag"


class SignatureVerificationError(BallotError):
    kind = "signature_verification"


class BallotIDMismatchError(BallotError):
    """Raised when the ballot id is not the digest of the public key."""

    kind = "ballot_id_mismatch"
