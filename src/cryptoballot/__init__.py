"""cryptoballot - decode, canonicalize and verify signed plain-text ballots.

The entry point is `decode_ballot`, which returns a `Ballot` only when every
field is well formed and the signature verifies.
"""

from .ballot import Ballot, decode_ballot, encode_ballot
from .crypto import PublicKey, Signature
from .errors import (
    BallotError,
    BallotIDMismatchError,
    BallotTooLargeError,
    EncodingError,
    FieldLengthError,
    KeyTooLongError,
    MalformedTagError,
    SignatureVerificationError,
    StructuralError,
    ValueTooLongError,
)
from .fields import BallotID, ElectionID, Tag, TagSet, Vote
from .limits import DEFAULT_LIMITS, BallotLimits

__all__ = [
    "Ballot",
    "BallotError",
    "BallotID",
    "BallotIDMismatchError",
    "BallotLimits",
    "BallotTooLargeError",
    "DEFAULT_LIMITS",
    "ElectionID",
    "EncodingError",
    "FieldLengthError",
    "KeyTooLongError",
    "MalformedTagError",
    "PublicKey",
    "Signature",
    "SignatureVerificationError",
    "StructuralError",
    "Tag",
    "TagSet",
    "ValueTooLongError",
    "Vote",
    "decode_ballot",
    "encode_ballot",
]
