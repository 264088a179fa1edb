"""Ballot decoding, canonical encoding and signature verification.

A raw ballot is plain text with segments separated by a blank line:

    <election id>

    <ballot id>

    <public key>

    <vote, one choice per line>

    [<tags, one key=value per line>]

    <signature>

The tag segment is optional; its presence is decided only by whether the blob
splits into 5 or 6 segments. The signature covers every segment before it,
re-encoded canonically. When a ballot has no tags the signed message still
carries an empty tag position, i.e. it ends with the separator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .crypto import PublicKey, Signature
from .errors import (
    BallotError,
    BallotIDMismatchError,
    BallotTooLargeError,
    StructuralError,
)
from .fields import BallotID, ElectionID, TagSet, Vote
from .limits import DEFAULT_LIMITS, BallotLimits

logger = logging.getLogger(__name__)

SEGMENT_SEPARATOR = b"\n\n"
SEGMENTS_WITHOUT_TAGS = 5
SEGMENTS_WITH_TAGS = 6

RawBallot = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class Ballot:
    election_id: ElectionID
    ballot_id: BallotID
    public_key: PublicKey
    vote: Vote
    tag_set: Optional[TagSet]
    signature: Signature

    @property
    def has_tags(self) -> bool:
        return self.tag_set is not None

    def canonical_bytes(self) -> bytes:
        """The message the signature is computed over."""
        return encode_ballot(self, include_signature=False)

    def to_bytes(self) -> bytes:
        """Full serialization, accepted back by `decode_ballot`."""
        return encode_ballot(self, include_signature=True)

    def verify(self) -> None:
        """Raise SignatureVerificationError unless the signature matches."""
        self.signature.verify(self.public_key, self.canonical_bytes())

    def to_dict(self) -> Dict[str, Any]:
        """JSON friendly summary; opaque bytes are shown as UTF-8 text."""
        tags: Optional[List[List[str]]] = None
        if self.tag_set is not None:
            tags = [[_text(t.key), _text(t.value)] for t in self.tag_set]
        return {
            "election_id": _text(self.election_id.value),
            "ballot_id": _text(self.ballot_id.value),
            "public_key": _text(self.public_key.text),
            "key_algorithm": self.public_key.algorithm,
            "vote": [_text(c) for c in self.vote],
            "tags": tags,
            "signature": _text(self.signature.text),
        }


def _text(value: bytes) -> str:
    return value.decode("utf-8", errors="replace")


def encode_ballot(ballot: Ballot, include_signature: bool) -> bytes:
    """Canonical encoder.

    include_signature=False gives the signable message: five positions,
    with an absent tag set rendered as an empty segment.
    include_signature=True gives the wire form: the tag segment is written
    only when tags are present, followed by the signature.
    """
    segments = [
        ballot.election_id.to_canonical_bytes(),
        ballot.ballot_id.to_canonical_bytes(),
        ballot.public_key.to_canonical_bytes(),
        ballot.vote.to_canonical_bytes(),
    ]
    if ballot.tag_set is not None:
        segments.append(ballot.tag_set.to_canonical_bytes())
    elif not include_signature:
        segments.append(b"")
    if include_signature:
        segments.append(ballot.signature.to_canonical_bytes())
    return SEGMENT_SEPARATOR.join(segments)


def _split_segments(raw: bytes, limits: BallotLimits) -> List[bytes]:
    if len(raw) > limits.max_ballot_size:
        raise BallotTooLargeError(
            "ballot", f"must be at most {limits.max_ballot_size} bytes, got {len(raw)}"
        )
    segments = raw.split(SEGMENT_SEPARATOR)
    if len(segments) not in (SEGMENTS_WITHOUT_TAGS, SEGMENTS_WITH_TAGS):
        raise StructuralError(
            "ballot",
            f"expected {SEGMENTS_WITHOUT_TAGS} or {SEGMENTS_WITH_TAGS} segments "
            f"separated by blank lines, got {len(segments)}",
        )
    return segments


def decode_ballot(
    raw: RawBallot,
    limits: BallotLimits = DEFAULT_LIMITS,
    check_ballot_id: bool = False,
) -> Ballot:
    """Decode and verify a raw ballot.

    Fields are decoded in order and the first failure is raised. A ballot is
    only returned when every field is valid and its signature verifies.
    With check_ballot_id=True the ballot id must also equal the SHA-512 hex
    digest of the public key text.
    """
    if not isinstance(raw, (bytes, bytearray, memoryview)):
        raise StructuralError("ballot", f"expected bytes, got {type(raw).__name__}")
    raw = bytes(raw)

    try:
        segments = _split_segments(raw, limits)
        has_tags = len(segments) == SEGMENTS_WITH_TAGS

        election_id = ElectionID.parse(segments[0], limits)
        ballot_id = BallotID.parse(segments[1], limits)
        public_key = PublicKey.parse(segments[2], limits)
        vote = Vote.parse(segments[3], limits)
        tag_set = TagSet.parse(segments[4], limits) if has_tags else None
        signature = Signature.parse(segments[-1], limits)

        if check_ballot_id and not ballot_id.matches_digest(public_key.digest_hex()):
            raise BallotIDMismatchError(
                "ballot_id", "is not the SHA-512 digest of the public key"
            )

        ballot = Ballot(election_id, ballot_id, public_key, vote, tag_set, signature)
        ballot.verify()
    except BallotError as e:
        logger.info("rejected ballot (%s): %s", e.kind, e)
        raise

    logger.debug(
        "decoded ballot %s for election %r (%d choices, %d tags)",
        _text(ballot_id.value[:16]),
        _text(election_id.value),
        len(vote),
        len(tag_set) if tag_set is not None else 0,
    )
    return ballot
