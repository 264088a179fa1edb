"""Decoders for the individual ballot fields.

Each field type exposes:
- parse(raw, limits): validate one raw segment and return an immutable value
- to_canonical_bytes(): the exact bytes that field contributes to a ballot

Decoders either return a fully valid value or raise a `BallotError`
subclass; nothing is partially constructed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .errors import (
    EncodingError,
    FieldLengthError,
    KeyTooLongError,
    MalformedTagError,
    ValueTooLongError,
)
from .limits import DEFAULT_LIMITS, HEX_DIGITS, BallotLimits

LINE_SEPARATOR = b"\n"
TAG_SEPARATOR = b"="


@dataclass(frozen=True)
class ElectionID:
    value: bytes

    @classmethod
    def parse(cls, raw: bytes, limits: BallotLimits = DEFAULT_LIMITS) -> "ElectionID":
        if len(raw) > limits.max_election_id_size:
            raise FieldLengthError(
                "election_id",
                f"must be at most {limits.max_election_id_size} bytes, got {len(raw)}",
            )
        return cls(bytes(raw))

    def to_canonical_bytes(self) -> bytes:
        return self.value


@dataclass(frozen=True)
class BallotID:
    """Hex encoded SHA-512 of the ballot's base64 public key.

    Only the format is checked here; `PublicKey.digest_hex` can be used to
    check the digest relationship itself.
    """

    value: bytes

    @classmethod
    def parse(cls, raw: bytes, limits: BallotLimits = DEFAULT_LIMITS) -> "BallotID":
        if len(raw) != limits.ballot_id_size:
            raise FieldLengthError(
                "ballot_id",
                f"must be exactly {limits.ballot_id_size} characters long, got {len(raw)}",
            )
        # bytes.fromhex would skip whitespace, so check every byte
        if not all(b in HEX_DIGITS for b in raw):
            raise EncodingError("ballot_id", "must be hex encoded")
        return cls(bytes(raw))

    def to_canonical_bytes(self) -> bytes:
        return self.value

    def matches_digest(self, digest_hex: str) -> bool:
        return self.value.decode("ascii").lower() == digest_hex.lower()


@dataclass(frozen=True)
class Vote:
    """Ordered list of choices; position is the voter's preference rank."""

    choices: Tuple[bytes, ...]

    @classmethod
    def parse(cls, raw: bytes, limits: BallotLimits = DEFAULT_LIMITS) -> "Vote":
        choices = raw.split(LINE_SEPARATOR)
        if len(choices) > limits.max_vote_entries:
            raise FieldLengthError(
                "vote",
                f"at most {limits.max_vote_entries} choices allowed, got {len(choices)}",
            )
        for pos, choice in enumerate(choices):
            if not choice:
                raise FieldLengthError("vote", f"choice {pos} is empty")
            if len(choice) > limits.max_vote_entry_size:
                raise FieldLengthError(
                    "vote",
                    f"choice {pos} must be at most {limits.max_vote_entry_size} bytes",
                )
        return cls(tuple(choices))

    def to_canonical_bytes(self) -> bytes:
        return LINE_SEPARATOR.join(self.choices)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.choices)

    def __len__(self) -> int:
        return len(self.choices)


@dataclass(frozen=True)
class Tag:
    key: bytes
    value: bytes

    @classmethod
    def parse(cls, raw: bytes, limits: BallotLimits = DEFAULT_LIMITS) -> "Tag":
        # split on the first "=" only, values may contain "="
        parts = raw.split(TAG_SEPARATOR, 1)
        if len(parts) != 2:
            raise MalformedTagError("tags", f"missing '=' in tag {raw[:32]!r}")
        key, value = parts
        if len(key) > limits.max_tag_key_size:
            raise KeyTooLongError(
                "tags", f"tag key must be at most {limits.max_tag_key_size} bytes"
            )
        if len(value) > limits.max_tag_value_size:
            raise ValueTooLongError(
                "tags", f"tag value must be at most {limits.max_tag_value_size} bytes"
            )
        return cls(key, value)

    def to_canonical_bytes(self) -> bytes:
        return self.key + TAG_SEPARATOR + self.value


@dataclass(frozen=True)
class TagSet:
    """Tags in input order. Duplicate keys are kept, they are signed as-is."""

    tags: Tuple[Tag, ...]

    @classmethod
    def parse(cls, raw: bytes, limits: BallotLimits = DEFAULT_LIMITS) -> "TagSet":
        lines = raw.split(LINE_SEPARATOR)
        if len(lines) > limits.max_tags:
            raise FieldLengthError(
                "tags", f"at most {limits.max_tags} tags allowed, got {len(lines)}"
            )
        return cls(tuple(Tag.parse(line, limits) for line in lines))

    def to_canonical_bytes(self) -> bytes:
        return LINE_SEPARATOR.join(tag.to_canonical_bytes() for tag in self.tags)

    def get(self, key: bytes) -> Optional[bytes]:
        """Return the value of the first tag with `key`, or None."""
        for tag in self.tags:
            if tag.key == key:
                return tag.value
        return None

    def get_all(self, key: bytes) -> List[bytes]:
        return [tag.value for tag in self.tags if tag.key == key]

    def __iter__(self) -> Iterator[Tag]:
        return iter(self.tags)

    def __len__(self) -> int:
        return len(self.tags)
