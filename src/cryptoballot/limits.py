"""Size and charset guards shared by the field decoders.

Limits are carried in a frozen `BallotLimits` value that callers pass to the
decoder explicitly. `DEFAULT_LIMITS` mirrors the sizes the ballot format was
designed around:

- election id: at most 128 bytes
- ballot id: exactly 128 hex characters (SHA-512 hex digest)
- public key: base64 text of at most 1352 bytes
- vote: up to 64 choices of at most 256 bytes each
- tags: up to 64 tags, key <= 64 bytes, value <= 256 bytes
- signature: base64 text of at most 300 bytes
"""

from __future__ import annotations

import string
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

HEX_DIGITS = frozenset(string.hexdigits.encode("ascii"))

CONFIG_PREFIX = "BALLOT_"


@dataclass(frozen=True)
class BallotLimits:
    """Named per-field limits enforced while decoding a ballot."""

    max_election_id_size: int = 128
    ballot_id_size: int = 128
    max_public_key_size: int = 1352
    max_vote_entries: int = 64
    max_vote_entry_size: int = 256
    max_tags: int = 64
    max_tag_key_size: int = 64
    max_tag_value_size: int = 256
    max_signature_size: int = 300
    # room for the "\n\n" / "\n" separators between segments and entries
    separator_overhead: int = 18 + 64 + 64

    @property
    def max_ballot_size(self) -> int:
        """Upper bound for a whole raw ballot, derived from the field limits."""
        return (
            self.max_election_id_size
            + self.max_public_key_size
            + self.ballot_id_size
            + self.max_vote_entries * self.max_vote_entry_size * 2
            + self.max_tags * (self.max_tag_key_size + self.max_tag_value_size + 1)
            + self.max_signature_size
            + self.separator_overhead
        )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "BallotLimits":
        """Build limits from a config mapping such as Flask's ``app.config``.

        Keys are the field names upper-cased and prefixed with ``BALLOT_``,
        e.g. ``BALLOT_MAX_TAGS``. Unknown keys are ignored.
        """
        overrides = {}
        for f in fields(cls):
            key = CONFIG_PREFIX + f.name.upper()
            if key not in mapping:
                continue
            value = mapping[key]
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{key} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"{key} must not be negative")
            overrides[f.name] = value
        return replace(cls(), **overrides)


DEFAULT_LIMITS = BallotLimits()
