import pytest

from cryptoballot import DEFAULT_LIMITS, BallotLimits


def test_default_aggregate_size():
    expected = (
        128 + 1352 + 128 + (64 * 256 * 2) + (64 * (64 + 256 + 1)) + (128 + 172) + (18 + 64 + 64)
    )
    assert DEFAULT_LIMITS.max_ballot_size == expected


def test_aggregate_follows_field_limits():
    smaller = BallotLimits(max_tags=0)
    assert DEFAULT_LIMITS.max_ballot_size - smaller.max_ballot_size == 64 * (64 + 256 + 1)


def test_from_mapping_reads_prefixed_keys_only():
    limits = BallotLimits.from_mapping(
        {"BALLOT_MAX_TAGS": 3, "BALLOT_CHECK_ID": True, "DEBUG": True, "max_tags": 9}
    )
    assert limits.max_tags == 3
    assert limits.max_vote_entries == DEFAULT_LIMITS.max_vote_entries


def test_from_mapping_empty_gives_defaults():
    assert BallotLimits.from_mapping({}) == DEFAULT_LIMITS


@pytest.mark.parametrize("value", ["10", 1.5, -1, True])
def test_from_mapping_rejects_bad_values(value):
    with pytest.raises(ValueError):
        BallotLimits.from_mapping({"BALLOT_MAX_SIGNATURE_SIZE": value})
