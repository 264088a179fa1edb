import base64
import hashlib
import os
import sys

import pytest
from Crypto.Hash import SHA512
from Crypto.PublicKey import ECC, RSA
from Crypto.Signature import eddsa, pkcs1_15


# Ensure repository src directory (and cli.py at the root) are on sys.path for tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC = os.path.join(ROOT, "src")
for path in (SRC, ROOT):
    if path not in sys.path:
        sys.path.insert(0, path)


def public_key_text(key) -> bytes:
    """Base64 of the PEM public key, as carried in a ballot."""
    if isinstance(key, RSA.RsaKey):
        pem = key.publickey().export_key(format="PEM")
    else:
        pem = key.public_key().export_key(format="PEM")
    if isinstance(pem, str):
        pem = pem.encode("ascii")
    return base64.b64encode(pem)


def sign(key, message: bytes) -> bytes:
    if isinstance(key, RSA.RsaKey):
        raw = pkcs1_15.new(key).sign(SHA512.new(message))
    else:
        raw = eddsa.new(key, "rfc8032").sign(message)
    return base64.b64encode(raw)


@pytest.fixture(scope="session")
def ed25519_key():
    return ECC.generate(curve="ed25519")


@pytest.fixture(scope="session")
def rsa_key():
    # 1024 bits keeps the base64 signature under the 300 byte limit
    return RSA.generate(1024)


@pytest.fixture
def make_ballot(ed25519_key):
    """Build a signed raw ballot.

    The signed message is assembled here independently of the encoder: five
    positions joined by blank lines, tags rendered as an empty string when
    the ballot has none. `signed_message` overrides what gets signed.
    """

    def _make(
        election_id=b"E1",
        vote=(b"voteA", b"voteB"),
        tags=None,
        key=None,
        ballot_id=None,
        signed_message=None,
    ):
        if key is None:
            key = ed25519_key
        pub = public_key_text(key)
        if ballot_id is None:
            ballot_id = hashlib.sha512(pub).hexdigest().encode("ascii")
        vote_seg = b"\n".join(vote)
        tag_seg = b"\n".join(k + b"=" + v for k, v in tags) if tags is not None else b""
        message = b"\n\n".join([election_id, ballot_id, pub, vote_seg, tag_seg])
        sig = sign(key, message if signed_message is None else signed_message)
        segments = [election_id, ballot_id, pub, vote_seg]
        if tags is not None:
            segments.append(tag_seg)
        segments.append(sig)
        return b"\n\n".join(segments)

    return _make
