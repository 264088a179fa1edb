"""Minimal Flask API around the ballot decoder.

Endpoints:
- POST /ballots -> body is a raw ballot; decoded, verified and kept in memory
- GET /ballots -> list accepted ballots
- GET /ballots/<ballot_id> -> wire form of the latest ballot with that id
- POST /verify -> decode and verify a raw ballot without keeping it

Limits are read from app.config (BALLOT_MAX_TAGS, BALLOT_MAX_VOTE_ENTRIES, ...)
and BALLOT_CHECK_ID enables the ballot id / public key digest check.
"""

import logging
from typing import Any, Dict

from flask import Flask, Response, jsonify, request

from .ballot import decode_ballot
from .errors import BallotError
from .limits import BallotLimits

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.setdefault("BALLOT_CHECK_ID", False)

# In-memory store of accepted ballots, in submission order
_STATE: Dict[str, Any] = {
    "ballots": [],
}


def _decode_request():
    limits = BallotLimits.from_mapping(app.config)
    return decode_ballot(
        request.get_data(), limits, check_ballot_id=bool(app.config["BALLOT_CHECK_ID"])
    )


def _error_body(e: BallotError) -> Dict[str, str]:
    return {"error": e.message, "field": e.field, "kind": e.kind}


@app.route("/ballots", methods=["POST"])
def submit_ballot():
    """Accept a raw ballot. Returns 201 with its summary or 400 with the cause."""
    try:
        ballot = _decode_request()
    except BallotError as e:
        return jsonify(_error_body(e)), 400
    _STATE["ballots"].append(ballot)
    logger.info("stored ballot %s", ballot.ballot_id.value[:16].decode("ascii"))
    return jsonify({"status": "accepted", "ballot": ballot.to_dict()}), 201


@app.route("/ballots", methods=["GET"])
def list_ballots():
    return jsonify({"ballots": [b.to_dict() for b in _STATE["ballots"]]})


@app.route("/ballots/<ballot_id>", methods=["GET"])
def get_ballot(ballot_id: str):
    wanted = ballot_id.lower()
    for ballot in reversed(_STATE["ballots"]):
        if ballot.ballot_id.value.decode("ascii").lower() == wanted:
            return Response(ballot.to_bytes(), mimetype="text/plain")
    return jsonify({"error": "unknown ballot id"}), 404


@app.route("/verify", methods=["POST"])
def verify_ballot():
    try:
        ballot = _decode_request()
    except BallotError as e:
        return jsonify({"ok": False, **_error_body(e)})
    return jsonify({"ok": True, "ballot": ballot.to_dict()})


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True)
