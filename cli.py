"""Small CLI for checking ballot files and talking to the ballot server.

Usage examples:
    python cli.py check ballot.txt
    python cli.py submit ballot.txt
    python cli.py verify ballot.txt
    python cli.py list
"""

import argparse
import json
import logging
import sys

import requests

from cryptoballot import BallotError, decode_ballot


BASE = "http://127.0.0.1:5000"


def _read(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def check(path: str, check_id: bool) -> int:
    try:
        ballot = decode_ballot(_read(path), check_ballot_id=check_id)
    except BallotError as e:
        print(f"invalid ballot: {e} [{e.kind}]", file=sys.stderr)
        return 1
    print(json.dumps(ballot.to_dict(), indent=2))
    return 0


def submit(base: str, path: str) -> int:
    r = requests.post(f"{base}/ballots", data=_read(path), timeout=2)
    print(r.json())
    return 0 if r.status_code == 201 else 1


def verify(base: str, path: str) -> int:
    r = requests.post(f"{base}/verify", data=_read(path), timeout=2)
    body = r.json()
    print(body)
    return 0 if body.get("ok") else 1


def list_ballots(base: str) -> int:
    r = requests.get(f"{base}/ballots", timeout=2)
    print(r.json())
    return 0


def main(argv=None) -> int:
    p = argparse.ArgumentParser()
    p.add_argument("--base", default=BASE)
    p.add_argument("-v", "--verbose", action="store_true")
    sub = p.add_subparsers(dest="cmd")
    c = sub.add_parser("check")
    c.add_argument("file")
    c.add_argument("--check-id", action="store_true")
    s = sub.add_parser("submit")
    s.add_argument("file")
    v = sub.add_parser("verify")
    v.add_argument("file")
    sub.add_parser("list")
    args = p.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    if args.cmd == "check":
        return check(args.file, args.check_id)
    if args.cmd == "submit":
        return submit(args.base, args.file)
    if args.cmd == "verify":
        return verify(args.base, args.file)
    if args.cmd == "list":
        return list_ballots(args.base)
    p.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
