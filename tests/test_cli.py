import json

import cli


def test_check_valid_ballot(tmp_path, make_ballot, capsys):
    path = tmp_path / "ballot.txt"
    path.write_bytes(make_ballot(tags=[(b"k", b"v")]))
    assert cli.main(["check", str(path)]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["vote"] == ["voteA", "voteB"]


def test_check_invalid_ballot(tmp_path, make_ballot, capsys):
    path = tmp_path / "ballot.txt"
    path.write_bytes(make_ballot().replace(b"voteB", b"voteX"))
    assert cli.main(["check", str(path)]) == 1
    assert "signature_verification" in capsys.readouterr().err


def test_check_id_flag(tmp_path, make_ballot):
    path = tmp_path / "ballot.txt"
    path.write_bytes(make_ballot(ballot_id=b"ab" * 64))
    assert cli.main(["check", str(path)]) == 0
    assert cli.main(["check", "--check-id", str(path)]) == 1


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 2
    assert "usage" in capsys.readouterr().out
