"""Tests for the mentorledger CLI: parsing and scenario execution."""

import json
from pathlib import Path

from mentorledger.cli import build_parser, main


def _write(tmp_path: Path, steps: list) -> Path:
    path = tmp_path / "scenario.json"
    path.write_text(json.dumps(steps), encoding="utf-8")
    return path


SCENARIO = [
    {"op": "bind_authority", "caller": "ST0DEPLOYER", "args": {"candidate": "ST3AUTH"}},
    {"op": "mint", "caller": "ST3AUTH", "args": {"amount": 1000, "recipient": "A"}},
    {"op": "transfer", "caller": "A", "args": {"amount": 500, "sender": "A", "recipient": "B"}},
    {"op": "stake_tokens", "caller": "A", "args": {"amount": 500}},
    {"op": "stake_tokens", "caller": "A", "args": {"amount": 1}},
    {
        "op": "register_user", "caller": "A", "block_height": 2,
        "args": {
            "username": "mentor1", "role": "mentor", "expertise": ["JS"],
            "availability_hours": 40, "goals": [], "skills": [],
        },
    },
    {
        "op": "book_session", "caller": "ST3AUTH", "block_height": 5,
        "args": {
            "mentor": "A", "mentee": "B", "start_time": 10, "duration_minutes": 60,
            "topic": "Career Advice", "interaction_hash": "61" * 32,
        },
    },
    {"op": "update_session_status", "caller": "B", "args": {"session_id": 0, "new_status": "completed"}},
    {"op": "rate_session", "caller": "A", "args": {"session_id": 0, "rating": 4}},
]


class TestCLIParsing:
    def test_run_command(self) -> None:
        args = build_parser().parse_args(["run", "s.json", "--event-log", "e.jsonl"])
        assert args.command == "run"
        assert args.script == Path("s.json")
        assert args.event_log == Path("e.jsonl")

    def test_verify_log_command(self) -> None:
        args = build_parser().parse_args(["verify-log", "e.jsonl"])
        assert args.path == Path("e.jsonl")


class TestCLIExecution:
    def test_no_command_shows_help(self) -> None:
        assert main([]) == 0

    def test_codes(self, capsys) -> None:
        assert main(["codes"]) == 0
        out = capsys.readouterr().out
        assert "306  TokenError.ALREADY_STAKED" in out
        assert "107  SessionError.SESSION_ALREADY_EXISTS" in out

    def test_run_scenario(self, tmp_path: Path, capsys) -> None:
        log_path = tmp_path / "events.jsonl"
        exit_code = main(["run", str(_write(tmp_path, SCENARIO)), "--event-log", str(log_path)])
        assert exit_code == 0

        lines = [json.loads(l) for l in capsys.readouterr().out.strip().splitlines()]
        steps, status = lines[:-1], lines[-1]["status"]
        assert [s["success"] for s in steps] == [True, True, True, True, False, True, True, True, True]
        assert steps[4]["code"] == 306
        assert status["token"]["total_supply"] == 1000
        assert status["token"]["total_staked"] == 500

        assert main(["verify-log", str(log_path)]) == 0
        assert "Verified 8 events" in capsys.readouterr().out

    def test_unknown_operation(self, tmp_path: Path) -> None:
        path = _write(tmp_path, [{"op": "drain", "caller": "A"}])
        assert main(["run", str(path)]) == 2

    def test_step_without_caller(self, tmp_path: Path, capsys) -> None:
        path = _write(tmp_path, [{"op": "mint", "args": {"amount": 1, "recipient": "A"}}])
        assert main(["run", str(path)]) == 2
        assert "step 0" in capsys.readouterr().err

    def test_unexpected_argument(self, tmp_path: Path, capsys) -> None:
        steps = [
            {"op": "bind_authority", "caller": "D", "args": {"candidate": "ST3AUTH"}},
            {"op": "mint", "caller": "ST3AUTH", "args": {"amount": 1, "to": "A"}},
        ]
        assert main(["run", str(_write(tmp_path, steps))]) == 2
        captured = capsys.readouterr()
        assert "step 1" in captured.err
        assert captured.out == ""

    def test_bad_interaction_hash_hex(self, tmp_path: Path, capsys) -> None:
        step = dict(SCENARIO[6], args={**SCENARIO[6]["args"], "interaction_hash": "zz"})
        assert main(["run", str(_write(tmp_path, [step]))]) == 2
        assert "not valid hex" in capsys.readouterr().err

    def test_non_object_step(self, tmp_path: Path) -> None:
        assert main(["run", str(_write(tmp_path, ["mint"]))]) == 2

    def test_fractional_amount_fails_cleanly(self, tmp_path: Path, capsys) -> None:
        steps = [
            SCENARIO[0],
            {"op": "mint", "caller": "ST3AUTH", "args": {"amount": 1.5, "recipient": "A"}},
        ]
        assert main(["run", str(_write(tmp_path, steps))]) == 0
        lines = [json.loads(l) for l in capsys.readouterr().out.strip().splitlines()]
        assert lines[1]["code"] == 301
        assert lines[-1]["status"]["token"]["total_supply"] == 0

    def test_verify_missing_log(self, tmp_path: Path) -> None:
        assert main(["verify-log", str(tmp_path / "missing.jsonl")]) == 1
