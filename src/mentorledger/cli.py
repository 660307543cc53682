"""Mentorship ledger CLI.

Usage:
    python -m mentorledger.cli codes
    python -m mentorledger.cli run scenario.json --event-log events.jsonl
    python -m mentorledger.cli verify-log events.jsonl

A scenario is a JSON list of operations executed against a fresh ledger:

    [
      {"op": "bind_authority", "caller": "ST0DEPLOYER", "args": {"candidate": "ST3AUTH"}},
      {"op": "mint", "caller": "ST3AUTH", "args": {"amount": 1000, "recipient": "ST1MENTOR"}},
      {"op": "book_session", "caller": "ST3AUTH", "block_height": 5,
       "args": {"mentor": "ST1MENTOR", "mentee": "ST2MENTEE", "start_time": 100,
                "duration_minutes": 60, "topic": "Career Advice",
                "interaction_hash": "61616161..."}}
    ]

interaction_hash is given as hex.
"""

from __future__ import annotations

import argparse
import inspect
import json
import sys
from pathlib import Path
from typing import Any

from mentorledger.config import LedgerConfig
from mentorledger.invariants import check_all
from mentorledger.models.errors import ALL_CODES, describe
from mentorledger.persistence.event_log import EventLog
from mentorledger.service import MentorshipService, ServiceResult

OPERATIONS = (
    "bind_authority",
    "mint",
    "transfer",
    "burn",
    "stake_tokens",
    "unstake_tokens",
    "register_user",
    "update_user_profile",
    "deactivate_user",
    "book_session",
    "update_session_status",
    "rate_session",
)


def _make_service(args: argparse.Namespace) -> MentorshipService:
    config = LedgerConfig.from_env(args.env_file)
    log_path = args.event_log or config.event_log_path
    return MentorshipService(config, event_log=EventLog(log_path))


def _result_line(index: int, op: str, result: ServiceResult) -> str:
    record: dict[str, Any] = {"step": index, "op": op, "success": result.success}
    if result.success:
        record["data"] = result.data
    else:
        record["code"] = result.code
        record["errors"] = result.errors
    return json.dumps(record, sort_keys=True, default=str)


def _prepare_step(step: Any) -> dict[str, Any]:
    """Validate one scenario step and return the keyword arguments for its call.

    Raises ValueError describing the first problem found.
    """
    if not isinstance(step, dict):
        raise ValueError("step must be a JSON object")
    if not isinstance(step.get("caller"), str):
        raise ValueError("step needs a string caller")
    args = step.get("args", {})
    if not isinstance(args, dict):
        raise ValueError("args must be a JSON object")
    kwargs = dict(args)
    if step["op"] == "book_session" and isinstance(kwargs.get("interaction_hash"), str):
        try:
            kwargs["interaction_hash"] = bytes.fromhex(kwargs["interaction_hash"])
        except ValueError:
            raise ValueError("interaction_hash is not valid hex") from None
    kwargs["block_height"] = step.get("block_height", 0)
    try:
        inspect.signature(getattr(MentorshipService, step["op"])).bind(
            None, step["caller"], **kwargs,
        )
    except TypeError as e:
        raise ValueError(str(e)) from None
    return kwargs


def _run_step(
    service: MentorshipService, step: dict[str, Any], kwargs: dict[str, Any],
) -> ServiceResult:
    method = getattr(service, step["op"])
    return method(step["caller"], **kwargs)


def cmd_codes(args: argparse.Namespace) -> int:
    for enum_cls in ALL_CODES:
        for code in enum_cls:
            print(f"{int(code)}  {enum_cls.__name__}.{code.name}  {describe(code)}")
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    with args.script.open("r", encoding="utf-8") as handle:
        steps = json.load(handle)
    if not isinstance(steps, list):
        print("Failed: scenario must be a JSON list of operations", file=sys.stderr)
        return 2

    unknown = sorted(
        {s.get("op") if isinstance(s, dict) and isinstance(s.get("op"), str) else None
         for s in steps}
        - set(OPERATIONS),
        key=str,
    )
    if unknown:
        print(f"Failed: unknown operations: {', '.join(map(str, unknown))}", file=sys.stderr)
        return 2

    prepared = []
    for index, step in enumerate(steps):
        try:
            prepared.append(_prepare_step(step))
        except ValueError as e:
            print(f"Failed: step {index}: {e}", file=sys.stderr)
            return 2

    service = _make_service(args)
    for index, (step, kwargs) in enumerate(zip(steps, prepared)):
        result = _run_step(service, step, kwargs)
        print(_result_line(index, step["op"], result))

    print(json.dumps({"status": service.status()}, sort_keys=True))
    violations = check_all(service)
    if violations:
        for violation in violations:
            print(f"Invariant violated: {violation}", file=sys.stderr)
        return 1
    return 0


def cmd_verify_log(args: argparse.Namespace) -> int:
    if not args.path.exists():
        print(f"Failed: no such file: {args.path}", file=sys.stderr)
        return 1
    try:
        log = EventLog(args.path)
    except ValueError as e:
        print(f"Failed: {e}", file=sys.stderr)
        return 1
    print(f"Verified {log.count} events")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mentorledger",
        description="Mentorship ledger: token, user registry and session CLI",
    )
    sub = parser.add_subparsers(dest="command")

    # codes
    sub.add_parser("codes", help="List error codes")

    # run
    p_run = sub.add_parser("run", help="Execute a JSON scenario against a fresh ledger")
    p_run.add_argument("script", type=Path, help="Path to scenario JSON")
    p_run.add_argument("--event-log", type=Path, help="Append audit events to this JSONL file")
    p_run.add_argument("--env-file", type=Path, help="Load configuration from a .env file")

    # verify-log
    p_verify = sub.add_parser("verify-log", help="Integrity-check an audit log")
    p_verify.add_argument("path", type=Path, help="Path to event log JSONL")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "codes": cmd_codes,
        "run": cmd_run,
        "verify-log": cmd_verify_log,
    }

    handler = commands.get(args.command)
    if handler is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    return handler(args)


if __name__ == "__main__":
    raise SystemExit(main())
