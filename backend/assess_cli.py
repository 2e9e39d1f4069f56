"""Command-line client for the assessment API."""

import argparse
import asyncio
import logging
import sys

import httpx

from client.assess_client import DEFAULT_API_BASE, AssessmentRequestError, join_url, submit_answers
from client.prober import BackendAsleepError, wake_backend
from client.questions import QUESTIONS
from models.responses import AssessmentResult


def _print_result(result: AssessmentResult) -> None:
    print(f"Result: {result.score}/10 - {result.level}")
    print(f"Why: {result.reasons}")
    for idx, tip in enumerate(result.suggestions, start=1):
        print(f"{idx}. {tip}")


def _read_answers(args: argparse.Namespace) -> list[str]:
    if args.answers:
        return list(args.answers)
    answers = []
    for question in QUESTIONS:
        print(question)
        answers.append(input("> ").strip())
        print()
    return answers


def run_wake(args: argparse.Namespace) -> int:
    try:
        attempts = asyncio.run(
            wake_backend(join_url(args.base_url, "/"), max_attempts=args.attempts)
        )
    except BackendAsleepError as e:
        print(str(e))
        return 1
    print(f"Backend awake after {attempts} attempt(s).")
    return 0


def run_assess(args: argparse.Namespace) -> int:
    answers = _read_answers(args)
    if len(answers) != len(QUESTIONS):
        print(f"Need exactly {len(QUESTIONS)} answers, got {len(answers)}.")
        return 2

    try:
        result = asyncio.run(
            submit_answers(answers, base_url=args.base_url, mock=args.mock, wake=not args.no_wake)
        )
    except AssessmentRequestError as e:
        print(f"Assessment failed: {e}")
        return 1
    except httpx.HTTPError as e:
        print(f"Request failed: {e}")
        return 1
    _print_result(result)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Native-like English Check CLI")
    parser.add_argument("--base-url", default=DEFAULT_API_BASE, help="API base URL")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log probe and request details")
    subparsers = parser.add_subparsers(dest="command")

    wake = subparsers.add_parser("wake", help="Wait until the backend responds")
    wake.add_argument("--attempts", type=int, default=6, help="Max probe attempts")

    assess = subparsers.add_parser("assess", help="Score four answers")
    assess.add_argument("--mock", action="store_true", help="Ask for the fixed mock result")
    assess.add_argument("--no-wake", action="store_true", help="Skip the availability probe")
    assess.add_argument("answers", nargs="*", help="Four answers (prompted for when omitted)")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    if args.command == "wake":
        return run_wake(args)
    if args.command == "assess":
        return run_assess(args)
    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
