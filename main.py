"""Entrypoint: generate or modify LaTeX, inspect providers and models."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from aitexgen.config import load_settings
from aitexgen.llm.registry import ProviderRegistry
from aitexgen.llm.router import LLMRouter
from aitexgen.orchestrator import available_models, generate_latex, modify_latex


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="AI LaTeX generator")
    parser.add_argument("--settings", default="config/settings.yaml", help="Path to settings.yaml")

    subparsers = parser.add_subparsers(dest="command", required=True)

    gen = subparsers.add_parser("generate", help="Convert text/data into a LaTeX document")
    gen.add_argument("input", help="Path to the input file, or - for stdin")
    gen.add_argument("--type", dest="document_type", default="article", help="Document type label")
    gen.add_argument("--model", help="Try this model before the provider chain")
    gen.add_argument("--split-tables", action="store_true", default=None)
    gen.add_argument("--math", dest="use_math", action="store_true", default=None)

    mod = subparsers.add_parser("modify", help="Apply instructions to existing LaTeX")
    mod.add_argument("input", help="Path to the .tex file, or - for stdin")
    mod.add_argument("--notes", required=True, help="What to change or remove")
    mod.add_argument("--omit", action="store_true", help="Remove the described content instead of changing it")
    mod.add_argument("--model", help="Try this model before the provider chain")

    models = subparsers.add_parser("models", help="List models available to a subscription tier")
    models.add_argument("--tier", default="free", choices=["free", "basic", "pro", "power"])

    subparsers.add_parser("providers", help="Show provider availability and budgets")
    return parser


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _print_outcome(outcome: dict) -> int:
    if outcome.get("success"):
        print(outcome["latex"])
        return 0
    print(outcome.get("error"), file=sys.stderr)
    return 1


def main() -> None:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args()

    config = load_settings(args.settings)
    logging.basicConfig(
        level=str(config.get("logging", {}).get("level", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    registry = ProviderRegistry.from_env(config)

    if args.command == "providers":
        print(json.dumps(registry.snapshot(), indent=2))
        return

    if args.command == "models":
        print(json.dumps(available_models(registry, args.tier), indent=2))
        return

    router = LLMRouter(config, registry)
    if args.command == "generate":
        options = {"model": args.model, "split_tables": args.split_tables, "use_math": args.use_math}
        outcome = generate_latex(router, _read_input(args.input), args.document_type, options)
    else:
        outcome = modify_latex(router, _read_input(args.input), args.notes, args.omit, {"model": args.model})
    sys.exit(_print_outcome(outcome))


if __name__ == "__main__":
    main()
