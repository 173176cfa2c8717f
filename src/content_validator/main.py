"""
Main CLI entry point for the content validator.

Usage:
    content-validator validate notes.md --type LECTURE_NOTE --topic "Recursion"
    content-validator validate hw.md --type ASSIGNMENT --difficulty MEDIUM --json
    content-validator rubric PRE_READ
    content-validator providers
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from content_validator.analysis.preprocessing import extract_topic_from_content
from content_validator.config.constants import DEFAULT_PREREQUISITES
from content_validator.config.logging_config import setup_logging
from content_validator.config.settings import get_settings
from content_validator.core.exceptions import ContractViolationError
from content_validator.core.models import AssignmentContext, ContentType, Difficulty
from content_validator.core.rubrics import get_rubric
from content_validator.interaction.cli import CLI


def _read_optional(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    return Path(path).read_text(encoding="utf-8")


def _parse_prerequisites(values: Optional[List[str]]) -> List[str]:
    """Accept repeated flags and comma-separated lists."""
    topics: List[str] = []
    for value in values or []:
        topics.extend(t.strip() for t in value.split(",") if t.strip())
    return topics or list(DEFAULT_PREREQUISITES)


async def command_validate(args, cli: CLI) -> int:
    """Validate one content file."""
    from content_validator.core.engine import DualValidationEngine

    path = Path(args.file)
    if not path.is_file():
        cli.show_error(f"File not found: {path}")
        return 1

    content = path.read_text(encoding="utf-8")
    try:
        guidelines = _read_optional(args.guidelines)
        template = _read_optional(args.template)
        brief = _read_optional(args.brief)
    except OSError as e:
        cli.show_error(f"Cannot read input file: {e}")
        return 1

    context = AssignmentContext(
        topic=args.topic or extract_topic_from_content(args.title or "", content),
        topics_taught_so_far=_parse_prerequisites(args.prerequisites),
        content_type=ContentType(args.type),
        difficulty=Difficulty(args.difficulty) if args.difficulty else None,
    )

    settings = get_settings()
    engine = DualValidationEngine.from_settings(
        settings,
        progress_callback=None if args.json else cli.show_progress_event,
    )

    try:
        result = await engine.validate(
            content,
            context,
            template=template,
            guidelines=guidelines,
            brief=brief,
        )
    except ContractViolationError as e:
        cli.show_error(e.message, solution=json.dumps(e.details))
        return 2

    if args.json:
        print(result.model_dump_json(by_alias=True, indent=2))
    else:
        cli.show_result(result, get_rubric(context.content_type))
        cli.show_info(f"Tokens used: {result.total_tokens}")
    return 0


def command_rubric(args, cli: CLI) -> int:
    """Print the criteria of a rubric."""
    cli.show_rubric(get_rubric(args.content_type))
    return 0


def command_providers(args, cli: CLI) -> int:
    """Show which providers are configured."""
    from content_validator.ai.provider_factory import get_provider_status

    cli.show_providers(get_provider_status(get_settings()))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="content-validator",
        description="Dual-LLM validation of educational content",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s validate notes.md --type LECTURE_NOTE --topic "Recursion" --prerequisites "Functions,Loops"
  %(prog)s validate hw.md --type ASSIGNMENT --difficulty MEDIUM --guidelines guidelines.md
  %(prog)s rubric PRE_READ
  %(prog)s providers

Providers without an API key are replaced by a local stub; the result's
"providers" field lists the models that actually contributed.
        """,
    )
    parser.add_argument("--log-level", help="Override CONTENT_VALIDATOR_LOG_LEVEL")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a content file")
    validate_parser.add_argument("file", help="Markdown/text file to validate")
    validate_parser.add_argument(
        "--type",
        choices=[t.value for t in ContentType],
        default=ContentType.LECTURE_NOTE.value,
        help="Content type (selects the rubric)",
    )
    validate_parser.add_argument("--topic", help="Topic (default: derived from title or content)")
    validate_parser.add_argument("--title", help="Content title, used to derive the topic")
    validate_parser.add_argument(
        "--prerequisites",
        action="append",
        help="Topics taught so far; repeat or comma-separate",
    )
    validate_parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        help="Required for ASSIGNMENT",
    )
    validate_parser.add_argument("--guidelines", help="File with guidelines text")
    validate_parser.add_argument("--template", help="File with a custom prompt template")
    validate_parser.add_argument("--brief", help="File with the task brief")
    validate_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    # Rubric command
    rubric_parser = subparsers.add_parser("rubric", help="Show the rubric for a content type")
    rubric_parser.add_argument("content_type", choices=[t.value for t in ContentType])

    # Providers command
    subparsers.add_parser("providers", help="Show configured providers")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    settings = get_settings()
    setup_logging(
        level=(args.log_level or settings.log_level).upper(),
        log_file=settings.log_file,
        json=settings.log_json,
    )
    cli = CLI()

    # Execute command
    if args.command == "validate":
        return asyncio.run(command_validate(args, cli))
    elif args.command == "rubric":
        return command_rubric(args, cli)
    elif args.command == "providers":
        return command_providers(args, cli)

    return 0


if __name__ == "__main__":
    sys.exit(main())
