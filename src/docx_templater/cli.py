from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .assembler import AssemblyMode, assemble
from .config import Settings
from .editor import SectionEditor
from .errors import DocxTemplaterError, InvalidSectionsError
from .export import write_export
from .extractor import load_html
from .llm_classifier import SectionAnalyzer
from .sections import parse_sections, sections_from_json, sections_to_json


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert Word documents into template-styled HTML pages."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    convert = sub.add_parser("convert", help="Assemble a document into a full HTML page.")
    convert.add_argument("path", type=Path, help="Path to the .docx or .txt file.")
    convert.add_argument(
        "--mode",
        choices=[m.value for m in AssemblyMode],
        default=AssemblyMode.COMPARISON.value,
        help="Page skeleton to fill.",
    )
    convert.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        help="Directory to write <name>.html into. Prints to stdout when omitted.",
    )
    convert.add_argument(
        "--no-escape",
        action="store_true",
        help="Insert document text into the page without HTML escaping.",
    )
    convert.add_argument(
        "--plain-text",
        action="store_true",
        help="Ignore Word styles and guess headings from line shape.",
    )
    convert.add_argument(
        "--keep-pros-cons",
        action="store_true",
        help="In single mode, keep detected pros/cons content under the placeholder grid.",
    )

    sections = sub.add_parser("sections", help="Print the parsed section list as JSON.")
    sections.add_argument("path", type=Path, help="Path to the .docx or .txt file.")
    sections.add_argument("--indent", type=int, default=2, help="Indentation for JSON output.")

    analyze = sub.add_parser("analyze", help="Ask the model for section and style suggestions.")
    analyze.add_argument("path", type=Path, help="Path to the .docx or .txt file.")
    analyze.add_argument("--model", help="Gemini model name (defaults to DOCX_TEMPLATER_MODEL).")
    analyze.add_argument("--indent", type=int, default=2, help="Indentation for JSON output.")

    render = sub.add_parser("render", help="Render a section list JSON file into final HTML.")
    render.add_argument("sections_json", type=Path, help="JSON file as printed by `sections`.")

    return parser.parse_args(argv)


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)


def load_sections(path: Path):
    try:
        return sections_from_json(path.read_text(encoding="utf-8"))
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
        raise InvalidSectionsError(f"Cannot load sections from {path}: {exc}") from exc


def run(args: argparse.Namespace, settings: Settings) -> None:
    if args.command == "convert":
        html = load_html(args.path, plain_text=args.plain_text)
        page = assemble(
            html,
            AssemblyMode(args.mode),
            escape=not args.no_escape,
            stylesheet=settings.stylesheet,
            include_detected_pros_cons=args.keep_pros_cons,
        )
        if args.output_dir:
            write_export(page, args.output_dir, args.path.name)
        else:
            print(page)
    elif args.command == "sections":
        print(sections_to_json(parse_sections(load_html(args.path)), indent=args.indent))
    elif args.command == "analyze":
        analyzer = SectionAnalyzer(
            model=args.model or settings.model, api_key=settings.google_api_key
        )
        suggestions = analyzer.analyze(load_html(args.path))
        print(
            json.dumps(
                [s.to_dict() for s in suggestions], ensure_ascii=False, indent=args.indent
            )
        )
    elif args.command == "render":
        sections = load_sections(args.sections_json)
        print(SectionEditor(sections, stylesheet=settings.editor_stylesheet).render())


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)
    settings = Settings.from_env()
    configure_logging("DEBUG" if args.verbose else settings.log_level)
    try:
        run(args, settings)
    except DocxTemplaterError as exc:
        logger.error("{}", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
