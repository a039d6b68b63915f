from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .addin import DEFAULT_ENDPOINT, TaskPane
from .host import DocxHost
from .personas import Persona


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Review documents with an LLM and anchor the findings as Word comments."
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", parents=[common], help="Run the analysis endpoint.")
    serve.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    review = commands.add_parser("review", parents=[common], help="Analyze a DOCX file through the endpoint.")
    review.add_argument("docx_path", type=Path, help="Path to the DOCX file to review.")
    review.add_argument(
        "--persona",
        choices=[p.value for p in Persona],
        default=Persona.LEGAL.value,
        help="Reviewer persona to use.",
    )
    review.add_argument(
        "--endpoint",
        default=None,
        help="Analysis endpoint URL (defaults to $DOCREVIEW_ENDPOINT or the local server).",
    )
    review.add_argument(
        "--output",
        type=Path,
        help="Where to write the commented copy (default: <name>_reviewed.docx).",
    )
    return parser.parse_args(argv)


def serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("docreview.web:app", host=args.host, port=args.port)
    return 0


def review(args: argparse.Namespace) -> int:
    output = args.output or args.docx_path.with_name(f"{args.docx_path.stem}_reviewed.docx")
    endpoint = args.endpoint or os.getenv("DOCREVIEW_ENDPOINT") or DEFAULT_ENDPOINT
    pane = TaskPane(
        DocxHost(str(args.docx_path), output_path=str(output)),
        endpoint=endpoint,
        persona=args.persona,
    )
    result = pane.analyze_document()
    if result is not None:
        for issue in result.issues:
            print(f"[{issue.severity}] {issue.type} ({issue.location}): {issue.comment}")
    if pane.status is not None:
        print(pane.status.message)
    return 0 if pane.status is not None and pane.status.kind == "success" else 1


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.command == "serve":
        return serve(args)
    return review(args)


if __name__ == "__main__":
    sys.exit(main())
