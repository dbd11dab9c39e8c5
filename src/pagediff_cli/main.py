"""
CLI main entry point for the Page Difference Tool.

Thin wrapper around the core engine - no business logic here.
"""

import argparse
import logging
import sys
from pathlib import Path

from pagediff import CompareOptions, PageComparator, SoupDocument
from pagediff.annotator import HtmlAnnotator
from pagediff.fetcher import WAIT_STRATEGIES
from pagediff.storage import FileStorage, StorageError
from pagediff.summary import SORT_COLUMNS

from .output import print_comparison_summary


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="pagediff",
        description="Detect content differences between a source page and a current page.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s staging.html production.html
  %(prog)s https://staging.example.com/ https://www.example.com/ --annotate
  %(prog)s before.html after.html -f json --search link --sort category
        """,
    )

    parser.add_argument("source", type=str, help="Source (reference) page: HTML file or http(s) URL")
    parser.add_argument("current", type=str, help="Current page to annotate: HTML file or http(s) URL")

    parser.add_argument(
        "-o",
        "--output-dir",
        type=str,
        default=".",
        help="Directory to save output files (default: current directory)",
    )

    parser.add_argument(
        "-f",
        "--format",
        type=str,
        choices=["csv", "json"],
        default="csv",
        help="Report format (default: csv)",
    )

    parser.add_argument(
        "--annotate",
        action="store_true",
        help="Also save the current page with differences highlighted",
    )

    parser.add_argument(
        "--render",
        action="store_true",
        help="Render URLs with JavaScript before comparing",
    )

    parser.add_argument(
        "-t",
        "--timeout",
        type=int,
        default=30,
        help="Timeout in seconds for each fetch/render (default: 30)",
    )

    parser.add_argument(
        "-w",
        "--wait-strategy",
        type=str,
        choices=list(WAIT_STRATEGIES),
        default="network_idle",
        help="Wait strategy for JS rendering (default: network_idle)",
    )

    parser.add_argument(
        "--user-agent",
        type=str,
        default=None,
        help="Custom User-Agent header (optional)",
    )

    parser.add_argument(
        "--search",
        type=str,
        default=None,
        help="Only list differences whose category or details contain this text",
    )

    parser.add_argument(
        "--sort",
        type=str,
        choices=list(SORT_COLUMNS),
        default="id",
        help="Column to sort the listed differences by (default: id)",
    )

    parser.add_argument("--desc", action="store_true", help="Sort in descending order")

    parser.add_argument(
        "--skip-unnamed-images",
        action="store_true",
        help="Do not report images whose src/srcset yield no file name",
    )

    parser.add_argument(
        "--source-base",
        type=str,
        default=None,
        help="Base URL for resolving relative links of a source file (optional)",
    )

    parser.add_argument(
        "--current-base",
        type=str,
        default=None,
        help="Base URL for resolving relative links of a current file (optional)",
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return parser.parse_args(argv)


def is_url(value: str) -> bool:
    return value.lower().startswith(("http://", "https://"))


def read_html_file(path: str) -> str:
    """
    Read an HTML file.

    Raises:
        SystemExit: If file cannot be read
    """
    file_path = Path(path)

    if not file_path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)

    try:
        return file_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        print(f"Error reading file {path}: {e}", file=sys.stderr)
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    """
    Main CLI entry point.

    Orchestrates the entire CLI workflow:
    1. Parse arguments
    2. Acquire both pages
    3. Run the comparison
    4. Display results
    5. Save the report (and optionally the annotated page)
    """
    args = parse_arguments(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    options = CompareOptions(report_unnamed_images=not args.skip_unnamed_images)
    comparator = PageComparator(
        options=options,
        fetch_timeout=args.timeout * 1000,  # Convert to milliseconds
        render=args.render,
        user_agent=args.user_agent,
        wait_strategy=args.wait_strategy,
    )

    if is_url(args.source) and is_url(args.current):
        print(f"Fetching {args.source} and {args.current}...")
        result, current = comparator.compare_urls(args.source, args.current)
        if not result.success:
            for error in result.fetch_errors:
                print(f"Error: {error}", file=sys.stderr)
            sys.exit(1)
    elif is_url(args.source) or is_url(args.current):
        print("Error: SOURCE and CURRENT must both be files or both be URLs", file=sys.stderr)
        sys.exit(1)
    else:
        source = SoupDocument.from_html(read_html_file(args.source), url=args.source_base)
        current = SoupDocument.from_html(read_html_file(args.current), url=args.current_base)
        result = comparator.compare(source, current)

    print_comparison_summary(result, query=args.search, sort_by=args.sort, descending=args.desc)

    try:
        storage = FileStorage(output_directory=args.output_dir)
        output_path = storage.save(result, format=args.format)
        print(f"\n✓ Report saved to: {output_path}")

        if args.annotate and current is not None:
            html = HtmlAnnotator(options).annotate(current, result.differences)
            annotated_path = storage.save_annotated_html(html, result)
            print(f"✓ Annotated page saved to: {annotated_path}")
    except StorageError as e:
        print(f"✗ Failed to save results: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
