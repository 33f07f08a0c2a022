import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from page_assembler import InvalidInputError, RenderingOptions, assemble_page
from page_config import ConfigError, PageConfig, find_config_path, load_config

__version__ = "1.0.0"

app_logger = logging.getLogger('hyperpage')

EXAMPLES = """
Examples:
  hyperpage README.md                          # Output to stdout
  hyperpage README.md > index.html             # Redirect to file
  hyperpage README.md -o index.html            # Output to file directly
  hyperpage README.md -t "My Blog"             # Set title
  hyperpage README.md --css styles.css         # Inject custom CSS
  echo "# Hello" | hyperpage                   # Read from stdin
"""


class CLIError(Exception):
    """A user-facing command-line failure, reported as 'Error: <message>'."""


def setup_logging(level: str = 'WARNING'):
    """Configures logging to stderr so stdout only carries the generated page."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='hyperpage',
        description="hyperpage - Convert markdown to complete HTML pages",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", nargs='*', help="Markdown file to convert (default: stdin)")
    parser.add_argument("-o", "--output", help="Output file path (default: stdout)")
    parser.add_argument("-t", "--title", help="Page title (default: first H1 or 'Document')")
    parser.add_argument("--css", metavar="FILE", help="Custom CSS file path")
    parser.add_argument("--no-default-styles", action="store_true", default=None,
                        help="Disable default styles")
    parser.add_argument("--before-head-end", metavar="HTML", help="HTML to inject before </head>")
    parser.add_argument("--after-body-start", metavar="HTML", help="HTML to inject after <body>")
    parser.add_argument("--before-body-end", metavar="HTML", help="HTML to inject before </body>")
    parser.add_argument("--header-ids", action="store_true", default=None,
                        help="Add id attributes to headings")
    parser.add_argument("-c", "--config", help="YAML config file (default: $HYPERPAGE_CONFIG)")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr")
    parser.add_argument("-v", "--version", action="version", version=__version__)
    return parser


def _read_stdin() -> str:
    """Reads stdin as UTF-8, replacing undecodable bytes."""
    buffer = getattr(sys.stdin, 'buffer', None)
    if buffer is None:
        return sys.stdin.read()
    return buffer.read().decode('utf-8', errors='replace')


def read_input(input_file: Optional[str]) -> str:
    """Reads markdown from a file, or from stdin when no file is given."""
    if not input_file:
        if sys.stdin.isatty():
            raise CLIError("No input file specified and no data piped to stdin")
        return _read_stdin()

    try:
        return Path(input_file).read_text(encoding='utf-8', errors='replace')
    except OSError as e:
        raise CLIError(f"Failed to read input file: {input_file}") from e


def read_css(css_file: str) -> str:
    try:
        return Path(css_file).read_text(encoding='utf-8', errors='replace')
    except OSError as e:
        raise CLIError(f"Failed to read CSS file: {css_file}") from e


def write_output(html: str, output_file: Optional[str]):
    """Writes the page to a file, or to stdout when no file is given."""
    if not output_file:
        sys.stdout.write(f"{html}\n")
        return

    try:
        Path(output_file).write_text(html, encoding='utf-8')
    except OSError as e:
        raise CLIError(f"Failed to write output file: {output_file}") from e
    app_logger.info(f"Wrote {len(html)} characters to {output_file}")
    print(f"Generated: {output_file}", file=sys.stderr)


def build_options(args: argparse.Namespace, config: Optional[PageConfig] = None,
                  config_dir: Optional[Path] = None) -> RenderingOptions:
    """Merges config values and command-line flags, flags taking precedence."""
    options = config.to_options(config_dir) if config else RenderingOptions()

    if args.title is not None:
        options.title = args.title
    if args.css is not None:
        options.css = read_css(args.css)
    if args.no_default_styles:
        options.no_default_styles = True
    if args.before_head_end is not None:
        options.before_head_end = args.before_head_end
    if args.after_body_start is not None:
        options.after_body_start = args.after_body_start
    if args.before_body_end is not None:
        options.before_body_end = args.before_body_end
    if args.header_ids:
        options.renderer_options = {**(options.renderer_options or {}), 'header_ids': True}

    return options


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()

    # Nothing to convert: no arguments and nothing piped in
    if not argv and sys.stdin.isatty():
        parser.print_help()
        return 0

    args = parser.parse_args(argv)
    load_dotenv(find_dotenv(usecwd=True))

    try:
        config = None
        config_dir = None
        config_path = find_config_path(args.config)
        if config_path:
            config = load_config(config_path)
            config_dir = Path(config_path).resolve().parent

        setup_logging('DEBUG' if args.verbose else (config.log_level if config else 'WARNING'))

        if len(args.input) > 1:
            raise CLIError("Multiple input files not supported")
        input_file = args.input[0] if args.input else None

        options = build_options(args, config, config_dir)
        md_text = read_input(input_file)
        app_logger.info(f"Converting {input_file or 'stdin'} ({len(md_text)} characters)")

        html = assemble_page(md_text, options)
        write_output(html, args.output)
    except (CLIError, ConfigError, InvalidInputError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def run():
    # The page is always UTF-8, whatever the console encoding
    sys.stdout.reconfigure(encoding='utf-8')
    sys.exit(main())


if __name__ == '__main__':
    run()
