#!/usr/bin/env python3
"""
Image to ASCII Art Converter - Command Line
===========================================
Convert an image (file path, data URL or http(s) URL) into ASCII art.

Outputs:
- plain: monochrome character grid
- html:  glyphs wrapped in color-styled spans (optionally a full page)
- color: characters annotated with $xNNN 256-color tokens
- ansi:  the color output rendered as terminal escapes
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from asciify.constants import DEFAULT_FETCH_TIMEOUT, DEFAULT_WIDTH, HEIGHT_RANGE, WIDTH_RANGE
from asciify.formatters import AnsiFormatter, HtmlFormatter
from asciify.session import ConverterSession


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

FORMATS = ('plain', 'html', 'color', 'ansi')
EXTENSION_FORMATS = {
    'txt': 'plain',
    'html': 'html',
    'htm': 'html',
    'ansi': 'ansi',
}


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def format_output(session: ConverterSession, fmt: str, page: bool = False) -> str:
    """Pick one rendering of the session's last outputs."""
    if fmt == 'html':
        if page and session.outputs is not None:
            return HtmlFormatter.to_document(session.outputs)
        return session.export('html')
    if fmt == 'ansi':
        return AnsiFormatter.render(session.export('color'))
    return session.export(fmt)


def guess_format(output_path: str, default: str = 'plain') -> str:
    """Choose an output format from a file extension."""
    ext = os.path.splitext(output_path)[1].lower().lstrip('.')
    return EXTENSION_FORMATS.get(ext, default)


def write_text(path: str, text: str) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)


# =============================================================================
# COMMAND LINE INTERFACE
# =============================================================================

def _bounded_int(bounds, allow_zero: bool = False):
    low, high = bounds

    def parse(value: str) -> int:
        number = int(value)
        if allow_zero and number == 0:
            return number
        if not low <= number <= high:
            raise argparse.ArgumentTypeError(f"must be between {low} and {high}")
        return number

    return parse


def create_argument_parser():
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description='Convert images to plain, HTML-colored and color-coded ASCII art',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s image.png                          # Plain text, 80 columns
  %(prog)s image.png -w 120                   # Height follows the aspect ratio
  %(prog)s image.png -H 30                    # Width follows the aspect ratio
  %(prog)s image.png -w 100 -H 40 --no-aspect # Fixed, possibly distorted grid
  %(prog)s image.png -f ansi                  # Colored terminal preview
  %(prog)s image.png -o art.html --page       # Standalone colored HTML page
  %(prog)s https://example.com/cat.jpg -f color
  %(prog)s image.png --interactive
        """
    )

    parser.add_argument('input', nargs='?', help='Image path, data URL or http(s) URL')
    parser.add_argument('-o', '--output', help='Output file (txt, html or ansi by extension)')

    parser.add_argument('-w', '--width', type=_bounded_int(WIDTH_RANGE),
                        help='Output width in characters (%d-%d, default %d; derived from '
                             '--height when only that is given)' % (WIDTH_RANGE + (DEFAULT_WIDTH,)))
    parser.add_argument('-H', '--height', type=_bounded_int(HEIGHT_RANGE, allow_zero=True),
                        default=0,
                        help='Output height in characters (%d-%d, 0 derives it)' % HEIGHT_RANGE)
    parser.add_argument('--no-aspect', dest='maintain_aspect_ratio', action='store_false',
                        help='Do not couple width and height')

    parser.add_argument('-f', '--format', choices=FORMATS,
                        help='Output format (default: from --output extension, else plain)')
    parser.add_argument('--page', action='store_true',
                        help='Wrap HTML output in a complete document')

    parser.add_argument('--timeout', type=float, default=DEFAULT_FETCH_TIMEOUT,
                        help='Timeout in seconds for URL downloads')
    parser.add_argument('--interactive', action='store_true',
                        help='Adjust settings and re-convert from a prompt')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for command line usage."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    width = args.width
    if width is None:
        # With the lock on, a lone --height drives the width
        width = 0 if args.height and args.maintain_aspect_ratio else DEFAULT_WIDTH

    session = ConverterSession(
        width=width,
        height=args.height,
        maintain_aspect_ratio=args.maintain_aspect_ratio,
        timeout=args.timeout,
    )

    if args.interactive:
        InteractiveMode(session).run(args.input)
        return 0

    if not args.input:
        parser.print_help()
        return 2

    try:
        outputs = session.convert(args.input)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if outputs is None:
        print(session.error, file=sys.stderr)
        return 1

    if args.output:
        fmt = args.format or guess_format(args.output)
        write_text(args.output, format_output(session, fmt, args.page))
        print(f"Saved to {args.output}")
    else:
        text = format_output(session, args.format or 'plain', args.page)
        sys.stdout.write(text if text.endswith('\n') else text + '\n')

    return 0


# =============================================================================
# INTERACTIVE MODE
# =============================================================================

class InteractiveMode:
    """Prompt-driven equivalent of the converter form."""

    HELP = """Commands:
  load <source>        - Load and convert an image
  w <num>              - Set width (%d-%d)
  h <num>              - Set height (%d-%d)
  lock                 - Toggle aspect-ratio lock
  convert              - Convert the current image again
  show [format]        - Print output (plain/html/color/ansi)
  save <format> <file> - Write output to a file
  q                    - Quit""" % (WIDTH_RANGE + HEIGHT_RANGE)

    def __init__(self, session: ConverterSession, stdin=None, stdout=None):
        self.session = session
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout

    def _print(self, text: str = '') -> None:
        self.stdout.write(text + '\n')

    def _report(self) -> None:
        session = self.session
        if session.error:
            self._print(session.error)
        elif session.outputs is not None:
            self._print(f"Converted to {session.outputs.width}x{session.outputs.height}")

    def status(self) -> str:
        session = self.session
        lock = 'on' if session.maintain_aspect_ratio else 'off'
        return f"width={session.width} height={session.height} aspect lock={lock}"

    def handle(self, line: str) -> bool:
        """
        Execute one command.

        Returns:
            False when the user asked to quit
        """
        cmd = line.strip().split(maxsplit=2)
        if not cmd:
            return True

        command = cmd[0].lower()
        session = self.session

        if command in ('q', 'quit'):
            return False

        elif command == 'load' and len(cmd) > 1:
            session.convert(line.strip().split(maxsplit=1)[1])
            self._report()

        elif command == 'w' and len(cmd) > 1:
            session.set_width(int(cmd[1]))
            self._print(self.status())

        elif command == 'h' and len(cmd) > 1:
            session.set_height(int(cmd[1]))
            self._print(self.status())

        elif command == 'lock':
            session.set_maintain_aspect_ratio(not session.maintain_aspect_ratio)
            self._print(self.status())

        elif command == 'convert':
            if not session.current_source:
                self._print("No image loaded.")
            else:
                session.convert_again()
                self._report()

        elif command == 'show':
            fmt = cmd[1] if len(cmd) > 1 else 'plain'
            if fmt not in FORMATS:
                self._print("Invalid format. Use: " + ', '.join(FORMATS))
            else:
                text = format_output(session, fmt)
                self.stdout.write(text if text.endswith('\n') else text + '\n')

        elif command == 'save' and len(cmd) > 2:
            fmt, path = cmd[1], cmd[2]
            if fmt not in FORMATS:
                self._print("Invalid format. Use: " + ', '.join(FORMATS))
            else:
                write_text(path, format_output(session, fmt))
                self._print(f"Saved to {path}")

        else:
            self._print("Unknown command. Type 'q' to quit.")

        return True

    def run(self, source: Optional[str] = None) -> None:
        """Run the prompt loop until 'q' or end of input."""
        self._print("Interactive ASCII Art Mode")
        self._print("=" * 50)
        self._print(self.HELP)
        self._print()

        if source:
            self.handle_safely(f"load {source}")

        while True:
            self.stdout.write("> ")
            self.stdout.flush()
            try:
                line = self.stdin.readline()
            except KeyboardInterrupt:
                self._print("\nUse 'q' to quit.")
                continue
            if not line:
                break
            if not self.handle_safely(line):
                break

    def handle_safely(self, line: str) -> bool:
        """Run one command, reporting bad values instead of raising."""
        try:
            return self.handle(line)
        except KeyboardInterrupt:
            self._print("\nUse 'q' to quit.")
        except (ValueError, OSError) as e:
            self._print(f"Error: {e}")
        return True


# =============================================================================
# ENTRY POINT
# =============================================================================

if __name__ == '__main__':
    sys.exit(main())
