"""
Image to ASCII Art Converter - Output Formatters
================================================
Presentation wrappers around the raw renderings: a standalone HTML page for
the colored fragment and real terminal escapes for the color-coded text.
"""

from asciify.converter import AsciiOutputs
from asciify.palette import COLOR_TOKEN_PATTERN


# =============================================================================
# ANSI COLOR OUTPUT
# =============================================================================

class AnsiFormatter:
    """Turn ``$xNNN`` color tokens into 256-color terminal escapes."""

    RESET = "\033[0m"

    @staticmethod
    def escape_for(index: int, foreground: bool = True) -> str:
        """256-color SGR sequence for a palette index."""
        code = 38 if foreground else 48
        return f"\033[{code};5;{index}m"

    @classmethod
    def render(cls, color_coded: str, background: bool = False) -> str:
        """
        Replace color tokens with escape sequences.

        Each line that switched color ends with a reset so colors never leak
        into the next line or the shell prompt.

        Args:
            color_coded: Text from ``AsciiOutputs.color_coded``
            background: Color the cell background instead of the glyph

        Returns:
            String with ANSI color codes
        """
        output_lines = []

        for line in color_coded.split('\n'):
            rendered = COLOR_TOKEN_PATTERN.sub(
                lambda m: cls.escape_for(int(m.group(1)), not background), line
            )
            if rendered != line:
                rendered += cls.RESET
            output_lines.append(rendered)

        return '\n'.join(output_lines)


# =============================================================================
# HTML OUTPUT
# =============================================================================

class HtmlFormatter:
    """Wrap the colored fragment in a complete HTML document."""

    @staticmethod
    def to_document(outputs: AsciiOutputs,
                    title: str = "ASCII Art",
                    font_size: str = "0.5rem",
                    line_height: str = "0.6rem",
                    background_color: str = "#000000") -> str:
        """
        Format the colored rendering as a standalone HTML page.

        Args:
            outputs: Conversion result
            title: Page title
            font_size: CSS font size
            line_height: CSS line height
            background_color: Background color

        Returns:
            HTML string
        """
        return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{title}</title>
    <style>
        .ascii-art {{
            font-family: monospace;
            font-size: {font_size};
            line-height: {line_height};
            letter-spacing: -1px;
            background-color: {background_color};
            white-space: pre;
            display: inline-block;
            padding: 1rem;
        }}
    </style>
</head>
<body>
<div class="ascii-art">{outputs.html}</div>
</body>
</html>
"""
