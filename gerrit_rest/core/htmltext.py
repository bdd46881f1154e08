"""Best-effort HTML-to-text conversion for error bodies."""

import re
from html.parser import HTMLParser

BLOCK_TAGS = frozenset(
    {"br", "p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "li", "pre", "title", "tr", "table", "hr"}
)
SKIP_TAGS = frozenset({"script", "style"})


class _TextExtractor(HTMLParser):
    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []
        self._skipping = 0

    def handle_starttag(self, tag, attrs):
        if tag in SKIP_TAGS:
            self._skipping += 1
        elif tag in BLOCK_TAGS:
            self.parts.append("\n")

    def handle_endtag(self, tag):
        if tag in SKIP_TAGS:
            self._skipping = max(0, self._skipping - 1)
        elif tag in BLOCK_TAGS:
            self.parts.append("\n")

    def handle_data(self, data):
        if not self._skipping:
            self.parts.append(data)


def render_html(content: str) -> str:
    """
    Convert an HTML document to plain text.

    Script and style bodies are dropped, block elements become line breaks,
    and runs of whitespace are collapsed.
    """
    parser = _TextExtractor()
    parser.feed(content)
    parser.close()

    lines = (re.sub(r"[ \t\r\f\v]+", " ", line).strip() for line in "".join(parser.parts).split("\n"))
    return "\n".join(line for line in lines if line)
