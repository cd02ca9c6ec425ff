"""Minimal markdown to HTML conversion for the resume document.

Only the constructs the resume uses are supported: three heading levels,
flat bullet lists, paragraphs, and inline links, code, bold and italic.
"""

import re
from html import escape


_LINK = re.compile(r"\[([^\]]+)\]\(([^)\s]+)\)")
_CODE = re.compile(r"`([^`]+)`")
_BOLD = re.compile(r"\*\*([^*]+)\*\*")
_ITALIC = re.compile(r"\*([^*]+)\*")
_SAFE_HREF = re.compile(r"^(https?://|mailto:|/|#)", re.IGNORECASE)
_ANCHOR_OPEN = re.compile(r"(<a [^>]*>)")

_HEADINGS = (("# ", "h1"), ("## ", "h2"), ("### ", "h3"))
_BULLETS = ("- ", "* ")


def _link(match: re.Match[str]) -> str:
    text, href = match.group(1), match.group(2)
    if not _SAFE_HREF.match(href):
        return match.group(0)
    return f'<a href="{href}" target="_blank" rel="noreferrer">{text}</a>'


def _emphasize(html: str) -> str:
    html = _CODE.sub(r"<code>\1</code>", html)
    html = _BOLD.sub(r"<strong>\1</strong>", html)
    return _ITALIC.sub(r"<em>\1</em>", html)


def render_inline(text: str) -> str:
    """Escape first, then apply link, code, bold and italic in that order.

    Opening anchor tags are left untouched so markers inside an href stay literal.
    """

    html = escape(text, quote=True)
    html = _LINK.sub(_link, html)
    return "".join(
        part if part.startswith("<a ") else _emphasize(part)
        for part in _ANCHOR_OPEN.split(html)
    )


def render_markdown(source: str) -> str:
    output: list[str] = []
    in_list = False

    def close_list() -> None:
        nonlocal in_list
        if in_list:
            output.append("</ul>")
            in_list = False

    for raw_line in source.splitlines():
        line = raw_line.rstrip()
        if not line:
            close_list()
            continue

        heading = next(
            ((tag, line[len(prefix):]) for prefix, tag in _HEADINGS if line.startswith(prefix)),
            None,
        )
        if heading is not None:
            close_list()
            tag, content = heading
            output.append(f"<{tag}>{render_inline(content)}</{tag}>")
            continue

        if line.startswith(_BULLETS):
            if not in_list:
                output.append("<ul>")
                in_list = True
            output.append(f"<li>{render_inline(line[2:])}</li>")
            continue

        close_list()
        output.append(f"<p>{render_inline(line)}</p>")

    close_list()
    return "\n".join(output)
