"""Minify a complete static banner document.

Markup, <style> bodies and <script> bodies are handled separately so that the
CSS and JS rules never touch attribute text, and the markup rules never touch
code. Every rule is stable under re-application: ``minify_html`` is idempotent.
"""
from __future__ import annotations

import re
from typing import List

_HTML_COMMENT_RE = re.compile(r"<!--.*?-->", re.S)
_BLOCK_RE = re.compile(r"(<(script|style)\b[^>]*>)(.*?)</\2\s*>", re.I | re.S)
_TAG_RE = re.compile(r"<[^<>]+>")
_SAFE_ATTR_RE = re.compile(r'="([a-zA-Z0-9\-_#.]+)"(?!/)')

# Time units and percentages are left alone: `0s` in an animation shorthand and
# `0%` as a keyframe selector are not valid without their unit.
_ZERO_UNIT_RE = re.compile(
    r"(?<![\w.#-])0(?:px|em|rem|pt|pc|in|cm|mm|ex|ch|vw|vh|vmin|vmax|deg|rad|turn)\b"
)
_HEX_RE = re.compile(r"#([0-9a-fA-F])\1([0-9a-fA-F])\2([0-9a-fA-F])\3(?![\w-])")
_LEADING_ZERO_RE = re.compile(r"(?<![\w.])0\.(\d+)")

_JS_TOKEN_RE = re.compile(
    r"""("(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*'|`(?:\\.|[^`\\])*`)|(//[^\n]*|/\*.*?\*/)""",
    re.S,
)
_JS_PUNCTUATION = set("{}();,=+-*/")
# Operator pairs that keep their separating space
_JS_GLUED = {"++", "--", "//", "/*"}


def _unquote_attributes(tag: str) -> str:
    return _SAFE_ATTR_RE.sub(r"=\1", tag)


def _minify_tag(tag: str) -> str:
    return _unquote_attributes(re.sub(r"\s+", " ", tag))


def _minify_markup(html: str) -> str:
    html = re.sub(r">\s+<", "><", html)
    html = re.sub(r"^\s+|\s+$", "", html, flags=re.M)
    html = re.sub(r"\s*\n\s*", " ", html)
    html = re.sub(r"\s{2,}", " ", html)
    return _TAG_RE.sub(lambda m: _minify_tag(m.group(0)), html)


def minify_css(css: str) -> str:
    css = re.sub(r"/\*.*?\*/", "", css, flags=re.S)
    css = re.sub(r"\s*\{\s*", "{", css)
    css = re.sub(r"\s*\}\s*", "}", css)
    css = re.sub(r"\s*;\s*", ";", css)
    css = re.sub(r"\s*,\s*", ",", css)
    css = re.sub(r"\s*:\s*", ":", css)
    css = re.sub(r";+\}", "}", css)
    css = _ZERO_UNIT_RE.sub("0", css)
    css = _HEX_RE.sub(r"#\1\2\3", css)
    css = _LEADING_ZERO_RE.sub(r".\1", css)
    return re.sub(r"\s+", " ", css).strip()


def _tighten_js(code: str) -> str:
    code = re.sub(r"\s+", " ", code)

    def _space(m: re.Match) -> str:
        before = code[m.start() - 1] if m.start() else ""
        after = code[m.end()] if m.end() < len(code) else ""
        if before + after in _JS_GLUED:
            return " "
        if before in _JS_PUNCTUATION or after in _JS_PUNCTUATION:
            return ""
        return " "

    return re.sub(" ", _space, code)


def minify_js(js: str) -> str:
    """Drop comments, collapse whitespace and tighten operators outside string literals."""
    pieces: List[str] = []
    code: List[str] = []
    pos = 0
    for m in _JS_TOKEN_RE.finditer(js):
        code.append(js[pos:m.start()])
        if m.group(1):
            pieces.append(_tighten_js("".join(code)))
            pieces.append(m.group(1))
            code = []
        else:
            # a dropped comment still separates the tokens around it
            code.append(" ")
        pos = m.end()
    code.append(js[pos:])
    pieces.append(_tighten_js("".join(code)))
    return "".join(pieces).strip()


def minify_html(html: str) -> str:
    """Strip comments and structural whitespace from a whole document."""
    html = _HTML_COMMENT_RE.sub("", html)
    out: List[str] = []
    pos = 0
    for m in _BLOCK_RE.finditer(html):
        out.append(_minify_markup(html[pos:m.start()]))
        open_tag, kind, body = m.group(1), m.group(2).lower(), m.group(3)
        body = minify_css(body) if kind == "style" else minify_js(body)
        out.append(f"{_minify_tag(open_tag)}{body}</{kind}>")
        pos = m.end()
    out.append(_minify_markup(html[pos:]))
    return "".join(out)
