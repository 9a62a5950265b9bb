import pytest

from bannerkit.markup.assembler import RenderMode, generate_banner_html
from bannerkit.markup.minifier import minify_css, minify_html, minify_js


def test_css_rules():
    css = "a { margin: 0px; color: #FFFFFF; opacity: 0.5; }"
    assert minify_css(css) == "a{margin:0;color:#FFF;opacity:.5}"


def test_css_keeps_time_units_and_percent_stops():
    css = (
        "@keyframes k { 0% { opacity: 0; } 100% { opacity: 1; } }\n"
        ".a { animation: k 1s ease 0s forwards; }"
    )
    out = minify_css(css)
    assert out == "@keyframes k{0%{opacity:0}100%{opacity:1}}.a{animation:k 1s ease 0s forwards}"


def test_css_leaves_nonzero_lengths_alone():
    assert minify_css("a { width: 10px; top: -30px; }") == "a{width:10px;top:-30px}"


def test_css_shortens_only_doubled_hex():
    assert minify_css("a { color: #aabbcc; border-color: #abcdef; }") == "a{color:#abc;border-color:#abcdef}"


def test_css_strips_comments():
    assert minify_css("/* layout */ a { top: 1px; }") == "a{top:1px}"


def test_js_keeps_string_literals():
    js = "var a = 'x  //  y'; // trailing\nvar b = 1;"
    assert minify_js(js) == "var a='x  //  y';var b=1;"


def test_js_drops_block_comments():
    assert minify_js("/* c */ var a = 1;") == "var a=1;"


def test_markup_whitespace_and_comments():
    html = '<div>\n  <!-- x -->\n  <p class="a">Hi</p>\n</div>'
    assert minify_html(html) == "<div><p class=a>Hi</p></div>"


def test_attributes_with_unsafe_characters_stay_quoted():
    html = '<img src="images/a-0.png" alt="">'
    assert minify_html(html) == html


def test_script_bodies_are_not_treated_as_markup():
    html = '<script>var s = "a  >  <b";</script>'
    assert minify_html(html) == '<script>var s="a  >  <b";</script>'


def test_minify_is_idempotent(banner):
    sources = {"1:2": "images/Headline-0.png", "1:3": "images/Logo-1.png"}
    document = generate_banner_html(banner, sources, RenderMode.STATIC)
    assert minify_html(document) == document
    assert minify_html(minify_html(document)) == document


@pytest.mark.parametrize(
    "js,expected",
    [
        ("a = b - -c;", "a=b- -c;"),
        ("n = i++ + 1;", "n=i++ +1;"),
        ("x = y / /re/.source;", "x=y/ /re/.source;"),
        ("a - /* gone */ -b", "a- -b"),
    ],
)
def test_js_keeps_space_between_operators_that_would_fuse(js, expected):
    assert minify_js(js) == expected
    assert minify_js(expected) == expected
