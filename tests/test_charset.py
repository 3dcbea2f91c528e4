import codecs

import pytest

from web_retrieval.core.retrieval.charset import (
    decode_provisional,
    detect_encoding,
    resolve_charset,
)

UTF8 = codecs.lookup("utf-8").name
LATIN1 = codecs.lookup("iso-8859-1").name


def test_quoted_charset_attribute():
    assert resolve_charset('<meta charset="utf-8">') == UTF8


def test_meta_content_declaration():
    html = (
        '<meta http-equiv="Content-Type" '
        'content="text/html; charset=ISO-8859-1">'
    )
    assert resolve_charset(html) == LATIN1


def test_trailing_tokens_are_cut_at_first_space():
    assert resolve_charset('charset="utf-8" />') == UTF8
    # the greedy capture runs to the last quote on the line
    html = '<meta charset="utf-8" /><link rel="stylesheet" href="a.css">'
    assert resolve_charset(html) == UTF8


def test_meta_content_with_trailing_attributes():
    html = (
        '<meta http-equiv="Content-Type" content="text/html; '
        'charset=windows-1252" /><title>x</title><a href="y">'
    )
    assert resolve_charset(html) == codecs.lookup("cp1252").name


def test_quoted_attribute_wins_over_meta_content():
    html = (
        '<meta http-equiv="Content-Type" content="text/html; charset=ISO-8859-1">\n'
        '<meta charset="utf-8">'
    )
    assert resolve_charset(html) == UTF8


def test_first_occurrence_is_used():
    html = '<meta charset="utf-8">\n<meta charset="iso-8859-1">'
    assert resolve_charset(html) == UTF8


@pytest.mark.parametrize(
    "text",
    [
        "",
        "<html><head><title>plain</title></head></html>",
        'CHARSET="utf-8"',
        "charset=utf-8",
    ],
)
def test_no_marker_is_unresolved(text):
    assert resolve_charset(text) is None


def test_unknown_charset_is_unresolved():
    assert resolve_charset('<meta charset="no-such-codec">') is None


@pytest.mark.parametrize("name", ["base64", "hex", "rot13", "zlib"])
def test_binary_codec_is_unresolved(name):
    assert resolve_charset(f'<meta charset="{name}">') is None


def test_name_with_nul_is_unresolved():
    assert resolve_charset('<meta charset="utf\x00-8">') is None
    assert detect_encoding(b'<meta charset="utf\x00-8">') == "ascii"


def test_empty_charset_is_unresolved():
    assert resolve_charset('<meta charset="">') is None


def test_match_does_not_cross_lines():
    assert resolve_charset('charset="utf-8\n"') is None


def test_provisional_decode_replaces_non_ascii():
    assert decode_provisional(b"caf\xe9") == "caf\ufffd"


def test_detect_encoding_falls_back_to_ascii():
    assert detect_encoding(b"<html>no declaration</html>") == "ascii"
    assert detect_encoding(b'<meta charset="iso-8859-1">caf\xe9') == LATIN1
