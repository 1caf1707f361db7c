"""Property-based tests for IRC line codec."""

from hypothesis import given
from hypothesis import strategies as st

from rss_irc_bot.codec import Line, format_line, parse_line

# Tokens that can sit in the middle of a line: no spaces, no leading colon,
# no line breaks.
token = st.text(
    alphabet=st.characters(
        whitelist_categories=["Ll", "Lu", "Nd"], whitelist_characters="#&!@.-_+*"
    ),
    min_size=1,
    max_size=20,
)

suffix_text = st.text(
    alphabet=st.characters(
        whitelist_categories=["Ll", "Lu", "Nd", "Zs"],
        whitelist_characters=":#!?.,-",
    ),
    max_size=60,
).map(lambda s: s.rstrip(" "))


class TestLineCodecProperties:
    """Property-based tests for parse_line and format_line."""

    @given(
        st.one_of(st.just(""), token),
        token,
        st.lists(token, max_size=5),
        suffix_text,
    )
    def test_parse_reverses_format_property(self, prefix, command, arguments, suffix):
        """
        Property: Round-trip

        For any line with a non-empty command, parsing its wire form gives back
        the same prefix, command, arguments and suffix.
        """
        line = Line(command=command, arguments=arguments, prefix=prefix, suffix=suffix)

        parsed = parse_line(format_line(line))

        assert parsed == line

    @given(token, st.lists(token, max_size=5), suffix_text)
    def test_format_is_single_crlf_line_property(self, command, arguments, suffix):
        """
        Property: Wire framing

        Formatted lines end in exactly one CRLF and contain no other line break.
        """
        wire = format_line(Line(command=command, arguments=arguments, suffix=suffix))

        assert wire.endswith("\r\n")
        assert "\r" not in wire[:-2]
        assert "\n" not in wire[:-2]
