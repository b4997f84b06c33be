from ampere.core.security import redact_token, redact_url
from ampere.utils.text import normalize_key, safe_now_iso, uniq


class TestNormalizeKey:
    def test_lowercases_and_strips_punctuation(self):
        assert normalize_key("  NBA: Lakers vs. Celtics ") == "nbalakersvsceltics"

    def test_ampersand_becomes_and(self):
        assert normalize_key("Fox & Friends") == "foxandfriends"

    def test_none_and_empty(self):
        assert normalize_key(None) == ""
        assert normalize_key("") == ""
        assert normalize_key("!!!") == ""

    def test_non_ascii_letters_are_dropped(self):
        assert normalize_key("AMPÈRE") == "ampre"


class TestUniq:
    def test_keeps_first_occurrence(self):
        assert uniq(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


def test_safe_now_iso_is_utc():
    assert safe_now_iso().endswith("Z")


class TestRedaction:
    def test_redact_url_keeps_hostname(self):
        assert redact_url("https://www.netflix.com/search?q=the+bear") == "www.netflix.com"

    def test_redact_url_unparseable(self):
        assert redact_url("not a url") == "unknown"
        assert redact_url(None) == "unknown"

    def test_redact_token(self):
        assert redact_token("s_0123456789abcdef") == "s_012345***"
        assert redact_token("short") == "***"
        assert redact_token(None) == "None"
