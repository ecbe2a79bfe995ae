"""Tests for filename sanitization."""

from va_importer.sanitize import sanitize_filename


class TestSanitizeFilename:
    def test_replaces_unsafe_chars(self):
        assert sanitize_filename('a/b\\c:"d') == "a_b_c_d"

    def test_removes_leading_dots(self):
        assert sanitize_filename("..hidden") == "hidden"

    def test_collapses_underscores(self):
        assert sanitize_filename("a___b") == "a_b"

    def test_preserves_character_names(self):
        assert sanitize_filename("Dunmer Guard 02") == "Dunmer Guard 02"

    def test_truncation_preserves_extension(self):
        result = sanitize_filename("a" * 300 + ".wav")
        assert result.endswith(".wav")
        assert len(result.encode("utf-8")) <= 255

    def test_truncation_without_extension(self):
        result = sanitize_filename("a" * 300)
        assert len(result.encode("utf-8")) <= 255

    def test_nothing_left_falls_back(self):
        assert sanitize_filename("...") == "track"
