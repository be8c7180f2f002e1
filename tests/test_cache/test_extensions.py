"""Tests for output extension resolution."""

from imgcache.cache.extensions import extract_extension, supported_extensions


class TestSupportedExtensions:
    def test_common_formats_present(self):
        exts = supported_extensions()
        for ext in ("jpg", "jpeg", "png", "gif", "bmp"):
            assert ext in exts

    def test_no_leading_dots(self):
        assert not any(ext.startswith(".") for ext in supported_extensions())


class TestExtractExtension:
    def test_from_path_keeps_dot(self):
        assert extract_extension("/images/photo.png") == ".png"

    def test_case_insensitive_path(self):
        assert extract_extension("/images/PHOTO.JPG") == ".jpg"

    def test_format_param_wins(self):
        assert extract_extension("/images/photo.jpg", "format=gif") == "gif"

    def test_format_param_after_other_params(self):
        assert extract_extension("/images/photo.jpg", "width=10&format=png") == "png"

    def test_unsupported_format_falls_back_to_path(self):
        assert extract_extension("/images/photo.jpg", "format=nope") == ".jpg"

    def test_querystring_in_full_path_ignored(self):
        assert extract_extension("/images/photo.png?width=100", "width=100") == ".png"

    def test_querystring_that_looks_like_extension_ignored(self):
        assert extract_extension("/images/photo?name=x.png", "name=x.png") == ""

    def test_no_extension(self):
        assert extract_extension("/images/photo") == ""

    def test_unknown_extension(self):
        assert extract_extension("/images/photo.txt") == ""

    def test_none_querystring(self):
        assert extract_extension("/images/photo.gif", None) == ".gif"
