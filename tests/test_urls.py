"""Tests for URL helpers."""

import unittest

from listing_scraper.urls import base_url, clean_url, has_page_marker, resolve_url, synthesize_page_url


class TestResolveUrl(unittest.TestCase):
    """Verify relative values get the source page's scheme and host."""

    def test_root_relative_path(self):
        """A root-relative path gets the source scheme and host."""
        self.assertEqual(resolve_url("/a/b.jpg", "https://x.test/cat/page"), "https://x.test/a/b.jpg")

    def test_absolute_url_unchanged(self):
        """An absolute http(s) URL is returned as is."""
        self.assertEqual(resolve_url("https://cdn.test/a.jpg", "https://x.test/cat"), "https://cdn.test/a.jpg")

    def test_non_hierarchical_schemes_unchanged(self):
        """data: and mailto: values are absolute even without a // authority."""
        gif = "data:image/gif;base64,R0lGOD"
        self.assertEqual(resolve_url(gif, "https://x.test/cat"), gif)
        self.assertEqual(resolve_url("mailto:a@b.c", "https://x.test/cat"), "mailto:a@b.c")

    def test_resolution_is_idempotent(self):
        """Resolving an already resolved value changes nothing."""
        once = resolve_url("/a/b.jpg", "https://x.test/cat/page")
        self.assertEqual(resolve_url(once, "https://x.test/cat/page"), once)

    def test_path_without_leading_slash(self):
        """A missing leading slash is added."""
        self.assertEqual(resolve_url("vp/products/1", "https://x.test/cat"), "https://x.test/vp/products/1")

    def test_protocol_relative(self):
        """Protocol-relative values borrow only the scheme."""
        self.assertEqual(resolve_url("//cdn.test/a.jpg", "https://x.test/cat"), "https://cdn.test/a.jpg")

    def test_empty_value_unchanged(self):
        """Empty values stay empty."""
        self.assertEqual(resolve_url("", "https://x.test/cat"), "")

    def test_base_url(self):
        """The base keeps scheme, host and port only."""
        self.assertEqual(base_url("https://x.test:8080/cat?page=2"), "https://x.test:8080")


class TestSynthesizePageUrl(unittest.TestCase):
    """Verify page parameter synthesis from the job's base URL."""

    def test_without_query(self):
        """A bare base URL gets ?page=N."""
        self.assertEqual(synthesize_page_url("https://x.test/cat", 1), "https://x.test/cat?page=1")

    def test_with_existing_query(self):
        """A base with a query gets &page=N."""
        self.assertEqual(
            synthesize_page_url("https://x.test/cat?kw=mouse", 1), "https://x.test/cat?kw=mouse&page=1"
        )

    def test_custom_param(self):
        """The parameter name is configurable."""
        self.assertEqual(synthesize_page_url("https://x.test/cat", 3, "p"), "https://x.test/cat?p=3")

    def test_page_marker(self):
        """The marker is the parameter name followed by =."""
        self.assertTrue(has_page_marker("/cat?page=2"))
        self.assertFalse(has_page_marker("/cat/next"))


class TestCleanUrl(unittest.TestCase):
    def test_unescapes_ampersand(self):
        """Escaped \\u0026 sequences become &."""
        self.assertEqual(clean_url("https://x.test/vp?a=1\\u0026b=2"), "https://x.test/vp?a=1&b=2")

    def test_collapses_duplicate_path_slashes(self):
        """Doubled path slashes collapse to one."""
        self.assertEqual(clean_url("https://x.test//vp/products"), "https://x.test/vp/products")

    def test_repairs_single_slash_scheme(self):
        """https:/ is repaired to https://."""
        self.assertEqual(clean_url("https:/thumbnail.test/a.jpg"), "https://thumbnail.test/a.jpg")

    def test_leaves_good_url_alone(self):
        """A well-formed URL is left alone."""
        self.assertEqual(clean_url("https://x.test/a/b.jpg?x=1"), "https://x.test/a/b.jpg?x=1")


if __name__ == "__main__":
    unittest.main()
