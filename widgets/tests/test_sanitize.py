from django.http import QueryDict
from django.test import SimpleTestCase

from widgets.sanitize import (
    clamp_filter_count,
    getlist,
    is_checked,
    safe_url,
    sanitize_filter_definitions,
    sanitize_key,
    sanitize_text_field,
)


class SanitizeTextFieldTests(SimpleTestCase):
    def test_strips_tags_and_collapses_whitespace(self):
        self.assertEqual(sanitize_text_field("  <b>Search</b>\n  posts "), "Search posts")

    def test_none_is_empty(self):
        self.assertEqual(sanitize_text_field(None), "")


class SanitizeKeyTests(SimpleTestCase):
    def test_lowercases_and_drops_other_characters(self):
        self.assertEqual(sanitize_key("Post_Tag <script>"), "post_tagscript")
        self.assertEqual(sanitize_key("post-format"), "post-format")


class ClampFilterCountTests(SimpleTestCase):
    def test_in_range_kept(self):
        self.assertEqual(clamp_filter_count("12"), 12)

    def test_out_of_range_clamped(self):
        for raw, expected in [("0", 1), ("-7", 1), ("51", 50), ("1000", 50), (None, 1), ("many", 1)]:
            with self.subTest(raw=raw):
                self.assertEqual(clamp_filter_count(raw), expected)

    def test_clamping_is_logged(self):
        with self.assertLogs("widgets.sanitize", level="DEBUG") as logs:
            clamp_filter_count("75")

        self.assertEqual(logs.output, ["DEBUG:widgets.sanitize:Clamped search filter count '75' to 50"])

    def test_in_range_count_is_not_logged(self):
        with self.assertNoLogs("widgets.sanitize", level="DEBUG"):
            clamp_filter_count("5")


class SafeUrlTests(SimpleTestCase):
    def test_relative_and_http_urls_kept(self):
        for url in ["/search/?s=hike&tag=1", "?s=hike", "http://example.com/", "HTTPS://example.com/", "//example.com/"]:
            with self.subTest(url=url):
                self.assertEqual(safe_url(url), url)

    def test_other_schemes_dropped(self):
        for url in ["javascript:alert(1)", " JavaScript:alert(1)", "java\tscript:alert(1)", "data:text/html,x", "vbscript:x"]:
            with self.subTest(url=url):
                self.assertEqual(safe_url(url), "")

    def test_empty(self):
        self.assertEqual(safe_url(None), "")
        self.assertEqual(safe_url(""), "")


class IsCheckedTests(SimpleTestCase):
    def test_checkbox_values(self):
        self.assertTrue(is_checked("on"))
        self.assertTrue(is_checked(["on"]))
        self.assertTrue(is_checked(True))
        self.assertFalse(is_checked("0"))
        self.assertFalse(is_checked(""))
        self.assertFalse(is_checked([]))
        self.assertFalse(is_checked(None))


class GetListTests(SimpleTestCase):
    def test_querydict_and_plain_mapping(self):
        self.assertEqual(getlist(QueryDict("a=1&a=2"), "a"), ["1", "2"])
        self.assertEqual(getlist({"a": "1"}, "a"), ["1"])
        self.assertEqual(getlist({"a": ["1", "2"]}, "a"), ["1", "2"])
        self.assertEqual(getlist({}, "a"), [])


class SanitizeFilterDefinitionsTests(SimpleTestCase):
    def test_rows_built_by_index(self):
        data = QueryDict(mutable=True)
        data.setlist("filter_type", ["taxonomy", "post_type", "date_histogram"])
        data.setlist("filter_name", ["Tags", "<i>Types</i>", "Archive"])
        data.setlist("num_filters", ["10", "0", "99"])
        data.setlist("taxonomy_type", ["Tag", "", ""])
        data.setlist("date_histogram_field", ["post_date", "post_date", "post_modified_gmt"])
        data.setlist("date_histogram_interval", ["month", "month", "Year"])

        self.assertEqual(
            sanitize_filter_definitions(data),
            [
                {"name": "Tags", "type": "taxonomy", "taxonomy": "tag", "count": 10},
                {"name": "Types", "type": "post_type", "count": 1},
                {
                    "name": "Archive",
                    "type": "date_histogram",
                    "count": 50,
                    "field": "post_modified_gmt",
                    "interval": "year",
                },
            ],
        )

    def test_unknown_types_skipped(self):
        data = {"filter_type": ["author", "post_type"], "filter_name": ["By", "Types"], "num_filters": ["3", "4"]}

        self.assertEqual(
            sanitize_filter_definitions(data),
            [{"name": "Types", "type": "post_type", "count": 4}],
        )

    def test_short_parallel_lists_use_defaults(self):
        data = {"filter_type": ["taxonomy"]}

        self.assertEqual(
            sanitize_filter_definitions(data),
            [{"name": "", "type": "taxonomy", "taxonomy": "", "count": 1}],
        )
