"""Tests for description text cleanup (images, issue URLs, project URLs)."""

from linear_mcp.toon.text import strip_issue_urls, strip_markdown_images, strip_project_urls


class TestStripMarkdownImages:
    def test_none_and_empty(self):
        assert strip_markdown_images(None) is None
        assert strip_markdown_images("") == ""

    def test_no_images_unchanged(self):
        assert strip_markdown_images("plain  text") == "plain  text"

    def test_single_image(self):
        assert strip_markdown_images("See ![screenshot](https://x/y.png) here") == (
            "See here [1 image]"
        )

    def test_multiple_images(self):
        text = "Before ![](https://uploads.linear.app/a) mid ![b](https://uploads.linear.app/b)"
        assert strip_markdown_images(text) == "Before mid [2 images]"

    def test_only_images(self):
        assert strip_markdown_images("![only](url)") == "[1 image]"
        assert strip_markdown_images("  ![a](x)\n![b](y)  ") == "[2 images]"


class TestStripIssueUrls:
    def test_none_and_empty(self):
        assert strip_issue_urls(None) is None
        assert strip_issue_urls("") == ""

    def test_bare_url(self):
        assert strip_issue_urls("Blocked by https://linear.app/ws/issue/SQT-297/some-slug today") == (
            "Blocked by SQT-297 today"
        )

    def test_bare_url_identifier_is_uppercased(self):
        assert strip_issue_urls("see https://linear.app/ws/issue/sqt-12") == "see SQT-12"

    def test_link_with_identifier_text(self):
        text = "[SQT-297](https://linear.app/ws/issue/SQT-297/slug)"
        assert strip_issue_urls(text) == "SQT-297"

    def test_angle_bracket_cross_team_link(self):
        url = "https://linear.app/ws/issue/SQM-5/title"
        assert strip_issue_urls(f"ref [{url}](<{url}>) done") == "ref SQM-5 done"

    def test_custom_link_text_is_preserved(self):
        text = "Read [the design doc](https://linear.app/ws/issue/SQT-1/design) first"
        assert strip_issue_urls(text) == text

    def test_link_text_for_other_issue_is_preserved(self):
        text = "[SQT-2](https://linear.app/ws/issue/SQT-1)"
        assert strip_issue_urls(text) == text

    def test_mixed(self):
        text = (
            "[docs](https://linear.app/ws/issue/SQT-1) and "
            "https://linear.app/ws/issue/SQT-2/x and [SQT-3](https://linear.app/ws/issue/SQT-3)"
        )
        assert strip_issue_urls(text) == (
            "[docs](https://linear.app/ws/issue/SQT-1) and SQT-2 and SQT-3"
        )

    def test_non_linear_urls_untouched(self):
        text = "https://example.com/issue/SQT-1"
        assert strip_issue_urls(text) == text


class TestStripProjectUrls:
    SLUGS = {
        "launch-878d2a8b5972": "pr0",
        "878d2a8b5972": "pr0",
        "launch": "pr0",
        "platform": "pr1",
    }

    def test_without_map_unchanged(self):
        text = "https://linear.app/ws/project/launch-878d2a8b5972"
        assert strip_project_urls(text, None) == text
        assert strip_project_urls(text, {}) == text

    def test_bare_url_by_slug(self):
        text = "See https://linear.app/ws/project/launch-878d2a8b5972/overview now"
        assert strip_project_urls(text, self.SLUGS) == "See pr0 now"

    def test_shortened_hash_url(self):
        assert strip_project_urls("https://linear.app/ws/project/878d2a8b5972", self.SLUGS) == "pr0"

    def test_renamed_slug_resolves_through_hash_suffix(self):
        text = "https://linear.app/ws/project/old-name-878d2a8b5972"
        assert strip_project_urls(text, self.SLUGS) == "pr0"

    def test_named_link_resolves_by_name(self):
        text = "Part of [Platform](https://linear.app/ws/project/platform-ffff0000)"
        assert strip_project_urls(text, self.SLUGS) == "Part of pr1"

    def test_unknown_project_left_untouched(self):
        text = "[Other](https://linear.app/ws/project/other-abc123) https://linear.app/ws/project/zzz"
        assert strip_project_urls(text, self.SLUGS) == text
