"""Tests for ContentConverter class."""

import pytest

from hugo_converter.core.converter import ContentConverter

from conftest import FIRST_DATE

STAMP = "2024-03-05T12:34:56.789Z"


class TestContentConverter:
    """Tests for ContentConverter class."""

    @pytest.fixture
    def converter(self):
        return ContentConverter()

    def test_tag_line_and_title(self, converter):
        document = converter.convert("#foo #bar\n# Title\nBody", "note.md", FIRST_DATE)

        assert document.tags == ["foo", "bar"]
        assert document.title == "Title"
        assert document.body == "# Title\nBody"

    def test_title_falls_back_to_filename(self, converter):
        document = converter.convert("Just some text.\n", "My Note.md", FIRST_DATE)

        assert document.title == "My Note"

    def test_second_level_heading_is_not_title(self, converter):
        document = converter.convert("## Section\ntext\n", "Fallback.md", FIRST_DATE)

        assert document.title == "Fallback"

    def test_first_heading_wins(self, converter):
        document = converter.convert("intro\n# First\n# Second\n", "n.md", FIRST_DATE)

        assert document.title == "First"

    def test_heading_keeps_trailing_hash(self, converter):
        document = converter.convert("# Learning C#\n", "n.md", FIRST_DATE)

        assert document.title == "Learning C#"

    def test_existing_frontmatter_stripped(self, converter):
        text = f"---\nfirst_converted: {STAMP}\naliases: [x]\n---\n#tag\n\n# Heading\ntext\n"

        document = converter.convert(text, "n.md", FIRST_DATE)

        assert document.tags == ["tag"]
        assert document.title == "Heading"
        assert document.body == "# Heading\ntext\n"
        assert "aliases" not in document.render()
        assert "first_converted" not in document.render()

    def test_tags_deduplicated(self, converter):
        document = converter.convert("#a #b #a\nBody", "n.md", FIRST_DATE)

        assert document.tags == ["a", "b"]

    def test_no_tag_line(self, converter):
        text = "Body first\n#foo #bar\n"

        document = converter.convert(text, "n.md", FIRST_DATE)

        assert document.tags == []
        assert document.body == text

    def test_wikilinks_become_text(self, converter):
        document = converter.convert("See [[First Note]] and [[Second|the second]].", "n.md", FIRST_DATE)

        assert document.body == "See First Note and the second."

    def test_embeds_are_not_flattened(self, converter):
        document = converter.convert("![[cat.png]] and [[Note]]", "n.md", FIRST_DATE)

        assert document.body == "![[cat.png]] and Note"

    def test_remote_images_untouched(self, converter):
        text = "![a cat](https://i.gyazo.com/abc.png)\n"

        document = converter.convert(text, "n.md", FIRST_DATE)

        assert document.body == text

    def test_slug_date_and_draft(self, converter):
        document = converter.convert("# Whatever\n", "Hello World!.md", FIRST_DATE)

        assert document.slug == "hello-world"
        assert document.date == FIRST_DATE
        assert document.draft is False

    def test_title_case(self):
        converter = ContentConverter(title_case=True)

        document = converter.convert("# the lord of the rings\n", "n.md", FIRST_DATE)

        assert document.title == "The Lord of the Rings"

    def test_render(self, converter):
        text = "#hugo\n# Hello\n\nSee [[Other]].\n"

        rendered = converter.convert(text, "Hello.md", FIRST_DATE).render()

        assert rendered == (
            "---\n"
            'title: "Hello"\n'
            f"date: {STAMP}\n"
            "slug: hello\n"
            "tags:\n"
            "  - hugo\n"
            "draft: false\n"
            "---\n"
            "\n"
            "# Hello\n"
            "\n"
            "See Other.\n"
        )

    def test_render_without_tags(self, converter):
        rendered = converter.convert("Body\n", "Post.md", FIRST_DATE).render()

        assert 'title: "Post"\n' in rendered
        assert "tags: []\n" in rendered
        assert rendered.endswith("---\n\nBody\n")
