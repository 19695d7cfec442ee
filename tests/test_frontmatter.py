import pytest

from nanosite.frontmatter import (
    FrontMatterRecord,
    extract_frontmatter,
    record_from_markdown,
    resolve_image_path,
)


def test_extract_frontmatter():
    text = "---\ntitle: Hello\ntags:\n  - a\n  - b\n---\n# Body\n"
    data, body = extract_frontmatter(text)
    assert data == {"title": "Hello", "tags": ["a", "b"]}
    assert body == "# Body\n"


def test_extract_frontmatter_without_block_or_malformed():
    assert extract_frontmatter("# Just markdown") == ({}, "# Just markdown")
    malformed = "---\ntitle: [unclosed\n---\nbody"
    assert extract_frontmatter(malformed) == ({}, malformed)
    scalar = "---\njust a string\n---\nbody"
    assert extract_frontmatter(scalar) == ({}, scalar)
    unterminated = "---\ntitle: x\nbody"
    assert extract_frontmatter(unterminated) == ({}, unterminated)


def test_extract_frontmatter_block_only():
    data, body = extract_frontmatter("\n---\ntitle: Only\n---")
    assert data == {"title": "Only"}
    assert body == ""


@pytest.mark.parametrize(
    "image,expected",
    [
        ("cover.jpg", "post/hello/cover.jpg"),
        ("./img//cover.jpg", "post/hello/./img/cover.jpg"),
        ("/assets/cover.jpg", "/assets/cover.jpg"),
        ("https://cdn.example.com/c.jpg", "https://cdn.example.com/c.jpg"),
        ("data:image/png;base64,AAAA", "data:image/png;base64,AAAA"),
        ("", None),
        (None, None),
    ],
)
def test_resolve_image_path(image, expected):
    assert resolve_image_path(image, "post/hello/main.md") == expected


def test_resolve_image_path_for_top_level_file():
    assert resolve_image_path("cover.jpg", "main.md") == "cover.jpg"


def test_record_from_markdown_projects_fields():
    text = (
        "---\n"
        "title: Hello\n"
        "date: 2024-03-01\n"
        "tags: [python, web]\n"
        "image: cover.png\n"
        "excerpt: Short intro\n"
        "version: v2\n"
        "author: Ada\n"
        "llm: 'yes'\n"
        "draft: \"Yes\"\n"
        "---\n"
        "Body"
    )
    record = record_from_markdown("post/hello/main.md", text)
    assert record == FrontMatterRecord(
        location="post/hello/main.md",
        image="post/hello/cover.png",
        tag=["python", "web"],
        date="2024-03-01",
        excerpt="Short intro",
        version_label="v2",
        ai=True,
        draft=True,
        title="Hello",
        author="Ada",
    )


def test_record_tags_prefer_tags_over_tag():
    record = record_from_markdown("a.md", "---\ntags: first\ntag: second\n---\n")
    assert record.tag == "first"
    record = record_from_markdown("a.md", "---\ntag: second\n---\n")
    assert record.tag == "second"


@pytest.mark.parametrize(
    "line,expected",
    [
        ('draft: "Yes"', True),
        ('draft: "0"', False),
        ("draft: 1", True),
        ("draft: true", True),
        ("draft: false", False),
        ('draft: "enabled"', True),
        ('draft: "YES "', False),
        ('wip: "on"', True),
        ('unfinished: "nope"', False),
        ("inprogress: y", True),
        ("title: x", None),
    ],
)
def test_draft_flag_grammar(line, expected):
    record = record_from_markdown("a.md", f"---\n{line}\n---\n")
    assert record.draft is expected


def test_ai_flag_is_or_of_synonyms():
    record = record_from_markdown("a.md", '---\nai: "no"\naiGenerated: "TRUE"\n---\n')
    assert record.ai is True
    record = record_from_markdown("a.md", '---\nai: "no"\n---\n')
    assert record.ai is False
    assert record_from_markdown("a.md", "no front matter").ai is None


def test_record_without_front_matter_keeps_location_only():
    record = record_from_markdown("post/a.md", "# Title\n\nBody")
    assert record == FrontMatterRecord(location="post/a.md")
