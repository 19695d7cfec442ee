import pytest

from nanosite.languages import (
    KNOWN_LANGUAGES,
    content_languages,
    fallback_chain,
    language_buckets,
    language_label,
    normalize_lang,
    pick_bucket,
)


def _accept(value):
    return value if isinstance(value, str) else None


@pytest.mark.parametrize(
    "label,expected",
    [
        ("English", "en"),
        (" EN ", "en"),
        ("简体中文", "zh"),
        ("中文", "zh"),
        ("zh-CN", "zh"),
        ("zh-TW", "zh-tw"),
        ("正體中文", "zh-tw"),
        ("繁體中文（香港）", "zh-hk"),
        ("日本語", "ja"),
        ("jp", "ja"),
        ("FR", "fr"),
        ("pt-BR", "pt-br"),
        ("default", "default"),
        ("Klingon", "Klingon"),
        (None, ""),
    ],
)
def test_normalize_lang(label, expected):
    assert normalize_lang(label) == expected


def test_normalize_lang_is_idempotent():
    labels = [
        "English", "en", "EN", "中文", "简体中文", "zh-cn", "zh-Hans", "zh-TW", "zh-hant",
        "繁體中文", "繁體中文（香港）", "日本語", "にほんご", "jp", "fr", "de-AT",
        "default", "  Deutsch ", "x", "", "español", "123",
    ]
    for label in labels:
        once = normalize_lang(label)
        assert normalize_lang(once) == once


def test_fallback_chain_dedupes():
    assert fallback_chain("en", "en") == ["en", "default"]
    assert fallback_chain("日本語", "zh") == ["ja", "zh", "en", "default"]
    assert fallback_chain(None, "zh") == ["zh", "en", "default"]


def test_language_buckets_normalize_and_keep_first():
    node = {"English": "a.md", "en": "b.md", "tag": "x", "ja": "c.md"}
    buckets = language_buckets(node)
    assert buckets == {"en": "a.md", "ja": "c.md"}
    assert list(buckets) == ["en", "ja"]


def test_pick_bucket_follows_fallback_order():
    buckets = {"ja": "ja.md", "zh": "zh.md", "en": "en.md", "default": "d.md"}
    assert pick_bucket(buckets, "ja", "zh", _accept) == "ja.md"
    assert pick_bucket(buckets, "fr", "zh", _accept) == "zh.md"
    assert pick_bucket(buckets, "fr", "de", _accept) == "en.md"
    assert pick_bucket({"default": "d.md", "ja": "j.md"}, "fr", "de", _accept) == "d.md"
    # Nothing in the chain: first declared bucket wins
    assert pick_bucket({"ja": "j.md", "zh": "z.md"}, "fr", "de", _accept) == "j.md"


def test_pick_bucket_skips_unusable_values():
    buckets = {"en": 42, "zh": "z.md"}
    assert pick_bucket(buckets, "en", "en", _accept) == "z.md"
    assert pick_bucket({"en": None}, "en", "en", _accept) is None


def test_language_labels_and_content_languages():
    assert language_label("zh-TW") == "正體中文（台灣）"
    assert language_label("fr") == "fr"
    assert "en" in KNOWN_LANGUAGES
    assert content_languages(["en", "default", "ja"]) == {"en", "ja"}
