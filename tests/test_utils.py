from nanosite import utils


def test_is_truthy_flag():
    for value in ("true", "TRUE", "1", "yes", "Y", "on", "Enabled", True, 1):
        assert utils.is_truthy_flag(value) is True
    for value in ("false", "0", "no", "off", "YES ", " yes", "", None, False, 0):
        assert utils.is_truthy_flag(value) is False


def test_slugify_tab_ascii():
    assert utils.slugify_tab("About Me") == "about-me"
    assert utils.slugify_tab("  Hello,  World!  ") == "hello-world"
    assert utils.slugify_tab("--C++ Notes--") == "c-notes"


def test_slugify_tab_hashes_non_latin_titles():
    slug = utils.slugify_tab("关于")
    assert slug.startswith("t-")
    assert slug == utils.slugify_tab("关于")
    assert slug != utils.slugify_tab("项目")
    assert set(slug[2:]) <= set("0123456789abcdefghijklmnopqrstuvwxyz")


def test_string_hash_matches_known_values():
    # h = h * 31 + c over UTF-16 code units, wrapped to signed 32 bits
    assert utils._string_hash("") == 0
    assert utils._string_hash("a") == 97
    assert utils._string_hash("ab") == 97 * 31 + 98
    assert utils._to_base36(0) == "0"
    assert utils._to_base36(35) == "z"
    assert utils._to_base36(36) == "10"


def test_join_path_and_base_dir():
    assert utils.join_path("wwwroot", "index.yaml") == "wwwroot/index.yaml"
    assert utils.join_path("", "index.yaml") == "index.yaml"
    assert utils.join_path("wwwroot/", "/post/a.md") == "wwwroot/post/a.md"
    assert utils.join_path("/site", "a.md") == "/site/a.md"
    assert utils.base_dir("post/hello/main.md") == "post/hello/"
    assert utils.base_dir("main.md") == ""
