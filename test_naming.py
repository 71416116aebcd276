"""
Tests for page and resource filename derivation.
"""

import os

from page_loader.core.naming import (
    derive_names,
    page_filename,
    resource_dir_name,
    resource_filename,
)


def test_page_filename_from_host_and_path():
    assert page_filename("https://ru.hexlet.io/courses") == "ru-hexlet-io-courses.html"
    assert page_filename("https://site.com/blog") == "site-com-blog.html"


def test_page_filename_for_root_and_trailing_slash():
    assert page_filename("https://example.com") == "example-com.html"
    assert page_filename("https://example.com/") == "example-com.html"
    assert page_filename("https://site.com/blog/") == "site-com-blog.html"


def test_page_filename_ignores_query_and_fragment():
    assert page_filename("https://example.com/search?q=1#top") == "example-com-search.html"


def test_page_filename_collapses_separators():
    assert page_filename("https://example.com//a--b__c.php") == "example-com-a-b-c-php.html"


def test_resource_filename_keeps_extension():
    assert resource_filename("https://example.com/a.png") == "example-com-a.png"
    assert (resource_filename("https://ru.hexlet.io/assets/professions/nodejs.png")
            == "ru-hexlet-io-assets-professions-nodejs.png")
    assert resource_filename("https://site.com/blog/about.html") == "site-com-blog-about.html"


def test_resource_filename_keeps_dots_in_path():
    assert resource_filename("https://example.com/css/main.min.css") == "example-com-css-main.min.css"


def test_resource_filename_without_extension():
    assert resource_filename("https://site.com/blog/about") == "site-com-blog-about"


def test_resource_filename_replaces_unsafe_characters():
    assert resource_filename("https://example.com/a_b~c/x.js") == "example-com-a-b-c-x.js"
    # Spaces are percent-encoded before substitution
    assert resource_filename("https://example.com/path with spaces/x.js") == "example-com-path-20with-20spaces-x.js"


def test_resource_filename_truncates_long_names_keeping_extension():
    url = "https://example.com/" + "a" * 300 + ".png"
    name = resource_filename(url)
    assert len(name) == 200
    assert name.startswith("example-com-aaaa")
    assert name.endswith(".png")


def test_resource_filename_truncates_when_extension_exceeds_limit():
    name = resource_filename("https://e.com/x.abcdefghijklmnop", max_length=10)
    assert name == "e-com-x.ab"


def test_resource_filename_is_deterministic():
    url = "https://example.com/static/app.js"
    assert resource_filename(url) == resource_filename(url)
    assert page_filename(url) == page_filename(url)


def test_distinct_query_strings_collide():
    first = resource_filename("https://example.com/img.png?v=1")
    second = resource_filename("https://example.com/img.png?v=2")
    assert first == second == "example-com-img.png"


def test_resource_dir_name_replaces_extension():
    assert resource_dir_name("example-com.html") == "example-com_files"
    assert resource_dir_name("ru-hexlet-io-courses.html") == "ru-hexlet-io-courses_files"


def test_derive_names(tmp_path):
    names = derive_names("https://site.com/blog", str(tmp_path))
    assert names.page_filename == "site-com-blog.html"
    assert names.resource_dir_name == "site-com-blog_files"
    assert names.resource_dir_path == os.path.join(str(tmp_path), "site-com-blog_files")
    assert names.page_path(str(tmp_path)) == os.path.join(str(tmp_path), "site-com-blog.html")


def test_non_ascii_paths_get_distinct_names():
    photo = resource_filename("https://example.com/фото.png")
    cat = resource_filename("https://example.com/кот.png")

    assert photo == "example-com-D1-84-D0-BE-D1-82-D0-BE.png"
    assert cat == "example-com-D0-BA-D0-BE-D1-82.png"


def test_encoded_and_raw_paths_share_a_name():
    raw = "https://example.com/фото.png"
    encoded = "https://example.com/%D1%84%D0%BE%D1%82%D0%BE.png"
    assert resource_filename(raw) == resource_filename(encoded)
    assert page_filename(raw) == page_filename(encoded)


def test_idn_host_uses_punycode():
    assert page_filename("https://пример.рф/") == "xn-e1afmkfd-xn-p1ai.html"
    assert resource_filename("https://пример.рф/a.png") == "xn-e1afmkfd-xn-p1ai-a.png"
    names = derive_names("https://пример.рф/", "/tmp")
    assert names.resource_dir_name == "xn-e1afmkfd-xn-p1ai_files"
