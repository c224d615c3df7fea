# tests/conftest.py
import pytest

SITE_PAGE = (
    '<!doctype html><html lang="en"><head><meta charset="utf-8"><title>Post</title>'
    '<link rel="stylesheet" href="/assets/css/main.css">'
    '<script async="async" src="/assets/js/main.bundle.js"></script></head>'
    '<body><a href="/">Home</a><a href="/#top">Top</a><a href="/blog/post">Post</a>'
    '<a href="//external.com">External</a><form action="/search"></form></body></html>'
)

ADMIN_PAGE = (
    '<!doctype html><html lang="en"><head><meta charset="utf-8">'
    '<script type="module" src="/admin/preview-templates/index.js"></script></head>'
    '<body><div id="root"></div></body></html>'
)


@pytest.fixture
def site_tree(tmp_path):
    """
    A small built site:
    - top-level pages and section directories
    - the admin entry page
    - infrastructure directories that must never be touched
    """
    (tmp_path / "index.html").write_text(SITE_PAGE, encoding="utf-8")
    (tmp_path / "about.html").write_text(SITE_PAGE, encoding="utf-8")
    (tmp_path / "notes.txt").write_text("not a page", encoding="utf-8")

    (tmp_path / "admin").mkdir()
    (tmp_path / "admin" / "index.html").write_text(ADMIN_PAGE, encoding="utf-8")

    post_dir = tmp_path / "blog" / "post"
    post_dir.mkdir(parents=True)
    (post_dir / "index.html").write_text(SITE_PAGE, encoding="utf-8")

    (tmp_path / "assets" / "css").mkdir(parents=True)
    (tmp_path / "assets" / "css" / "main.css").write_text("body{}", encoding="utf-8")

    for ignored in (".git", "node_modules", "blog/node_modules", ".cache"):
        ignored_dir = tmp_path / ignored
        ignored_dir.mkdir(parents=True)
        (ignored_dir / "page.html").write_text(SITE_PAGE, encoding="utf-8")

    return tmp_path
