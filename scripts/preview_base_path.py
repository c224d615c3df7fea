#!/usr/bin/env python3
"""Preview how a patched document resolves its base path and rewrites its links."""

from __future__ import annotations

import argparse
import sys
from html.parser import HTMLParser
from pathlib import Path

from base_path_snippets import FOOTER_SCRIPT, RESOLVE_BASE_JS

ROOT_ATTRIBUTES = ("data-base-path", "data-known-roots")


class DocumentInspector(HTMLParser):
    """Collects root element attributes and root-relative link targets."""

    LINK_ATTRS = {
        "a": "href",
        "form": "action",
    }

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root_attrs: list[tuple[str, str | None]] | None = None
        self.links: list[tuple[str, str, str]] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        tag_name = tag.lower()
        if tag_name == "html" and self.root_attrs is None:
            self.root_attrs = list(attrs)
            return

        key = self.LINK_ATTRS.get(tag_name)
        if key is None:
            return
        for name, value in attrs:
            if name.lower() == key and value and value.startswith("/"):
                self.links.append((tag_name, key, value))
                break

    def root_attribute(self, name: str) -> str | None:
        for key, value in self.root_attrs or []:
            if key == name:
                return value
        return None

    def root_attribute_count(self, name: str) -> int:
        return sum(1 for key, _ in self.root_attrs or [] if key == name)


def parse_known_roots(value: str | None) -> list[str]:
    return value.split(",") if value else []


def resolve_base_path(url_path: str, base_path: str | None, known_roots: list[str]) -> str:
    base = "/"
    if base_path and base_path != "auto":
        base = base_path
    else:
        segments = [segment for segment in url_path.split("/") if segment]
        if segments and segments[0] not in known_roots:
            base = f"/{segments[0]}/"
    if not base.endswith("/"):
        base += "/"
    return base


def rewrite_root_relative(value: str, base: str, *, fragments: bool = True) -> str:
    """Return the target the footer script gives ``value`` under ``base``.

    Forms have no fragment shortcut, so ``fragments`` is False for ``action``.
    """
    if base == "/":
        return value
    if not value.startswith("/") or value.startswith("//"):
        return value
    if value == "/":
        return base
    if fragments and value.startswith("/#"):
        return base + value[1:]
    return base.rstrip("/") + value


def inspect_document(html_text: str) -> tuple[DocumentInspector, list[str]]:
    inspector = DocumentInspector()
    inspector.feed(html_text)
    inspector.close()

    problems: list[str] = []
    if inspector.root_attrs is None:
        problems.append("no <html> element")
    for name in ROOT_ATTRIBUTES:
        count = inspector.root_attribute_count(name)
        if count != 1:
            problems.append(f"{name} appears {count} times on <html>")
    if RESOLVE_BASE_JS not in html_text:
        problems.append("base path bootstrap is missing")
    return inspector, problems


def main() -> int:
    parser = argparse.ArgumentParser(description="Preview base path resolution for a patched HTML file.")
    parser.add_argument("html_file", help="Patched HTML document to inspect.")
    parser.add_argument("--url-path", default="/", help="Browsed URL path, e.g. /pr-42/blog/post.")
    args = parser.parse_args()

    html_path = Path(args.html_file)
    if not html_path.is_file():
        raise SystemExit(f"HTML file not found: {html_path}")

    html_text = html_path.read_text(encoding="utf-8")
    inspector, problems = inspect_document(html_text)
    for problem in problems:
        print(f"WARNING: {html_path}: {problem}", file=sys.stderr)

    known_roots = parse_known_roots(inspector.root_attribute("data-known-roots"))
    base = resolve_base_path(args.url_path, inspector.root_attribute("data-base-path"), known_roots)
    print(f"Resolved base for {args.url_path}: {base}")

    rewrites_links = FOOTER_SCRIPT in html_text
    if not rewrites_links:
        print("No footer link rewriter; links are served as written.")
    for tag_name, key, value in inspector.links:
        target = value
        if rewrites_links:
            target = rewrite_root_relative(value, base, fragments=tag_name == "a")
        marker = "->" if target != value else "=="
        print(f"  <{tag_name} {key}> {value} {marker} {target}")

    return 1 if problems else 0


if __name__ == "__main__":
    raise SystemExit(main())
