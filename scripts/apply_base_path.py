#!/usr/bin/env python3
"""Post-process a static build so it can be served from any URL prefix."""

from __future__ import annotations

import argparse
import json
import re
import sys
from pathlib import Path

from base_path_snippets import ADMIN, SITE, inject_bootstrap, inject_link_rewriter

IGNORE_DIRS = {".git", "node_modules"}

ADMIN_DOCUMENTS = ("admin/index.html", "src/admin/index.html")


def _is_dir(entry: Path) -> bool:
    return entry.is_dir() and not entry.is_symlink()


def _is_file(entry: Path) -> bool:
    return entry.is_file() and not entry.is_symlink()


def list_top_level_segments(root: Path) -> list[str]:
    names = set()
    for entry in root.iterdir():
        if entry.name in IGNORE_DIRS or entry.name.startswith("."):
            continue
        if _is_dir(entry) or entry.name.endswith(".html"):
            names.add(entry.name)
    return sorted(names)


def walk_html_files(directory: Path) -> list[Path]:
    results: list[Path] = []
    for entry in sorted(directory.iterdir(), key=lambda path: path.name):
        if entry.name in IGNORE_DIRS:
            continue
        if _is_dir(entry):
            results.extend(walk_html_files(entry))
        elif _is_file(entry) and entry.name.endswith(".html"):
            results.append(entry)
    return results


def document_kind(relative: str) -> str:
    return ADMIN if relative in ADMIN_DOCUMENTS else SITE


def ensure_attribute(html_text: str, attribute: str, value: str, *, overwrite: bool = True) -> str:
    """Set ``attribute`` on the document, updating the first existing occurrence.

    The lookup runs over the whole text, not just the ``<html>`` tag, so an
    attribute of the same name on another element is the one that gets updated.
    """
    match = re.search(rf'{re.escape(attribute)}="[^"]*"', html_text)
    if match:
        if not overwrite:
            return html_text
        return f'{html_text[:match.start()]}{attribute}="{value}"{html_text[match.end():]}'
    return html_text.replace("<html", f'<html {attribute}="{value}"', 1)


def patch_document(
    html_text: str, relative: str, known_roots: list[str], *, base_path: str | None = None
) -> tuple[str, bool]:
    """Return ``(patched_text, missing_anchor)`` for one document.

    ``base_path`` overwrites ``data-base-path``; without it an existing value is
    kept and ``auto`` is inserted where the attribute is missing.
    """
    kind = document_kind(relative)
    updated = ensure_attribute(
        html_text,
        "data-base-path",
        base_path or "auto",
        overwrite=base_path is not None,
    )
    updated = ensure_attribute(updated, "data-known-roots", ",".join(known_roots))
    updated = inject_bootstrap(updated, kind)
    if kind == ADMIN:
        return updated, False
    return inject_link_rewriter(updated)


def main() -> int:
    parser = argparse.ArgumentParser(description="Make a static build servable from any URL prefix.")
    parser.add_argument(
        "--root",
        default=".",
        help="Project tree to rewrite in place (defaults to the working directory).",
    )
    parser.add_argument(
        "--base-path",
        default=None,
        help="Explicit data-base-path value (e.g. /custom/ or auto). Existing values are kept when omitted.",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only list documents that still need patching and exit 1 if there are any.",
    )
    parser.add_argument("--report", default=None, help="Optional path for a JSON run report.")
    args = parser.parse_args()
    if args.base_path is not None and (not args.base_path or '"' in args.base_path):
        parser.error("--base-path must be a non-empty value without double quotes")

    root = Path(args.root).resolve()
    if not root.is_dir():
        raise SystemExit(f"Project root not found: {root}")

    known_roots = list_top_level_segments(root)
    html_files = walk_html_files(root)

    changed: list[str] = []
    missing_anchors: list[str] = []
    admin_documents = 0
    for html_file in html_files:
        relative = html_file.relative_to(root).as_posix()
        if document_kind(relative) == ADMIN:
            admin_documents += 1
        original = html_file.read_text(encoding="utf-8")
        updated, missing_anchor = patch_document(original, relative, known_roots, base_path=args.base_path)
        if missing_anchor:
            print(f"WARNING: No closing tags for {relative}", file=sys.stderr)
            missing_anchors.append(relative)
        if updated == original:
            continue
        changed.append(relative)
        if args.check:
            print(f"Needs patching: {relative}")
        else:
            html_file.write_text(updated, encoding="utf-8")

    verb = "need patching" if args.check else "updated"
    print(
        f"Scanned {len(html_files)} HTML files ({admin_documents} admin). "
        f"{len(changed)} {verb}. Known roots: {','.join(known_roots) or '(none)'}."
    )

    if args.report:
        report = {
            "root": str(root),
            "known_roots": known_roots,
            "check_only": args.check,
            "counts": {
                "html_files": len(html_files),
                "admin_documents": admin_documents,
                "changed": len(changed),
                "missing_closing_tags": len(missing_anchors),
            },
            "changed_files": changed,
            "missing_closing_tags": missing_anchors,
        }
        report_path = Path(args.report).resolve()
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
        print(f"Report written to: {report_path}")

    if args.check and changed:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
