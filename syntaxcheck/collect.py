#!/usr/bin/env python3
"""
Syntax Highlighting Verification - Collection Script
Renders test cases in a CodeMirror editor using Playwright, snapshots the
highlighted DOM and checks it against each case's expectations.
"""

import argparse
import asyncio
import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

try:
    from playwright.async_api import async_playwright, Browser, Page
except ImportError:
    print("ERROR: playwright not installed. Run: pip install playwright && playwright install chromium")
    raise SystemExit(1)

from syntaxcheck.expectations import (
    SyntaxTestCase,
    build_test_case,
    default_test_cases,
    load_test_cases,
    verify_test_case,
)
from syntaxcheck.nodes import RenderedNode, node_from_snapshot, node_to_snapshot, read_html, read_snapshot
from syntaxcheck.samples import TERRAFORM_KEYWORDS, parse_keywords
from syntaxcheck.scanner import verify_keyword_highlighting
from syntaxcheck.summary import summarize
from syntaxcheck.tokens import ClassifierConfig, DEFAULT_MARKER_PREFIX, has_syntax_highlighting

logger = logging.getLogger(__name__)

DEFAULT_EDITOR_SELECTOR = ".cm-editor"
DEFAULT_CONTENT_SELECTOR = ".cm-content"
DEFAULT_RENDER_WAIT_MS = 1000
DEFAULT_VIEWPORT = {"width": 1440, "height": 900}
NO_CASES_NOTE = "No test cases selected"

SNAPSHOT_SCRIPT = """(el) => {
    const walk = (node) => ({
        tag: node.tagName.toLowerCase(),
        classes: Array.from(node.classList),
        text: node.textContent || '',
        children: Array.from(node.children).map(walk),
    });
    return walk(el);
}"""


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def now_iso() -> str:
    return datetime.now().isoformat()


def safe_filename(value: str) -> str:
    return re.sub(r"[^\w\-]", "_", value)


def write_text(path: Path, content: str) -> None:
    path.write_text(content, encoding="utf-8")


def write_json(path: Path, data: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


async def wait_for_editor_render(page: Page, timeout_ms: int = DEFAULT_RENDER_WAIT_MS) -> None:
    """Give the editor a fixed grace period to render.

    This only waits; it does not detect that rendering has finished.
    """
    await page.wait_for_timeout(timeout_ms)


def evaluate_tree(
    test_case: SyntaxTestCase,
    root: Optional[RenderedNode],
    config: Optional[ClassifierConfig] = None,
    keywords: Sequence[str] = TERRAFORM_KEYWORDS,
) -> Dict[str, Any]:
    summary = summarize(root, config)
    verification = verify_test_case(root, test_case, config)
    keyword_report = verify_keyword_highlighting(root, keywords, config)
    return {
        "name": test_case.name,
        "passed": verification.passed,
        "failures": verification.failures,
        "summary": summary.to_dict(),
        "keywords": {"found": keyword_report.found, "missing": keyword_report.missing},
        "looks_highlighted": has_syntax_highlighting(root, config),
        "expectations": test_case.expectations.to_dict(),
    }


def verify_saved(
    path: Path,
    test_case: SyntaxTestCase,
    config: Optional[ClassifierConfig] = None,
    selector: Optional[str] = None,
    keywords: Sequence[str] = TERRAFORM_KEYWORDS,
) -> Dict[str, Any]:
    """Verify a saved ``.json`` snapshot or ``.html`` page without a browser.

    A file that cannot be read or parsed yields a failed entry carrying
    ``error`` and ``stage`` instead of raising.
    """
    path = Path(path)
    try:
        if path.suffix.lower() == ".json":
            root = read_snapshot(path)
        else:
            root = read_html(path, selector)
    except Exception as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return {
            "name": test_case.name,
            "passed": False,
            "failures": [],
            "error": str(exc),
            "stage": "read",
            "source": str(path),
        }
    entry = evaluate_tree(test_case, root, config, keywords)
    entry["source"] = str(path)
    if root is None:
        entry["warning"] = f"No editor tree found in {path}"
    return entry


def build_results(meta: Dict[str, Any], cases: List[Dict[str, Any]], limits: List[str]) -> Dict[str, Any]:
    passed = sum(1 for c in cases if c.get("passed"))
    return {
        "meta": meta,
        "totals": {
            "cases": len(cases),
            "passed": passed,
            "failed": len(cases) - passed,
        },
        "cases": cases,
        "notes": ["Limits:"] + limits if limits else ["Limits: none detected"],
    }


def render_report(results: Dict[str, Any]) -> str:
    meta = results.get("meta", {})
    totals = results.get("totals", {})

    def join_list(items: List[str]) -> str:
        if not items:
            return "-"
        return "\n".join([f"- {item}" for item in items])

    def simple_table(rows: List[Dict[str, Any]], columns: List[str]) -> str:
        if not rows:
            return "(none)"
        header = "| " + " | ".join(columns) + " |\n"
        divider = "|" + "|".join([" --- " for _ in columns]) + "|\n"
        body = ""
        for row in rows:
            body += "| " + " | ".join(str(row.get(col, "")) for col in columns) + " |\n"
        return header + divider + body

    rows = []
    for case in results.get("cases", []):
        by_type = case.get("summary", {}).get("by_type", {})
        if case.get("error"):
            status = f"ERROR ({case.get('stage', '')})"
        else:
            status = "PASS" if case.get("passed") else "FAIL"
        rows.append({
            "case": case.get("name", ""),
            "status": status,
            "total": case.get("summary", {}).get("total", 0),
            "by_type": ", ".join(f"{t}={n}" for t, n in by_type.items()) or "-",
        })

    lines = [
        "# Syntax Highlighting Report",
        "",
        f"- Target: {meta.get('target', '')}",
        f"- Collected at: {meta.get('collected_at', '')}",
        f"- Marker prefix: `{meta.get('marker_prefix', '')}`",
        f"- Cases: {totals.get('cases', 0)} (passed {totals.get('passed', 0)}, failed {totals.get('failed', 0)})",
        "",
        "## Cases",
        "",
        simple_table(rows, ["case", "status", "total", "by_type"]),
        "",
        "## Failures",
        "",
    ]
    failures = []
    for case in results.get("cases", []):
        for failure in case.get("failures", []):
            failures.append(f"{case.get('name')}: {failure}")
        if case.get("error"):
            failures.append(f"{case.get('name')}: {case.get('error')}")
    lines.append(join_list(failures))
    lines += ["", "## Limits", "", join_list(results.get("notes", [])), ""]
    return "\n".join(lines)


class EditorCollector:
    def __init__(
        self,
        url: str,
        output_dir: str,
        test_cases: List[SyntaxTestCase],
        selector: str = DEFAULT_EDITOR_SELECTOR,
        content_selector: str = DEFAULT_CONTENT_SELECTOR,
        render_wait_ms: int = DEFAULT_RENDER_WAIT_MS,
        config: Optional[ClassifierConfig] = None,
        keywords: Optional[List[str]] = None,
        keep_content: bool = False,
        viewport: Optional[Dict[str, int]] = None,
    ):
        self.url = url
        self.test_cases = test_cases
        self.selector = selector
        self.content_selector = content_selector
        self.render_wait_ms = render_wait_ms
        self.config = config or ClassifierConfig()
        self.keywords = keywords or list(TERRAFORM_KEYWORDS)
        self.keep_content = keep_content
        self.viewport = viewport or DEFAULT_VIEWPORT

        self.output_dir = Path(output_dir)
        self.evidence_dir = self.output_dir / "evidence"
        ensure_dir(self.evidence_dir)

        self.cases: List[Dict[str, Any]] = []
        self.limits: List[str] = []
        self.evidence_paths = {
            "html": set(),
            "snapshots": set(),
        }
        self.used_tags = set()

    async def collect_all(self) -> Dict[str, Any]:
        if not self.test_cases:
            print("⚠️ No test cases selected")
            self.limits.append(NO_CASES_NOTE)
        else:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=True)
                for test_case in self.test_cases:
                    print(f"🔎 {test_case.name}")
                    await self.collect_case(browser, test_case)
                await browser.close()

        results = self.build_results()
        results_path = self.output_dir / "results.json"
        write_json(results_path, results)

        report_path = self.output_dir / "report.md"
        write_text(report_path, render_report(results))

        print("\n✅ Collection complete")
        print(f"Results: {results_path}")
        print(f"Report: {report_path}")
        return results

    def unique_tag(self, name: str) -> str:
        """Evidence file stem for ``name``, suffixed when already used this run."""
        base = safe_filename(name)
        tag = base
        index = 1
        while tag in self.used_tags:
            index += 1
            tag = f"{base}_{index}"
        self.used_tags.add(tag)
        return tag

    async def collect_case(self, browser: Browser, test_case: SyntaxTestCase) -> None:
        safe_tag = self.unique_tag(test_case.name)
        stage = "init"

        context = await browser.new_context(viewport=self.viewport, device_scale_factor=1)
        page = await context.new_page()

        try:
            stage = "goto"
            await page.goto(self.url, wait_until="domcontentloaded", timeout=60000)
            stage = "wait_editor"
            await page.wait_for_selector(self.selector, state="attached", timeout=15000)

            if not self.keep_content:
                stage = "set_code"
                await self.set_editor_code(page, test_case.code)

            stage = "wait_render"
            await wait_for_editor_render(page, self.render_wait_ms)

            stage = "snapshot"
            snapshot, html = await self.snapshot_editor(page)
            root = node_from_snapshot(snapshot)

            stage = "save_evidence"
            self.save_evidence(safe_tag, root, html)

            stage = "verify"
            entry = evaluate_tree(test_case, root, self.config, self.keywords)
            self.cases.append(entry)
            status = "✅ passed" if entry["passed"] else "❌ failed"
            print(f"   {status} ({entry['summary']['total']} highlighted tokens)")
        except Exception as exc:
            logger.warning("Case %s failed at %s: %s", test_case.name, stage, exc)
            self.cases.append({
                "name": test_case.name,
                "passed": False,
                "failures": [],
                "error": str(exc),
                "stage": stage,
            })
            self.limits.append(f"Failed to collect {test_case.name} at {stage}: {exc}")
        finally:
            await context.close()

    async def set_editor_code(self, page: Page, code: str) -> None:
        content = await page.query_selector(self.content_selector)
        if not content:
            raise RuntimeError(f"editor content not found: {self.content_selector}")
        await content.click()
        await page.keyboard.press("ControlOrMeta+A")
        await page.keyboard.press("Delete")
        await page.keyboard.insert_text(code)

    async def snapshot_editor(self, page: Page):
        editor = await page.query_selector(self.selector)
        if not editor:
            raise RuntimeError(f"editor not found: {self.selector}")
        snapshot = await editor.evaluate(SNAPSHOT_SCRIPT)
        html = await editor.evaluate("el => el.outerHTML")
        return snapshot, html

    def save_evidence(self, safe_tag: str, root: Optional[RenderedNode], html: str) -> None:
        html_path = self.evidence_dir / f"{safe_tag}.html"
        write_text(html_path, html)
        self.evidence_paths["html"].add(str(html_path.relative_to(self.output_dir)))

        snapshot_path = self.evidence_dir / f"{safe_tag}.json"
        write_json(snapshot_path, node_to_snapshot(root) if root is not None else {})
        self.evidence_paths["snapshots"].add(str(snapshot_path.relative_to(self.output_dir)))

    def build_results(self) -> Dict[str, Any]:
        meta = {
            "target": self.url,
            "collected_at": now_iso(),
            "selector": self.selector,
            "render_wait_ms": self.render_wait_ms,
            "marker_prefix": self.config.marker_prefix,
            "evidence": {key: sorted(paths) for key, paths in self.evidence_paths.items()},
        }
        return build_results(meta, self.cases, self.limits)


def select_test_cases(
    cases_path: Optional[str],
    names: Optional[List[str]],
    limits: Optional[List[str]] = None,
) -> List[SyntaxTestCase]:
    cases = load_test_cases(cases_path) if cases_path else default_test_cases()
    if not names:
        return cases
    by_name = {c.name: c for c in cases}
    selected = []
    for name in names:
        if name in by_name:
            selected.append(by_name[name])
        elif limits is not None:
            limits.append(f"Unknown test case '{name}'")
    return selected


def run_offline(args: argparse.Namespace, config: ClassifierConfig) -> Dict[str, Any]:
    source = Path(args.snapshot or args.html)
    limits: List[str] = []
    keywords = parse_keywords(args.keywords)

    if args.cases or args.case:
        cases = select_test_cases(args.cases, args.case, limits)
    else:
        cases = [build_test_case(source.stem, "")]

    if not cases:
        print("⚠️ No test cases selected")
        limits.append(NO_CASES_NOTE)

    entries = []
    for test_case in cases:
        entry = verify_saved(source, test_case, config, selector=args.selector if args.html else None, keywords=keywords)
        if entry.get("warning"):
            limits.append(entry.pop("warning"))
        if entry.get("error"):
            limits.append(f"Failed to verify {test_case.name} at {entry['stage']}: {entry['error']}")
        entries.append(entry)

    meta = {
        "target": str(source),
        "collected_at": now_iso(),
        "selector": args.selector,
        "marker_prefix": config.marker_prefix,
    }
    results = build_results(meta, entries, limits)

    output_dir = Path(args.output)
    ensure_dir(output_dir)
    write_json(output_dir / "results.json", results)
    write_text(output_dir / "report.md", render_report(results))
    print(f"\n✅ Verified {source}")
    print(f"Results: {output_dir / 'results.json'}")
    return results


async def main_async(args: argparse.Namespace) -> Dict[str, Any]:
    config = ClassifierConfig(marker_prefix=args.marker_prefix)
    if args.snapshot or args.html:
        return run_offline(args, config)

    limits: List[str] = []
    cases = select_test_cases(args.cases, args.case, limits)
    collector = EditorCollector(
        url=args.url,
        output_dir=args.output,
        test_cases=cases,
        selector=args.selector,
        content_selector=args.content_selector,
        render_wait_ms=args.wait_ms,
        config=config,
        keywords=parse_keywords(args.keywords),
        keep_content=args.keep_content,
    )
    collector.limits.extend(limits)
    return await collector.collect_all()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Verify syntax highlighting in a rendered CodeMirror editor")
    parser.add_argument("url", nargs="?", help="URL of a page hosting the editor")
    parser.add_argument("--snapshot", help="Verify a saved JSON snapshot instead of opening a browser")
    parser.add_argument("--html", help="Verify a saved HTML file instead of opening a browser")
    parser.add_argument("--output", "-o", default="./syntaxcheck-output", help="Output directory")
    parser.add_argument("--selector", default=DEFAULT_EDITOR_SELECTOR, help="Editor container selector")
    parser.add_argument("--content-selector", default=DEFAULT_CONTENT_SELECTOR, help="Editable content selector")
    parser.add_argument("--wait-ms", type=int, default=DEFAULT_RENDER_WAIT_MS, help="Render grace period in ms")
    parser.add_argument("--marker-prefix", default=DEFAULT_MARKER_PREFIX, help="Token class prefix")
    parser.add_argument("--cases", help="Path to a JSON file of test cases")
    parser.add_argument("--case", action="append", help="Only run the named test case (repeatable)")
    parser.add_argument("--keywords", help="Comma-separated keywords to look for")
    parser.add_argument(
        "--keep-content",
        action="store_true",
        help="Verify the editor as loaded instead of typing each case's code",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    if not args.url and not args.snapshot and not args.html:
        parser.error("a url, --snapshot or --html is required")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    results = asyncio.run(main_async(args))
    if results["totals"]["failed"] or not results["totals"]["cases"]:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
