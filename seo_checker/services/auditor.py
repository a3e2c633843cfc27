"""Audit orchestration: load, process pages in parallel, then check the whole site."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, NamedTuple, Optional

from seo_checker.models.audit_config import AuditConfig
from seo_checker.models.finding import Finding, Fix
from seo_checker.models.page import Page
from seo_checker.models.report import AuditReport, PageSummary
from seo_checker.services.autofix import apply_fixes
from seo_checker.services.detector import detect_issues
from seo_checker.services.extractor import extract
from seo_checker.services.loader import DocumentEntry, walk
from seo_checker.services.paths import url_path_for
from seo_checker.services.site_graph import build_site_graph

logger = logging.getLogger(__name__)

# surrogateescape round-trips bytes that are not valid UTF-8 on rewrite
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


class ProcessedPage(NamedTuple):
    page: Page
    fixes: List[Fix]


def process_document(entry: DocumentEntry, config: AuditConfig, site_url: str = "") -> ProcessedPage:
    """Extract one document and, when enabled, repair it and write it back.

    The file is rewritten at most once, and only when a fix was applied.  I/O
    errors propagate to the caller.
    """
    html = entry.absolute_path.read_text(encoding=_ENCODING, errors=_ERRORS)
    fields = extract(html)
    page = Page(
        file_path=entry.relative_path,
        url_path=url_path_for(entry.relative_path),
        **fields._asdict(),
    )

    fixes: List[Fix] = []
    if config.auto_fix:
        html, fixes = apply_fixes(page, html, config, site_url)
        if fixes:
            entry.absolute_path.write_text(html, encoding=_ENCODING, errors=_ERRORS)
            logger.info("Rewrote %s with %d fix(es)", entry.relative_path, len(fixes))
    return ProcessedPage(page, fixes)


def build_report(pages: List[Page], fixes: List[Fix], findings: List[Finding]) -> AuditReport:
    """Assemble the report; errors are listed before warnings, each in detection order."""
    errors = [finding for finding in findings if finding.severity == "error"]
    warnings = [finding for finding in findings if finding.severity == "warning"]

    tags: Dict[str, List[str]] = {page.url_path: [] for page in pages}
    for finding in findings:
        page_tags = tags.setdefault(finding.url_path, [])
        if finding.category not in page_tags:
            page_tags.append(finding.category)

    return AuditReport(
        pages_scanned=len(pages),
        fixes_applied=len(fixes),
        error_count=len(errors),
        warning_count=len(warnings),
        fixes=fixes,
        findings=errors + warnings,
        pages=[
            PageSummary(url_path=page.url_path, word_count=page.word_count, issues=tags[page.url_path])
            for page in pages
        ],
    )


def failure_message(error_count: int) -> str:
    return f"SEO Checker found {error_count} error(s). Fix them or set failOnError: false."


def apply_build_gate(
    report: AuditReport,
    config: AuditConfig,
    fail_build: Callable[[str], None],
) -> bool:
    """Call *fail_build* once when errors were found and ``fail_on_error`` is set.

    Returns whether the build was failed.
    """
    if not (config.fail_on_error and report.error_count > 0):
        return False
    fail_build(failure_message(report.error_count))
    return True


def run_audit(
    root_dir,
    config: Optional[AuditConfig] = None,
    deploy_url: Optional[str] = None,
) -> AuditReport:
    """Audit every HTML file under *root_dir* and return the report.

    Per-page extraction and fixing fan out over a thread pool; the site graph
    and the issue checks run afterwards over the joined, load-ordered pages.
    Any I/O error aborts the run before a report exists.
    """
    config = config or AuditConfig()
    site_url = config.resolve_site_url(deploy_url)
    entries = walk(root_dir, config.ignore_paths)
    if not entries:
        logger.warning("No HTML files found in %s", root_dir)

    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        processed = list(executor.map(lambda entry: process_document(entry, config, site_url), entries))

    pages = [item.page for item in processed]
    fixes = [fix for item in processed for fix in item.fixes]

    graph = build_site_graph(pages)
    findings = detect_issues(pages, graph, config)
    report = build_report(pages, fixes, findings)
    logger.info(
        "Audit complete: %d pages, %d fixes, %d errors, %d warnings",
        report.pages_scanned,
        report.fixes_applied,
        report.error_count,
        report.warning_count,
    )
    return report
