import logging

from seo_checker.models.report import AuditReport

logger = logging.getLogger(__name__)

_PATH_COLUMN = 50


def log_report(report: AuditReport) -> None:
    """Write a human-readable summary of *report* to the log."""
    logger.info(
        "SEO report: %d pages scanned, %d fixes, %d errors, %d warnings",
        report.pages_scanned,
        report.fixes_applied,
        report.error_count,
        report.warning_count,
    )
    for fix in report.fixes:
        logger.info("Fixed %s [%s]: %s", fix.url_path, fix.field, fix.description)
    for finding in report.findings:
        log = logger.error if finding.severity == "error" else logger.warning
        log("%s: %s", finding.url_path, finding.message)
    if not report.findings:
        logger.info("All pages passed SEO checks")

    for summary in report.pages:
        status = ", ".join(summary.issues) if summary.issues else "ok"
        logger.info(
            "%s %dw  %s", summary.url_path.ljust(_PATH_COLUMN), summary.word_count, status
        )
