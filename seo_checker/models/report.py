from typing import List

from pydantic import BaseModel

from seo_checker.models.finding import Finding, Fix


class PageSummary(BaseModel):
    url_path: str
    word_count: int
    issues: List[str]


class AuditReport(BaseModel):
    pages_scanned: int
    fixes_applied: int
    error_count: int
    warning_count: int
    fixes: List[Fix]
    findings: List[Finding]  # errors first, then warnings
    pages: List[PageSummary]
