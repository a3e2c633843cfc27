from typing import Optional

from pydantic import BaseModel

from seo_checker.models.report import AuditReport


class AuditResponse(BaseModel):
    report: AuditReport
    build_failed: bool
    failure_message: Optional[str] = None
