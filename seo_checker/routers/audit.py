import logging
from typing import List

from fastapi import APIRouter, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from slowapi import Limiter
from slowapi.util import get_remote_address

from seo_checker.models.audit_request import AuditRequest
from seo_checker.models.audit_response import AuditResponse
from seo_checker.services.auditor import apply_build_gate, run_audit

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()


@router.post(
    "/audit",
    response_model=AuditResponse,
    summary="Audit the built HTML of a static site",
    description=(
        "Scans every `.html` file below `root_dir`, applies auto-fixes in place "
        "when `config.autoFix` is enabled, and returns all findings.  "
        "`build_failed` is true when `config.failOnError` is set and at least "
        "one error was found."
    ),
)
@limiter.limit("10/minute")
async def audit_endpoint(request: Request, body: AuditRequest) -> AuditResponse:
    """Run a full site audit on the server's filesystem."""
    logger.info(
        "Audit request received",
        extra={"root_dir": body.root_dir, "auto_fix": body.config.auto_fix},
    )

    try:
        report = await run_in_threadpool(run_audit, body.root_dir, body.config)
    except (FileNotFoundError, NotADirectoryError) as exc:
        logger.warning("Invalid build directory: %s – %s", body.root_dir, exc)
        raise HTTPException(status_code=400, detail=str(exc))

    messages: List[str] = []
    build_failed = apply_build_gate(report, body.config, messages.append)
    return AuditResponse(
        report=report,
        build_failed=build_failed,
        failure_message=messages[0] if messages else None,
    )
