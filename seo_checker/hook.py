"""Post-build entry point for static site build pipelines."""

import logging
import os
from typing import Any, Callable, Mapping, Optional, Union

from seo_checker.models.audit_config import AuditConfig
from seo_checker.models.report import AuditReport
from seo_checker.services.auditor import apply_build_gate, run_audit
from seo_checker.services.reporter import log_report

logger = logging.getLogger(__name__)

# Netlify exposes the primary site URL to build plugins under this name
DEPLOY_URL_ENV = "URL"


def on_post_build(
    publish_dir,
    inputs: Union[AuditConfig, Mapping[str, Any], None],
    fail_build: Callable[[str], None],
    deploy_url: Optional[str] = None,
) -> AuditReport:
    """Audit the built site in *publish_dir* once the build has finished.

    *inputs* are the plugin options (camelCase or snake_case keys).
    *fail_build* is invoked at most once, after every check has run, when
    ``failOnError`` is set and errors were found.  A missing or unreadable
    *publish_dir* raises before anything is reported.
    """
    config = inputs if isinstance(inputs, AuditConfig) else AuditConfig.model_validate(inputs or {})
    if deploy_url is None:
        deploy_url = os.environ.get(DEPLOY_URL_ENV)

    logger.info("SEO Checker: scanning built HTML in %s", publish_dir)
    report = run_audit(publish_dir, config, deploy_url=deploy_url)
    log_report(report)
    apply_build_gate(report, config, fail_build)
    return report
