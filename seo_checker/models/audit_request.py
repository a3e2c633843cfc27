from pydantic import BaseModel, Field

from seo_checker.models.audit_config import AuditConfig


class AuditRequest(BaseModel):
    root_dir: str = Field(description="Absolute path of the built site output.")
    config: AuditConfig = Field(default_factory=AuditConfig)
