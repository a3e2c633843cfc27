from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AuditConfig(BaseModel):
    """Options accepted from the build system.

    Keys may be given in snake_case or in the camelCase used by build plugin
    manifests (``minWordCount``, ``failOnError``, ...).  Unknown keys are ignored.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    min_word_count: int = Field(
        default=300,
        ge=0,
        description="Content pages with fewer words are reported as thin content.",
    )
    fail_on_error: bool = Field(
        default=False,
        description="Signal a build failure when at least one error is found.",
    )
    auto_fix: bool = Field(
        default=True,
        description="Repair fixable issues in the built HTML before checking.",
    )
    default_og_image: str = Field(
        default="/og-image.png",
        description="Image used when a page declares no og:image.",
    )
    site_url: str = Field(
        default="",
        description="Base URL for canonical and og:image fixes. Falls back to the deploy URL.",
    )
    ignore_paths: List[str] = Field(
        default_factory=list,
        description="Glob patterns of HTML files to leave out of the audit.",
        examples=[["404.html", "drafts/*"]],
    )
    content_markers: List[str] = Field(
        default_factory=lambda: ["/blog/", "/articles/", "/post/"],
        description="URL substrings marking content pages (thin-content and orphan checks).",
    )
    max_workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="Worker threads for per-page processing (default: executor sizing).",
    )

    def resolve_site_url(self, deploy_url: Optional[str] = None) -> str:
        """Return the base URL without a trailing slash, or an empty string."""
        return (self.site_url or deploy_url or "").rstrip("/")

    def is_content_page(self, url_path: str) -> bool:
        return any(marker in url_path for marker in self.content_markers)
