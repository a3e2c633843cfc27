from typing import List, Optional

from pydantic import BaseModel


class ImageRef(BaseModel):
    src: str
    alt: Optional[str] = None
    has_alt: bool = False


class Page(BaseModel):
    """One rendered HTML document and the SEO fields extracted from it.

    ``None`` means the tag or attribute was not found; an empty string means it
    is present but empty.
    """

    file_path: str
    url_path: str
    title: Optional[str] = None
    description: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    canonical: Optional[str] = None
    images: List[ImageRef] = []
    internal_links: List[str] = []  # raw hrefs, duplicates kept
    word_count: int = 0
