from typing import Literal

from pydantic import BaseModel, ConfigDict

Severity = Literal["error", "warning"]


class Finding(BaseModel):
    model_config = ConfigDict(frozen=True)

    severity: Severity
    url_path: str
    category: str
    message: str


class Fix(BaseModel):
    model_config = ConfigDict(frozen=True)

    url_path: str
    field: str
    description: str
