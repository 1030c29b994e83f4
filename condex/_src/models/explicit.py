from typing import List, Optional

from pydantic import BaseModel, Field

from condex._src.constants import EXPLICIT_MARKER


PLATFORM_COMMENT_PREFIX = "# platform:"


class ExplicitEnvironmentEntry(BaseModel):
    """A pinned package url, the md5 digest lives in the fragment"""
    url: str


class ExplicitEnvironmentSpec(BaseModel):
    """A conda explicit environment file for a single platform

    Entries keep the order of the lock so re-exports stay diffable.
    """
    platform: Optional[str] = None
    packages: List[ExplicitEnvironmentEntry] = Field(default=[])

    def to_spec_string(self) -> str:
        lines = []
        if self.platform is not None:
            lines.append(f"{PLATFORM_COMMENT_PREFIX} {self.platform}")
        lines.append(EXPLICIT_MARKER)
        lines.extend(entry.url for entry in self.packages)
        return "".join(f"{line}\n" for line in lines)

