"""Tags and external documentation links."""

from urllib.parse import urlsplit

from pydantic import Field

from swagno.errors import ExternalDocsError
from swagno.generator.schema import WireModel


class ExternalDocs(WireModel):
    url: str
    description: str | None = None

    def check(self) -> None:
        """Raise ExternalDocsError unless url is a usable URL."""
        if not self.url:
            raise ExternalDocsError("external docs url is required")
        try:
            urlsplit(self.url)
        except ValueError as err:
            raise ExternalDocsError(f"invalid external docs url {self.url!r}: {err}") from err


class Tag(WireModel):
    name: str
    description: str | None = None
    external_docs: ExternalDocs | None = Field(default=None, alias="externalDocs")
