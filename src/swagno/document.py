"""Shared plumbing for the Swagger 2.0 and OpenAPI 3.0 documents."""

import logging
from pathlib import Path

import yaml
from pydantic import Field

from swagno.components.endpoint import Endpoint
from swagno.components.tag import Tag
from swagno.config import Config, Contact, License
from swagno.errors import ExportError, SchemaGenerationError
from swagno.generator.context import DefinitionTable
from swagno.generator.definition import DefinitionGenerator
from swagno.generator.dialect import Dialect
from swagno.generator.schema import WireModel

logger = logging.getLogger(__name__)


class Info(WireModel):
    title: str
    version: str
    description: str | None = None
    terms_of_service: str | None = Field(default=None, alias="termsOfService")
    contact: Contact | None = None
    license: License | None = None


class Document:
    """Collects endpoints and renders them into a document.

    Subclasses fix the dialect and implement generate(). Generation can
    run any number of times; each run starts from an empty definition table.
    """

    dialect: Dialect
    default_title: str
    default_version: str

    def __init__(self, config: Config | None = None):
        self.config = config or Config()
        self.endpoints: list[Endpoint] = []
        self.tags: list[Tag] = []

    def configure(self, config: Config) -> None:
        self.config = config

    def add_endpoint(self, endpoint: Endpoint) -> None:
        self.endpoints.append(endpoint)

    def add_endpoints(self, endpoints: list[Endpoint]) -> None:
        self.endpoints.extend(endpoints)

    def add_tags(self, *tags: Tag) -> None:
        self.tags.extend(tags)

    def info(self) -> Info:
        return Info(
            title=self.config.title or self.default_title,
            version=self.config.version or self.default_version,
            description=self.config.description,
            terms_of_service=self.config.terms_of_service,
            contact=self.config.contact,
            license=self.config.license,
        )

    def _payloads(self, endpoint: Endpoint) -> list:
        return [v for v in (endpoint.body, *endpoint.returns()) if v is not None]

    def build_definitions(self, endpoints: list[Endpoint]) -> DefinitionTable:
        """Register definitions for every body, return and error payload."""
        table = DefinitionTable(self.dialect)
        generator = DefinitionGenerator(table, self.config.recursive_pointer_refs)
        for endpoint in endpoints:
            try:
                for payload in self._payloads(endpoint):
                    generator.create_definition(payload)
            except SchemaGenerationError:
                logger.error("Failed to build schemas for %s %s", endpoint.method.value, endpoint.path)
                raise
        return table

    def generate(self) -> WireModel:
        raise NotImplementedError

    def to_dict(self) -> dict:
        return self.generate().to_wire()

    def to_json(self, indent: int = 2) -> str:
        document = self.generate()
        try:
            return document.model_dump_json(indent=indent, by_alias=True, exclude_none=True)
        except ValueError as err:
            raise ExportError(f"cannot serialise document to JSON: {err}") from err

    def to_yaml(self) -> str:
        try:
            return yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)
        except yaml.YAMLError as err:
            raise ExportError(f"cannot serialise document to YAML: {err}") from err

    def export(self, path: Path | str, fmt: str = "auto") -> Path:
        """Write the document to path; fmt "auto" picks YAML for .yaml/.yml files."""
        path = Path(path)
        if fmt == "auto":
            fmt = "yaml" if path.suffix.lower() in (".yaml", ".yml") else "json"
        if fmt not in ("json", "yaml"):
            raise ExportError(f"unknown export format: {fmt!r}")
        content = self.to_yaml() if fmt == "yaml" else self.to_json()
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as err:
            logger.error("Could not write %s: %s", path, err)
            raise ExportError(f"cannot write {path}: {err}") from err
        logger.info("Exported %d endpoints to %s", len(self.endpoints), path)
        return path
