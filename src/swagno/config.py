"""Document configuration, loadable from YAML."""

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from swagno.errors import ConfigError
from swagno.generator.schema import WireModel


class Contact(WireModel):
    name: str | None = None
    url: str | None = None
    email: str | None = None


class License(WireModel):
    name: str
    url: str | None = None


class ServerVariable(WireModel):
    default: str
    enum: list[str] | None = None
    description: str | None = None


class Server(WireModel):
    url: str
    description: str | None = None
    variables: dict[str, ServerVariable] | None = None


class Config(BaseModel):
    """Document metadata plus generation switches.

    title and version fall back to the per-format defaults
    ("Swagger API" / "1.0" and "OpenAPI API" / "1.0.0").
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    version: str | None = None
    description: str | None = None
    terms_of_service: str | None = Field(default=None, alias="termsOfService")
    contact: Contact | None = None
    license: License | None = None
    # Swagger 2 only
    host: str = ""
    base_path: str = Field(default="/", alias="basePath")
    schemes: list[str] = ["http", "https"]
    # OpenAPI 3 only
    servers: list[Server] = []
    # emit a nullable $ref instead of the "Recursive Type" placeholder for self pointers
    recursive_pointer_refs: bool = False


def load_config(path: Path) -> Config:
    """Load a Config from a YAML file; an empty file gives the defaults."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as err:
        raise ConfigError(f"cannot read config {path}: {err}") from err
    try:
        return Config.model_validate(data)
    except ValidationError as err:
        raise ConfigError(f"invalid config {path}: {err}") from err
