"""Dependency manifest parsers, one per runtime."""

import json
from types import MappingProxyType
from typing import Dict, List, Mapping, Protocol

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from .core import Runtime
from .errors import MalformedManifestError, UnsupportedRuntimeError
from .runtimes import MANIFESTS


class ManifestParser(Protocol):
    """
    Protocol for dependency manifest parsers.

    Turns a manifest's raw bytes into a flat list of dependency identifiers.
    Identifiers are compared by exact string equality.
    """

    runtime: Runtime

    @property
    def filename(self) -> str:
        """Manifest filename, from the runtime table."""
        ...

    def parse(self, data: bytes) -> List[str]:
        """
        Parse manifest content.

        Raises:
            MalformedManifestError: If content does not match the format
        """
        ...


class RequirementsParser:
    """requirements.txt: one identifier per line."""

    runtime = Runtime.PYTHON

    @property
    def filename(self) -> str:
        return MANIFESTS[self.runtime]

    def parse(self, data: bytes) -> List[str]:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedManifestError(self.filename, f"not UTF-8 text ({e})") from e

        deps = []
        for line in text.splitlines():
            line = line.strip()
            if line and not line.startswith("#"):
                deps.append(line)
        return deps


class PackageJson(BaseModel):
    """The part of package.json we read."""

    model_config = ConfigDict(extra="ignore")

    dependencies: Dict[StrictStr, StrictStr] = Field(default_factory=dict)


class PackageJsonParser:
    """package.json: ``dependencies`` flattened to name@version."""

    runtime = Runtime.NODE

    @property
    def filename(self) -> str:
        return MANIFESTS[self.runtime]

    def parse(self, data: bytes) -> List[str]:
        try:
            document = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedManifestError(self.filename, f"invalid JSON ({e})") from e
        if not isinstance(document, dict):
            raise MalformedManifestError(self.filename, "top level must be an object")

        try:
            manifest = PackageJson.model_validate(document)
        except ValidationError as e:
            raise MalformedManifestError(
                self.filename, "'dependencies' must map package names to version strings"
            ) from e

        return [f"{name}@{version}" for name, version in manifest.dependencies.items()]


PARSERS: Mapping[Runtime, ManifestParser] = MappingProxyType({
    parser.runtime: parser for parser in (RequirementsParser(), PackageJsonParser())
})


def get_parser(runtime: Runtime) -> ManifestParser:
    """
    Get the manifest parser registered for a runtime.

    Raises:
        UnsupportedRuntimeError: If no parser is registered
    """
    try:
        return PARSERS[runtime]
    except KeyError:
        raise UnsupportedRuntimeError(runtime=getattr(runtime, "value", runtime)) from None
