"""Data models for documentation extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Union

# Type descriptors


@dataclass(frozen=True)
class Scalar:
    """A primitive schema, or the opaque display text of an unrecognized one."""

    kind: str  # "string" | "number" | "boolean" | fallback text


@dataclass(frozen=True)
class Array:
    element: TypeDescriptor


@dataclass(frozen=True)
class Tuple:
    elements: tuple[TypeDescriptor, ...]


@dataclass(frozen=True)
class Record:
    key: TypeDescriptor
    value: TypeDescriptor


@dataclass(frozen=True)
class Nullable:
    inner: TypeDescriptor


@dataclass(frozen=True)
class EnumLiteral:
    members: tuple[str, ...]  # Sorted


@dataclass(frozen=True)
class NamedReference:
    """A schema referenced by its declared name (``BlockHashSchema``)."""

    name: str  # "BlockHash"


TypeDescriptor = Union[Scalar, Array, Tuple, Record, Nullable, EnumLiteral, NamedReference]


# Comments


@dataclass(frozen=True)
class DocEntry:
    """Parsed documentation comment."""

    description: str = ""
    params: dict[str, str] = field(default_factory=dict)  # param -> description
    returns: str | None = None
    example: str | None = None
    tags: dict[str, str] = field(default_factory=dict)  # Any other @tag


# Documentation entities


@dataclass(frozen=True)
class Parameter:
    name: str
    type: str  # Display string
    description: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "type": self.type, "description": self.description}


# Object properties share the parameter shape
Property = Parameter


@dataclass(frozen=True)
class TypeDoc:
    """Documentation for one schema-backed type."""

    name: str  # Schema name without the "Schema" suffix
    kind: Literal["enum", "object"]
    description: str
    source_file: str
    properties: tuple[Property, ...] = ()  # kind == "object"
    values: tuple[str, ...] = ()  # kind == "enum"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "kind": self.kind,
            "description": self.description,
        }
        if self.kind == "object":
            data["properties"] = [p.to_dict() for p in self.properties]
        else:
            data["values"] = list(self.values)
        data["sourceFile"] = self.source_file
        return data


@dataclass(frozen=True)
class MethodDoc:
    """Documentation for one public client method."""

    name: str
    description: str
    parameters: tuple[Parameter, ...]
    endpoint: str  # "/address/{address}", "" when unresolved
    http_method: Literal["GET", "POST"]
    return_type: str
    recursive: bool  # Endpoint starts with "/r/"
    source_file: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": [p.to_dict() for p in self.parameters],
            "endpoint": self.endpoint,
            "httpMethod": self.http_method,
            "returnType": self.return_type,
            "recursive": self.recursive,
            "sourceFile": self.source_file,
        }


@dataclass(frozen=True)
class Documentation:
    """The complete documentation model, both lists sorted by name."""

    methods: tuple[MethodDoc, ...] = ()
    types: tuple[TypeDoc, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "methods": [m.to_dict() for m in self.methods],
            "types": [t.to_dict() for t in self.types],
        }


@dataclass(frozen=True)
class FileExtraction:
    """Everything collected from a single source file."""

    source_file: str
    types: tuple[TypeDoc, ...] = ()
    methods: tuple[MethodDoc, ...] = ()


@dataclass
class ValidationResult:
    """Results from documentation validation."""

    errors: list[str] = field(default_factory=list)  # Build fails if non-empty
    warnings: list[str] = field(default_factory=list)  # Printed but allowed
