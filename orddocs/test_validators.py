"""Tests for validators."""

from orddocs.models import Documentation, MethodDoc, Parameter, TypeDoc
from orddocs.validators import compute_coverage, validate_docs


def _method(name, description="", endpoint="/x", parameters=()):
    return MethodDoc(
        name=name,
        description=description,
        parameters=tuple(parameters),
        endpoint=endpoint,
        http_method="GET",
        return_type="Promise<void>",
        recursive=False,
        source_file="client.ts",
    )


def _type(name, description=""):
    return TypeDoc(name=name, kind="object", description=description, source_file="types.ts")


def test_undocumented_method_warning():
    docs = Documentation(methods=(_method("getSat"),))
    result = validate_docs(docs)
    assert not result.errors
    assert any("getSat" in w and "missing description" in w for w in result.warnings)


def test_undocumented_method_strict():
    docs = Documentation(methods=(_method("getSat"),))
    result = validate_docs(docs, strict=True)
    assert len(result.errors) == 1
    assert "getSat" in result.errors[0]


def test_missing_param_description():
    docs = Documentation(
        methods=(
            _method(
                "getSat",
                description="Gets a sat.",
                parameters=[
                    Parameter("number", "number", "Sat number"),
                    Parameter("verbose", "boolean"),
                ],
            ),
        )
    )
    result = validate_docs(docs, strict=True)
    assert not result.errors
    assert result.warnings == ["getSat: documented but missing @param verbose"]


def test_missing_endpoint_warning():
    docs = Documentation(methods=(_method("getSat", description="Gets a sat.", endpoint=""),))
    result = validate_docs(docs)
    assert result.warnings == ["getSat: no endpoint in path table"]


def test_undocumented_type_warning():
    docs = Documentation(types=(_type("Rune"), _type("Sat", "A satoshi.")))
    result = validate_docs(docs, strict=True)
    assert not result.errors
    assert result.warnings == ["Rune: missing type description"]


def test_coverage():
    docs = Documentation(
        methods=(_method("a", "A."), _method("b")),
        types=(_type("T", "T."),),
    )
    assert compute_coverage(docs) == {"methods": 0.5, "types": 1.0}


def test_coverage_empty():
    assert compute_coverage(Documentation()) == {"methods": 1.0, "types": 1.0}
