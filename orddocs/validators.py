"""Documentation validation and quality checks."""

from __future__ import annotations

from .models import Documentation, ValidationResult


def validate_docs(documentation: Documentation, strict: bool = False) -> ValidationResult:
    """Validate extracted documentation.

    Checks:
    1. Methods should have a description (warning in normal mode, error in strict)
    2. Methods should resolve to an endpoint (warning)
    3. Documented methods should describe their parameters (warning)
    4. Types should have a description (warning)

    Args:
        documentation: The assembled documentation
        strict: If True, undocumented methods are errors instead of warnings

    Returns:
        ValidationResult with errors and warnings
    """
    result = ValidationResult()

    for method in documentation.methods:
        if not method.endpoint:
            result.warnings.append(f"{method.name}: no endpoint in path table")

        # Check for missing description
        if not method.description:
            msg = f"{method.name}: missing description (undocumented)"
            if strict:
                result.errors.append(msg)
            else:
                result.warnings.append(msg)
            continue

        for param in method.parameters:
            if not param.description:
                result.warnings.append(f"{method.name}: documented but missing @param {param.name}")

    for type_doc in documentation.types:
        if not type_doc.description:
            result.warnings.append(f"{type_doc.name}: missing type description")

    return result


def compute_coverage(documentation: Documentation) -> dict[str, float]:
    """Compute documentation coverage for methods and types.

    Returns:
        Dict with 'methods' and 'types' coverage (0.0 - 1.0)
    """
    methods = documentation.methods
    types = documentation.types
    methods_documented = sum(1 for m in methods if m.description)
    types_documented = sum(1 for t in types if t.description)

    return {
        "methods": methods_documented / len(methods) if methods else 1.0,
        "types": types_documented / len(types) if types else 1.0,
    }
