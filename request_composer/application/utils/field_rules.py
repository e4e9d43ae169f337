from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date
from typing import Any

from request_composer.domain.entities.client_profile import ClientProfile
from request_composer.domain.entities.service_catalog import AdditionalFieldSchema, ServiceCatalogItem


# Fields the lab always needs for these services, whatever the catalog says.
REQUIRED_FIELDS_BY_CODE: dict[str, tuple[str, ...]] = {
    "EDS-1": ("areaPredio", "cantidadPisos", "ubicacion"),
    "EDS-2": ("cantidadTramos", "longitudTramos", "ubicacion"),
    "EDS-3": ("areaPredio",),
    "EMC-1": (
        "tipoMuestra",
        "elementoFundido",
        "resistenciaDiseno",
        "identificacionMuestra",
        "estructuraRealizada",
        "fechaFundida",
        "edadEnsayo",
    ),
    "DMC-1": ("planta", "resistenciaRequerida", "tamanoTriturado", "tipoCemento"),
}

PROFILE_REQUIRED = ("name", "name_project", "location", "identification", "phone", "email", "description")
PHONE_PATTERN = re.compile(r"^\d{10}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def profile_issues(profile: ClientProfile) -> list[str]:
    issues: list[str] = []
    for name in PROFILE_REQUIRED:
        if not str(getattr(profile, name) or "").strip():
            issues.append(f"{name} is required")
    phone = str(profile.phone or "")
    email = str(profile.email or "")
    if phone and not PHONE_PATTERN.match(phone):
        issues.append("phone must have 10 digits")
    if email and not EMAIL_PATTERN.match(email):
        issues.append("email is not valid")
    return issues


def is_answered(value: Any) -> bool:
    # 0 is a real answer; "", [] and False are not
    if value is None or value is False:
        return False
    if isinstance(value, (str, list, tuple)) and len(value) == 0:
        return False
    return True


def is_field_relevant(schema: AdditionalFieldSchema, answers: Mapping[str, Any]) -> bool:
    """A dependent field only applies when its controlling field holds the expected value."""
    dependency = schema.depends_on
    if dependency is None:
        return True
    actual = answers.get(dependency.field)
    if actual is None:
        return False
    if isinstance(actual, (list, tuple)):
        return dependency.value in actual
    if isinstance(actual, bool):
        return str(actual).lower() == dependency.value.lower()
    return str(actual) == dependency.value


def shape_issue(schema: AdditionalFieldSchema, value: Any) -> str | None:
    """Return a message when value does not fit the field's declared type."""
    kind = schema.type
    if kind == "number":
        if isinstance(value, bool):
            return f"{schema.field} must be a number"
        if isinstance(value, (int, float)):
            return None
        try:
            float(str(value))
        except ValueError:
            return f"{schema.field} must be a number"
        return None
    if kind in ("select", "radio"):
        if not isinstance(value, str):
            return f"{schema.field} must be a single option"
        if schema.options and value not in schema.options:
            return f"{schema.field} has unknown option '{value}'"
        return None
    if kind == "select-multiple":
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            return f"{schema.field} must be a list of options"
        unknown = [v for v in value if schema.options and v not in schema.options]
        if unknown:
            return f"{schema.field} has unknown options {unknown}"
        return None
    if kind == "checkbox":
        if isinstance(value, bool):
            return None
        if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
            return None
        return f"{schema.field} must be checked or a list of options"
    if kind == "date":
        try:
            date.fromisoformat(str(value))
        except ValueError:
            return f"{schema.field} must be a date (YYYY-MM-DD)"
        return None
    if kind == "text" and not isinstance(value, (str, int, float)):
        return f"{schema.field} must be text"
    return None


def instance_issues(
    item: ServiceCatalogItem,
    answers: Mapping[str, Any],
    required_by_code: Mapping[str, tuple[str, ...]] = REQUIRED_FIELDS_BY_CODE,
) -> list[str]:
    issues: list[str] = []
    schemas = {schema.field: schema for schema in item.additional_info}

    required = {schema.field for schema in item.additional_info if schema.required}
    required.update(required_by_code.get(item.code, ()))

    for field_name in sorted(required):
        schema = schemas.get(field_name)
        if schema is not None and not is_field_relevant(schema, answers):
            continue
        if not is_answered(answers.get(field_name)):
            issues.append(f"{field_name} is required")

    for field_name, value in answers.items():
        schema = schemas.get(field_name)
        if schema is None or not is_answered(value) or not is_field_relevant(schema, answers):
            continue
        problem = shape_issue(schema, value)
        if problem:
            issues.append(problem)
    return issues
