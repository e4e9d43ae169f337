"""
Tests for advisory field validation.
"""

from __future__ import annotations

from conftest import VALID_PROFILE, make_item

from request_composer.application.dto.composition_actions import AddSelection, SetClientProfile
from request_composer.application.use_cases.selection_reducer import INITIAL_STATE, reduce_composition
from request_composer.application.use_cases.validate_composition import ValidateCompositionUseCase
from request_composer.application.utils.field_rules import (
    instance_issues,
    is_answered,
    is_field_relevant,
    profile_issues,
    shape_issue,
)
from request_composer.domain.entities.client_profile import ClientProfile
from request_composer.domain.entities.selection import Instance, SelectionEntry
from request_composer.domain.entities.service_catalog import AdditionalFieldSchema, FieldDependency
from request_composer.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore


def test_profile_issues():
    assert profile_issues(ClientProfile(**VALID_PROFILE)) == []

    issues = profile_issues(ClientProfile(name="A", phone="12345", email="nope"))
    assert "location is required" in issues
    assert "phone must have 10 digits" in issues
    assert "email is not valid" in issues
    assert "name is required" not in issues


def test_is_answered():
    assert is_answered(0)
    assert is_answered("x")
    assert is_answered(["7"])
    assert is_answered(True)
    assert not is_answered(None)
    assert not is_answered("")
    assert not is_answered([])
    assert not is_answered(False)


def test_dependent_field_only_counts_when_controller_matches():
    schema = AdditionalFieldSchema(
        field="nivelesSotano",
        type="number",
        required=True,
        depends_on=FieldDependency(field="tieneSotano", value="Sí"),
    )
    assert not is_field_relevant(schema, {})
    assert not is_field_relevant(schema, {"tieneSotano": "No"})
    assert is_field_relevant(schema, {"tieneSotano": "Sí"})
    assert is_field_relevant(schema, {"tieneSotano": ["Sí", "Otro"]})

    checkbox = AdditionalFieldSchema(
        field="detalle", type="text", depends_on=FieldDependency(field="aplica", value="true")
    )
    assert is_field_relevant(checkbox, {"aplica": True})


def test_shape_issue_by_type():
    number = AdditionalFieldSchema(field="n", type="number")
    assert shape_issue(number, 3) is None
    assert shape_issue(number, "3.5") is None
    assert shape_issue(number, "abc") == "n must be a number"
    assert shape_issue(number, True) == "n must be a number"

    select = AdditionalFieldSchema(field="s", type="select", options=("A", "B"))
    assert shape_issue(select, "A") is None
    assert shape_issue(select, "C") == "s has unknown option 'C'"

    multi = AdditionalFieldSchema(field="m", type="select-multiple", options=("7", "14", "28"))
    assert shape_issue(multi, ["7", "28"]) is None
    assert shape_issue(multi, "7") == "m must be a list of options"

    when = AdditionalFieldSchema(field="d", type="date")
    assert shape_issue(when, "2024-03-01") is None
    assert shape_issue(when, "01/03/2024") == "d must be a date (YYYY-MM-DD)"


def test_instance_issues_use_catalog_and_code_table():
    catalog = ServiceCatalogStore()
    item = catalog.get_item("EDS-1")

    issues = instance_issues(item, {"areaPredio": 100, "tieneSotano": "Sí"})
    assert "cantidadPisos is required" in issues
    assert "ubicacion is required" in issues
    assert "nivelesSotano is required" in issues
    assert "areaPredio is required" not in issues

    issues = instance_issues(item, {"areaPredio": 100, "cantidadPisos": 2, "ubicacion": "x", "tieneSotano": "No"})
    assert issues == []

    # code table applies even when the item carries no schema
    bare = make_item(code="DMC-1", item_id=301)
    assert "planta is required" in instance_issues(bare, {})


def test_validate_composition_reports_without_blocking():
    validator = ValidateCompositionUseCase(catalog=ServiceCatalogStore())

    report = validator.execute(INITIAL_STATE)
    assert not report.is_valid
    assert "select at least one service" in report.selection_issues

    state = reduce_composition(INITIAL_STATE, SetClientProfile(VALID_PROFILE))
    entry = SelectionEntry(id="s1", item=make_item("EDS-3", 103), quantity=2, instances=(
        Instance(id="a", additional_info={"areaPredio": 50}),
        Instance(id="b"),
    ))
    state = reduce_composition(state, AddSelection(entry))

    report = validator.execute(state)
    assert report.profile_issues == []
    assert report.selection_issues == ["EDS-3 #2: areaPredio is required"]
    assert report.summary() == "Incomplete request: EDS-3 #2: areaPredio is required"


def test_summary_truncates_long_lists():
    validator = ValidateCompositionUseCase()
    report = validator.execute(INITIAL_STATE)
    summary = report.summary(limit=2)
    assert summary.startswith("Incomplete request: ")
    assert summary.endswith("more)")


def test_profile_issues_tolerate_non_string_values():
    profile = ClientProfile(**{**VALID_PROFILE, "phone": 12345})
    assert profile_issues(profile) == ["phone must have 10 digits"]
