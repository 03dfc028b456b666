"""Tests for the resource and element type registries."""

import logging
from dataclasses import dataclass

import pytest

from fhir_toolbox import r4
from fhir_toolbox.element import Element, Resource
from fhir_toolbox.errors import (
    DecodeError,
    RegistrationError,
    UnknownResourceTypeError,
)
from fhir_toolbox.registry import (
    list_resource_types,
    register_element_type,
    register_resource_type,
    resolve_element_type,
    resolve_resource_type,
)

CATALOGUE = [
    "Appointment",
    "Bundle",
    "Measure",
    "Observation",
    "Parameters",
    "Patient",
    "SearchParameter",
    "TestReport",
]


class TestResolveResourceType:
    @pytest.mark.parametrize("tag", CATALOGUE)
    def test_catalogue_resolves(self, tag):
        cls = resolve_resource_type(tag)
        assert cls.discriminator_tag() == tag
        assert getattr(r4, tag) is cls

    def test_unknown_tag(self):
        with pytest.raises(UnknownResourceTypeError) as exc:
            resolve_resource_type("Spaceship")
        assert exc.value.tag == "Spaceship"
        assert "unknown resource type" in str(exc.value)

    def test_unknown_tag_is_a_decode_error_and_value_error(self):
        with pytest.raises(DecodeError):
            resolve_resource_type("Nope")
        with pytest.raises(ValueError):
            resolve_resource_type("Nope")

    def test_unhashable_tag(self):
        with pytest.raises(UnknownResourceTypeError):
            resolve_resource_type(["Patient"])

    def test_path_carried(self):
        with pytest.raises(UnknownResourceTypeError) as exc:
            resolve_resource_type("Nope", path="Bundle.entry[0].resource")
        assert exc.value.path == "Bundle.entry[0].resource"


class TestListResourceTypes:
    def test_sorted_and_complete(self):
        tags = list_resource_types()
        assert tags == sorted(tags)
        assert set(CATALOGUE) <= set(tags)

    def test_snapshot(self):
        tags = list_resource_types()
        tags.append("Injected")
        assert "Injected" not in list_resource_types()

    def test_abstract_bases_not_registered(self):
        tags = list_resource_types()
        assert "Resource" not in tags
        assert "DomainResource" not in tags
        assert "" not in tags


class TestRegistration:
    def test_subclass_with_resource_type_registers(self):
        @dataclass
        class RegistryExtraResource(Resource):
            resource_type = "RegistryExtraResource"

        assert resolve_resource_type("RegistryExtraResource") is RegistryExtraResource

    def test_duplicate_tag_is_fatal(self):
        with pytest.raises(RegistrationError, match="already registered"):

            @dataclass
            class ImpostorPatient(Resource):
                resource_type = "Patient"

    def test_duplicate_tag_leaves_original(self):
        assert resolve_resource_type("Patient") is r4.Patient

    def test_reregistering_same_class_is_idempotent(self):
        assert register_resource_type(r4.Patient) is r4.Patient

    def test_empty_tag_rejected(self):
        class NoTag:
            resource_type = ""

        with pytest.raises(RegistrationError, match="non-empty"):
            register_resource_type(NoTag)

    def test_registration_error_is_runtime_error(self):
        assert issubclass(RegistrationError, RuntimeError)

    def test_registration_logs_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="fhir_toolbox.registry"):

            @dataclass
            class RegistryLoggedResource(Resource):
                resource_type = "RegistryLoggedResource"

        assert any("RegistryLoggedResource" in r.getMessage() for r in caplog.records)


class TestElementTypes:
    def test_datatypes_resolve_by_name(self):
        assert resolve_element_type("Extension") is r4.Extension
        assert resolve_element_type("Quantity") is r4.Quantity

    def test_primitives_resolve_by_name(self):
        from fhir_toolbox.primitives import DateTime

        assert resolve_element_type("DateTime") is DateTime

    def test_unknown_name(self):
        with pytest.raises(KeyError, match="NotAType"):
            resolve_element_type("NotAType")

    def test_duplicate_name_is_fatal(self):
        with pytest.raises(RegistrationError):

            @dataclass
            class Coding(Element):
                pass

    def test_explicit_register_same_class(self):
        assert register_element_type(r4.Coding) is r4.Coding
