"""Tests for the FHIR JSON codec."""

import decimal
import json

import pytest

from fhir_toolbox import r4
from fhir_toolbox.errors import (
    ChoiceConflictError,
    DecodeError,
    MalformedInputError,
    UnknownResourceTypeError,
)
from fhir_toolbox.json_codec import (
    decode_json,
    dump_json_text,
    encode_json,
    from_json_dict,
    to_json_dict,
)
from fhir_toolbox.primitives import (
    Boolean,
    Code,
    Date,
    DateTime,
    Decimal,
    Id,
    Instant,
    Integer,
    String,
    Uri,
)


# ── Builders ──────────────────────────────────────────────────────


def _ext(url="http://example.org/fhir/StructureDefinition/note", value=None):
    return r4.Extension(url=url, value=value if value is not None else String("n"))


def _patient():
    return r4.Patient(
        id=Id("pat-1"),
        meta=r4.Meta(version_id=Id("3"), profile=[]),
        active=Boolean(True),
        name=[
            r4.HumanName(
                use=Code("official"),
                family=String("Chalmers"),
                given=[String("Peter"), String("James", id="g2")],
            )
        ],
        gender=Code("male"),
        birth_date=Date("1974-12-25", extension=[_ext(value=DateTime("1974-12-25T14:35:45-05:00"))]),
        deceased=Boolean(False),
        multiple_birth=Integer(2),
        address=[r4.Address(line=[String("534 Erewhon St")], city=String("PleasantVille"))],
    )


def _observation():
    return r4.Observation(
        id=Id("obs-1"),
        status=Code("final"),
        code=r4.CodeableConcept(
            coding=[r4.Coding(system=Uri("http://loinc.org"), code=Code("85354-9"))],
            text=String("Blood pressure"),
        ),
        subject=r4.Reference(reference=String("Patient/pat-1")),
        effective=DateTime("2012-09-17"),
        component=[
            r4.ObservationComponent(
                code=r4.CodeableConcept(text=String("systolic")),
                value=r4.Quantity(value=Decimal(107), unit=String("mmHg")),
            ),
            r4.ObservationComponent(
                code=r4.CodeableConcept(text=String("diastolic")),
                value=r4.Quantity(value=Decimal(60.5), unit=String("mmHg")),
            ),
        ],
    )


# ═══════════════════════════════════════════════════════════════════
# Encode
# ═══════════════════════════════════════════════════════════════════


class TestEncode:
    def test_resource_type_first(self):
        wire = to_json_dict(_patient())
        assert next(iter(wire)) == "resourceType"
        assert wire["resourceType"] == "Patient"

    def test_primitive_sidecar(self):
        wire = to_json_dict(_patient())
        assert wire["birthDate"] == "1974-12-25"
        assert wire["_birthDate"] == {
            "extension": [
                {
                    "url": "http://example.org/fhir/StructureDefinition/note",
                    "valueDateTime": "1974-12-25T14:35:45-05:00",
                }
            ]
        }

    def test_repeated_primitive_sidecar_alignment(self):
        name = to_json_dict(_patient())["name"][0]
        assert name["given"] == ["Peter", "James"]
        assert name["_given"] == [None, {"id": "g2"}]

    def test_choice_keys(self):
        wire = to_json_dict(_patient())
        assert wire["deceasedBoolean"] is False
        assert wire["multipleBirthInteger"] == 2
        assert "deceasedDateTime" not in wire

    def test_absent_fields_omitted(self):
        wire = to_json_dict(_patient())
        assert "telecom" not in wire
        assert "contact" not in wire
        assert "profile" not in wire["meta"]
        assert None not in wire.values()

    def test_empty_primitive_never_emitted(self):
        wire = to_json_dict(r4.Patient(gender=Code(), birth_date=Date()))
        assert wire == {"resourceType": "Patient"}

    def test_annotated_null_emits_only_sidecar(self):
        wire = to_json_dict(r4.Patient(gender=Code(id="g")))
        assert "gender" not in wire
        assert wire["_gender"] == {"id": "g"}

    def test_all_empty_repeated_primitive_omitted(self):
        wire = to_json_dict(r4.HumanName(given=[String(), String()]))
        assert wire == {}

    def test_empty_entry_in_repeated_primitive_dropped(self):
        wire = to_json_dict(r4.HumanName(given=[String("a"), String(), String("b")]))
        assert wire == {"given": ["a", "b"]}

    def test_decimal_digits_written_as_held(self):
        quantity = r4.Quantity(value=Decimal(decimal.Decimal("1.50")))
        assert encode_json(quantity) == b'{"value":1.50}'

    def test_float_decimal_written_as_shortest_repr(self):
        assert encode_json(r4.Quantity(value=Decimal(6.3))) == b'{"value":6.3}'

    def test_indent_nested(self):
        text = encode_json(r4.HumanName(given=[String("a")]), indent=2).decode("utf-8")
        assert text == '{\n  "given": [\n    "a"\n  ]\n}'

    def test_empty_containers(self):
        assert dump_json_text({"a": [], "b": {}}) == '{"a":[],"b":{}}'

    def test_compact_bytes(self):
        data = encode_json(r4.Patient(id=Id("a")))
        assert data == b'{"resourceType":"Patient","id":"a"}'

    def test_indent(self):
        data = encode_json(r4.Patient(id=Id("a")), indent=2)
        assert data.decode("utf-8").startswith('{\n  "resourceType"')

    def test_non_ascii_kept(self):
        data = encode_json(r4.Patient(name=[r4.HumanName(family=String("Müller"))]))
        assert "Müller".encode("utf-8") in data

    def test_nan_rejected(self):
        with pytest.raises(ValueError):
            encode_json(r4.Observation(value=r4.Quantity(value=Decimal(float("inf")))))

    def test_non_element_rejected(self):
        with pytest.raises(TypeError):
            to_json_dict({"resourceType": "Patient"})


# ═══════════════════════════════════════════════════════════════════
# Round trip
# ═══════════════════════════════════════════════════════════════════


class TestRoundTrip:
    def test_patient(self):
        patient = _patient()
        assert decode_json(encode_json(patient)) == patient

    def test_observation(self):
        obs = _observation()
        assert decode_json(encode_json(obs)) == obs

    @pytest.mark.parametrize(
        "literal",
        ["1.50", "12345678901234567890.123456789", "0.000", "-0.0", "100", "1E+400"],
    )
    def test_decimal_literal_byte_exact(self, literal):
        data = (
            '{"resourceType":"Observation","valueQuantity":{"value":%s}}' % literal
        ).encode("utf-8")
        assert encode_json(decode_json(data)) == data

    def test_decimal_held_exactly(self):
        obs = decode_json(b'{"resourceType":"Observation","valueQuantity":{"value":1.50}}')
        assert obs.value.value.value == decimal.Decimal("1.50")
        assert str(obs.value.value.value) == "1.50"

    def test_huge_exponent_round_trips(self):
        obs = decode_json(b'{"resourceType":"Observation","valueQuantity":{"value":1e400}}')
        assert obs.value.value.value.is_finite()
        again = decode_json(encode_json(obs))
        assert again == obs

    def test_empty_entry_dropped_by_both_codecs(self):
        name = r4.HumanName(given=[String("a"), String(), String("b")])
        expected = r4.HumanName(given=[String("a"), String("b")])
        assert decode_json(encode_json(r4.Patient(name=[name]))).name == [expected]

    def test_annotated_null_in_middle_of_list(self):
        name = r4.HumanName(given=[String("a"), String(id="mid"), String("c")])
        patient = r4.Patient(name=[name])
        wire = to_json_dict(patient)
        assert wire["name"][0]["given"] == ["a", None, "c"]
        assert wire["name"][0]["_given"] == [None, {"id": "mid"}, None]
        assert decode_json(encode_json(patient)) == patient

    def test_trailing_annotated_null_pads_values(self):
        wire = {
            "resourceType": "Patient",
            "name": [{"given": ["a"], "_given": [None, {"id": "z"}]}],
        }
        patient = from_json_dict(wire)
        assert patient.name[0].given == [String("a"), String(id="z")]

    def test_contained_resources(self):
        patient = r4.Patient(
            id=Id("p"),
            contained=[
                r4.Observation(id=Id("o1"), status=Code("final")),
                r4.Patient(id=Id("inner")),
            ],
        )
        wire = to_json_dict(patient)
        assert [c["resourceType"] for c in wire["contained"]] == ["Observation", "Patient"]
        decoded = decode_json(encode_json(patient))
        assert decoded == patient
        assert type(decoded.contained[0]) is r4.Observation

    def test_bundle_entries(self):
        bundle = r4.Bundle(
            id=Id("b"),
            type=Code("collection"),
            timestamp=Instant("2020-01-01T00:00:00Z"),
            entry=[
                r4.BundleEntry(full_url=Uri("urn:uuid:1"), resource=_patient()),
                r4.BundleEntry(resource=_observation()),
                r4.BundleEntry(
                    response=r4.BundleEntryResponse(
                        status=String("201 Created"),
                        outcome=r4.Parameters(parameter=[
                            r4.ParametersParameter(name=String("ok"), value=Boolean(True))
                        ]),
                    )
                ),
            ],
        )
        decoded = decode_json(encode_json(bundle))
        assert decoded == bundle
        assert [type(r) for r in decoded.resources()] == [r4.Patient, r4.Observation]

    def test_recursive_parameters(self):
        params = r4.Parameters(parameter=[
            r4.ParametersParameter(
                name=String("outer"),
                part=[
                    r4.ParametersParameter(name=String("inner"), value=r4.Coding(code=Code("c"))),
                    r4.ParametersParameter(name=String("res"), resource=r4.Patient(id=Id("x"))),
                ],
            )
        ])
        wire = to_json_dict(params)
        assert wire["parameter"][0]["part"][0]["valueCoding"] == {"code": "c"}
        assert decode_json(encode_json(params)) == params
        assert params.get("outer") is params.parameter[0]
        assert params.get("missing") is None

    def test_nested_extensions(self):
        ext = r4.Extension(
            url="http://example.org/outer",
            extension=[r4.Extension(url="http://example.org/inner", value=Integer(1))],
        )
        patient = r4.Patient(extension=[ext], active=Boolean(True, id="a", extension=[ext]))
        assert decode_json(encode_json(patient)) == patient

    def test_narrative(self):
        patient = r4.Patient(
            text=r4.Narrative(
                status=Code("generated"),
                div='<div xmlns="http://www.w3.org/1999/xhtml"><p>Peter</p></div>',
            )
        )
        assert decode_json(encode_json(patient)) == patient

    def test_decode_from_str(self):
        assert decode_json('{"resourceType":"Patient","id":"a"}') == r4.Patient(id=Id("a"))

    def test_explicit_class(self):
        data = encode_json(r4.Patient(id=Id("a")))
        assert decode_json(data, r4.Patient) == r4.Patient(id=Id("a"))

    def test_datatype_with_explicit_class(self):
        coding = r4.Coding(system=Uri("s"), code=Code("c", id="cid"))
        assert from_json_dict(to_json_dict(coding), r4.Coding) == coding


# ═══════════════════════════════════════════════════════════════════
# Decode errors
# ═══════════════════════════════════════════════════════════════════


class TestDecodeErrors:
    def test_invalid_json(self):
        with pytest.raises(MalformedInputError, match="invalid JSON"):
            decode_json(b'{"resourceType": ')

    def test_nan_constant_rejected(self):
        with pytest.raises(MalformedInputError):
            decode_json('{"resourceType":"Observation","valueQuantity":{"value":NaN}}')

    def test_not_an_object(self):
        with pytest.raises(MalformedInputError, match="expected a JSON object"):
            decode_json(b"[1, 2]")

    def test_missing_resource_type(self):
        with pytest.raises(MalformedInputError, match="resourceType"):
            decode_json(b'{"id": "a"}')

    def test_unknown_resource_type(self):
        with pytest.raises(UnknownResourceTypeError) as exc:
            decode_json(b'{"resourceType": "Spaceship"}')
        assert exc.value.tag == "Spaceship"

    def test_unknown_contained_resource_type_has_path(self):
        doc = {"resourceType": "Patient", "contained": [{"resourceType": "Patient"}, {"resourceType": "Nope"}]}
        with pytest.raises(UnknownResourceTypeError) as exc:
            from_json_dict(doc)
        assert exc.value.path == "Patient.contained[1]"

    def test_contained_without_resource_type(self):
        doc = {"resourceType": "Patient", "contained": [{"id": "x"}]}
        with pytest.raises(MalformedInputError, match="missing"):
            from_json_dict(doc)

    def test_explicit_class_mismatch(self):
        with pytest.raises(MalformedInputError, match="expected resourceType 'Patient'"):
            decode_json(b'{"resourceType": "Observation"}', r4.Patient)

    def test_unknown_field(self):
        with pytest.raises(MalformedInputError, match="unknown field 'favouriteColour'") as exc:
            from_json_dict({"resourceType": "Patient", "favouriteColour": "blue"})
        assert exc.value.path == "Patient"

    def test_unknown_nested_field_path(self):
        doc = _observation_wire()
        doc["component"][1]["valueQuantity"]["bogus"] = 1
        with pytest.raises(MalformedInputError) as exc:
            from_json_dict(doc)
        assert exc.value.path == "Observation.component[1].valueQuantity"
        assert str(exc.value).startswith("Observation.component[1].valueQuantity: ")

    def test_wrong_primitive_type(self):
        with pytest.raises(MalformedInputError, match="expected Boolean value, got string") as exc:
            from_json_dict({"resourceType": "Patient", "active": "true"})
        assert exc.value.path == "Patient.active"

    def test_bool_is_not_an_integer(self):
        with pytest.raises(MalformedInputError):
            from_json_dict({"resourceType": "Patient", "multipleBirthInteger": True})

    def test_wrong_type_in_repeated_primitive(self):
        with pytest.raises(MalformedInputError) as exc:
            from_json_dict({"resourceType": "Patient", "name": [{"given": ["a", 7]}]})
        assert exc.value.path == "Patient.name[0].given[1]"

    def test_repeated_primitive_not_array(self):
        with pytest.raises(MalformedInputError, match="expected an array"):
            from_json_dict({"resourceType": "Patient", "name": [{"given": "a"}]})

    def test_sidecar_invalid_field(self):
        with pytest.raises(MalformedInputError, match="invalid field 'value'") as exc:
            from_json_dict({"resourceType": "Patient", "_gender": {"value": "x"}})
        assert exc.value.path == "Patient._gender"

    def test_sidecar_not_object(self):
        with pytest.raises(MalformedInputError, match="primitive extension object"):
            from_json_dict({"resourceType": "Patient", "_gender": "x"})

    def test_sidecar_bad_id(self):
        with pytest.raises(MalformedInputError):
            from_json_dict({"resourceType": "Patient", "_gender": {"id": 5}})

    def test_repeated_sidecar_entry_path(self):
        doc = {"resourceType": "Patient", "name": [{"given": ["a", "b"], "_given": [None, {"x": 1}]}]}
        with pytest.raises(MalformedInputError) as exc:
            from_json_dict(doc)
        assert exc.value.path == "Patient.name[0]._given[1]"

    def test_complex_field_not_object(self):
        with pytest.raises(MalformedInputError, match="expected a JSON object"):
            from_json_dict({"resourceType": "Patient", "maritalStatus": "married"})

    def test_repeated_complex_not_array(self):
        with pytest.raises(MalformedInputError, match="expected an array"):
            from_json_dict({"resourceType": "Patient", "name": {"family": "x"}})

    def test_attribute_not_string(self):
        with pytest.raises(MalformedInputError, match="expected a string"):
            from_json_dict({"resourceType": "Patient", "extension": [{"url": 1}]})

    def test_resource_type_inside_datatype_rejected(self):
        with pytest.raises(MalformedInputError, match="unknown field 'resourceType'"):
            from_json_dict({"resourceType": "Coding"}, r4.Coding)

    def test_choice_conflict_nested(self):
        doc = _observation_wire()
        doc["component"][0]["valueString"] = "high"
        with pytest.raises(ChoiceConflictError) as exc:
            from_json_dict(doc)
        assert exc.value.path == "Observation.component[0].value"

    def test_null_singular_is_absent(self):
        patient = from_json_dict({"resourceType": "Patient", "gender": None, "name": None})
        assert patient == r4.Patient()

    def test_empty_sidecar_is_absent(self):
        patient = from_json_dict({"resourceType": "Patient", "_gender": {}})
        assert patient.gender is None

    def test_null_entry_without_sidecar_dropped(self):
        patient = from_json_dict({"resourceType": "Patient", "name": [{"given": ["a", None, "b"]}]})
        assert patient.name[0].given == [String("a"), String("b")]

    def test_non_finite_float_decimal_rejected(self):
        doc = {"resourceType": "Observation", "valueQuantity": {"value": float("inf")}}
        with pytest.raises(MalformedInputError, match="expected Decimal value") as exc:
            from_json_dict(doc)
        assert exc.value.path == "Observation.valueQuantity.value"

    def test_fractional_integer_rejected(self):
        with pytest.raises(MalformedInputError, match="got number"):
            decode_json(b'{"resourceType":"Patient","multipleBirthInteger":1.0}')

    def test_all_errors_are_decode_errors(self):
        for bad in (b"{", b'{"resourceType":"X"}', b'{"resourceType":"Patient","q":1}'):
            with pytest.raises(DecodeError):
                decode_json(bad)


def _observation_wire():
    return json.loads(encode_json(_observation()))
