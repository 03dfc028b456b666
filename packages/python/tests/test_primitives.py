"""Tests for the primitive value model and its split/join routines."""

import decimal
import json
import logging

import pytest

from fhir_toolbox.primitives import (
    PRIMITIVE_TYPES,
    Boolean,
    Date,
    Decimal,
    Integer,
    PositiveInt,
    PrimitiveValue,
    Sidecar,
    String,
    join_primitive,
    join_primitive_list,
    split_primitive,
    split_primitive_list,
)
from fhir_toolbox.r4 import Extension


def _ext(url="http://example.org/ext", text="x"):
    return Extension(url=url, value=String(text))


# ═══════════════════════════════════════════════════════════════════
# Emptiness
# ═══════════════════════════════════════════════════════════════════


class TestIsEmpty:
    def test_default_is_empty(self):
        assert String().is_empty()

    def test_value_makes_non_empty(self):
        assert not String("a").is_empty()

    def test_false_boolean_is_not_empty(self):
        assert not Boolean(False).is_empty()

    def test_zero_integer_is_not_empty(self):
        assert not Integer(0).is_empty()

    def test_empty_string_value_is_not_empty(self):
        assert not String("").is_empty()

    def test_id_only_is_not_empty(self):
        assert not String(id="a1").is_empty()

    def test_extension_only_is_not_empty(self):
        assert not String(extension=[_ext()]).is_empty()


# ═══════════════════════════════════════════════════════════════════
# Split / join (singular)
# ═══════════════════════════════════════════════════════════════════


class TestSplitForWire:
    def test_value_only(self):
        assert Date("2020-01-01").split_for_wire() == ("2020-01-01", None)

    def test_value_and_id(self):
        bare, sidecar = Date("2020-01-01", id="x1").split_for_wire()
        assert bare == "2020-01-01"
        assert sidecar == Sidecar(id="x1")

    def test_annotated_null(self):
        ext = _ext()
        bare, sidecar = String(extension=[ext]).split_for_wire()
        assert bare is None
        assert sidecar == Sidecar(extension=[ext])

    def test_empty(self):
        assert String().split_for_wire() == (None, None)

    def test_sidecar_extension_list_is_a_copy(self):
        value = String("a", extension=[_ext()])
        _, sidecar = value.split_for_wire()
        sidecar.extension.append(_ext(text="y"))
        assert len(value.extension) == 1


class TestJoinFromWire:
    def test_both_absent_gives_empty(self):
        assert String.join_from_wire().is_empty()

    def test_bare_only(self):
        assert String.join_from_wire("a") == String("a")

    def test_sidecar_only(self):
        joined = String.join_from_wire(None, Sidecar(id="s"))
        assert joined == String(id="s")
        assert joined.value is None

    def test_both(self):
        ext = _ext()
        joined = Date.join_from_wire("2020", Sidecar(id="d", extension=[ext]))
        assert joined == Date("2020", id="d", extension=[ext])

    def test_split_then_join_is_identity(self):
        original = Decimal(1.5, id="q", extension=[_ext()])
        assert Decimal.join_from_wire(*original.split_for_wire()) == original


class TestSingularHelpers:
    def test_split_none(self):
        assert split_primitive(None) == (None, None)

    def test_join_nothing_is_none(self):
        assert join_primitive(String, None, None) is None

    def test_join_sidecar_only(self):
        assert join_primitive(String, None, Sidecar(id="a")) == String(id="a")


# ═══════════════════════════════════════════════════════════════════
# Repeated primitives
# ═══════════════════════════════════════════════════════════════════


class TestSplitPrimitiveList:
    def test_values_only_has_no_sidecar_array(self):
        bares, sidecars = split_primitive_list([String("a"), String("b")])
        assert bares == ["a", "b"]
        assert sidecars is None

    def test_sidecar_array_full_length_with_placeholders(self):
        bares, sidecars = split_primitive_list(
            [String("a"), String("b", id="b1"), String("c")]
        )
        assert bares == ["a", "b", "c"]
        assert sidecars == [None, Sidecar(id="b1"), None]

    def test_annotated_null_in_middle(self):
        bares, sidecars = split_primitive_list(
            [String("a"), String(id="n"), String("c")]
        )
        assert bares == ["a", None, "c"]
        assert sidecars == [None, Sidecar(id="n"), None]

    def test_only_annotated_nulls_has_no_bare_array(self):
        bares, sidecars = split_primitive_list([String(id="a"), String(id="b")])
        assert bares is None
        assert sidecars == [Sidecar(id="a"), Sidecar(id="b")]

    def test_empty_list(self):
        assert split_primitive_list([]) == (None, None)

    def test_empty_elements_dropped(self):
        bares, sidecars = split_primitive_list(
            [String("a"), String(), String(id="n"), String(), String("b")]
        )
        assert bares == ["a", None, "b"]
        assert sidecars == [None, Sidecar(id="n"), None]

    def test_only_empty_elements(self):
        assert split_primitive_list([String(), String()]) == (None, None)


class TestJoinPrimitiveList:
    def test_aligns_by_index(self):
        joined = join_primitive_list(String, ["a", "b"], [None, Sidecar(id="b1")])
        assert joined == [String("a"), String("b", id="b1")]

    def test_pads_bare_values_when_sidecars_longer(self):
        joined = join_primitive_list(String, ["a"], [None, Sidecar(id="z")])
        assert joined == [String("a"), String(id="z")]

    def test_sidecars_shorter_than_values(self):
        joined = join_primitive_list(String, ["a", "b", "c"], [Sidecar(id="a1")])
        assert joined == [String("a", id="a1"), String("b"), String("c")]

    def test_no_bare_array(self):
        joined = join_primitive_list(Date, None, [Sidecar(id="d")])
        assert joined == [Date(id="d")]

    def test_nothing(self):
        assert join_primitive_list(String, None, None) == []

    def test_position_with_both_halves_absent_is_skipped(self):
        joined = join_primitive_list(String, ["a", None, "b"], None)
        assert joined == [String("a"), String("b")]

    def test_null_sidecar_and_null_value_skipped(self):
        joined = join_primitive_list(String, ["a", None], [None, None])
        assert joined == [String("a")]

    def test_round_trip(self):
        values = [String("a", id="1"), String(id="2"), String("c")]
        assert join_primitive_list(String, *split_primitive_list(values)) == values


# ═══════════════════════════════════════════════════════════════════
# Wire typing
# ═══════════════════════════════════════════════════════════════════


class TestAccepts:
    def test_string_accepts_str(self):
        assert String.accepts("x")

    def test_string_rejects_number(self):
        assert not String.accepts(1)

    def test_boolean_accepts_bool_only(self):
        assert Boolean.accepts(True)
        assert not Boolean.accepts(1)
        assert not Boolean.accepts("true")

    def test_integer_rejects_bool(self):
        assert not Integer.accepts(True)

    def test_integer_rejects_float(self):
        assert not Integer.accepts(1.0)

    def test_positive_int_inherits_integer_typing(self):
        assert PositiveInt.accepts(3)
        assert not PositiveInt.accepts(False)

    def test_decimal_accepts_int_float_and_decimal(self):
        assert Decimal.accepts(1)
        assert Decimal.accepts(1.25)
        assert Decimal.accepts(decimal.Decimal("1.50"))
        assert not Decimal.accepts(False)
        assert not Decimal.accepts("1.0")

    def test_decimal_rejects_non_finite(self):
        assert not Decimal.accepts(float("inf"))
        assert not Decimal.accepts(float("nan"))
        assert not Decimal.accepts(decimal.Decimal("Infinity"))
        assert not Decimal.accepts(decimal.Decimal("NaN"))


class TestDecimalValue:
    def test_float_is_held_as_its_shortest_repr(self):
        assert Decimal(6.3).value == decimal.Decimal("6.3")
        assert isinstance(Decimal(6.3).value, decimal.Decimal)

    def test_int_stays_int(self):
        assert Decimal(7).value == 7
        assert isinstance(Decimal(7).value, int)

    def test_decimal_kept_as_given(self):
        digits = decimal.Decimal("12345678901234567890.123456789")
        assert Decimal(digits).value is digits


class TestXmlText:
    def test_boolean(self):
        assert Boolean(True).to_xml_text() == "true"
        assert Boolean(False).to_xml_text() == "false"
        assert Boolean.from_xml_text("false") is False

    def test_boolean_rejects_other_spellings(self):
        with pytest.raises(ValueError, match="invalid boolean"):
            Boolean.from_xml_text("True")

    def test_integer(self):
        assert Integer.from_xml_text("-42") == -42

    def test_integer_rejects_decimal_text(self):
        with pytest.raises(ValueError, match="invalid integer"):
            Integer.from_xml_text("4.0")

    def test_decimal_keeps_int_or_exact_decimal(self):
        assert Decimal.from_xml_text("7") == 7
        assert isinstance(Decimal.from_xml_text("7"), int)
        assert Decimal.from_xml_text("7.0") == decimal.Decimal("7.0")
        assert str(Decimal.from_xml_text("1.50")) == "1.50"
        assert Decimal.from_xml_text("1e3") == 1000

    def test_decimal_text_keeps_trailing_zeros(self):
        assert Decimal(decimal.Decimal("1.50")).to_xml_text() == "1.50"

    def test_huge_exponent_stays_finite(self):
        assert Decimal.from_xml_text("1e400").is_finite()

    def test_non_finite_decimal_text_rejected(self):
        with pytest.raises(ValueError, match="Out of range"):
            Decimal(float("inf")).to_xml_text()

    def test_decimal_rejects_garbage(self):
        with pytest.raises(ValueError):
            Decimal.from_xml_text("abc")

    def test_float_decimal_text_parses_back(self):
        value = Decimal(0.1)
        assert value.to_xml_text() == "0.1"
        assert Decimal.from_xml_text(value.to_xml_text()) == decimal.Decimal("0.1")

    def test_string_is_identity(self):
        assert String.from_xml_text(" spaced ") == " spaced "


class TestPrimitiveTypes:
    def test_nineteen_types(self):
        assert len(PRIMITIVE_TYPES) == 19
        assert len(set(PRIMITIVE_TYPES)) == 19

    def test_all_are_primitive_values(self):
        assert all(issubclass(t, PrimitiveValue) for t in PRIMITIVE_TYPES)

    def test_types_are_distinct_for_equality(self):
        from fhir_toolbox.primitives import Code

        assert String("a") != Code("a")


# ═══════════════════════════════════════════════════════════════════
# Navigation and debug output
# ═══════════════════════════════════════════════════════════════════


class TestChildren:
    def test_all_children(self):
        ext = _ext()
        assert String("a", id="s1", extension=[ext]).children() == ["s1", ext]

    def test_by_name(self):
        ext = _ext()
        value = String("a", id="s1", extension=[ext])
        assert value.children("extension") == [ext]
        assert value.children("id") == ["s1"]

    def test_value_is_not_a_child(self):
        assert String("a").children() == []
        assert String("a").children("value") == []


class TestTypeInfo:
    def test_primitive_type(self):
        info = Date.type_info()
        assert info.name == "Date"
        assert info.base_type == "PrimitiveType"
        assert info.namespace == "FHIR"
        assert [e.name for e in info.elements] == ["id", "extension"]
        assert info.element("extension").type_specifier() == "List<FHIR.Extension>"
        assert info.element("id").type_specifier() == "FHIR.string"


class TestStr:
    def test_value_only(self):
        assert json.loads(str(String("x"))) == {"value": "x"}

    def test_id_and_extension(self):
        out = json.loads(str(Boolean(True, id="b", extension=[_ext()])))
        assert out["id"] == "b"
        assert out["value"] is True
        assert out["extension"][0]["url"] == "http://example.org/ext"

    def test_decimal_digits_exact(self):
        assert '"value": 1.50' in str(Decimal(decimal.Decimal("1.50")))

    def test_empty(self):
        assert str(String()) == "{}"

    def test_failure_falls_back_to_null(self, caplog):
        with caplog.at_level(logging.WARNING, logger="fhir_toolbox.primitives"):
            assert str(Decimal(float("nan"))) == "null"
        assert any("Decimal" in r.getMessage() for r in caplog.records)

    def test_repr_unaffected(self):
        assert repr(String("x")).startswith("String(")
