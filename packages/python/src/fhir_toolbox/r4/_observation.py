"""
Observation: measurements and simple assertions about a patient,
device or other subject.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from fhir_toolbox.element import BackboneElement, DomainResource, choice, element
from fhir_toolbox.primitives import Boolean, Code, DateTime, Instant, Integer, String, Time
from fhir_toolbox.r4._datatypes import (
    Annotation,
    CodeableConcept,
    Identifier,
    Period,
    Quantity,
    Range,
    Ratio,
    Reference,
    SampledData,
    Timing,
)

OBSERVATION_VALUE_TYPES = (
    Quantity,
    CodeableConcept,
    String,
    Boolean,
    Integer,
    Range,
    Ratio,
    SampledData,
    Time,
    DateTime,
    Period,
)


@dataclass
class ObservationReferenceRange(BackboneElement):
    low: Optional[Quantity] = element(Quantity)
    high: Optional[Quantity] = element(Quantity)
    type: Optional[CodeableConcept] = element(CodeableConcept)
    applies_to: list[CodeableConcept] = element(CodeableConcept, repeated=True)
    age: Optional[Range] = element(Range)
    text: Optional[String] = element(String)


@dataclass
class ObservationComponent(BackboneElement):
    code: Optional[CodeableConcept] = element(CodeableConcept)
    value: Any = choice(*OBSERVATION_VALUE_TYPES)
    data_absent_reason: Optional[CodeableConcept] = element(CodeableConcept)
    interpretation: list[CodeableConcept] = element(CodeableConcept, repeated=True)
    reference_range: list[ObservationReferenceRange] = element(ObservationReferenceRange, repeated=True)


@dataclass
class Observation(DomainResource):
    resource_type = "Observation"

    identifier: list[Identifier] = element(Identifier, repeated=True)
    based_on: list[Reference] = element(Reference, repeated=True)
    part_of: list[Reference] = element(Reference, repeated=True)
    status: Optional[Code] = element(Code)
    category: list[CodeableConcept] = element(CodeableConcept, repeated=True)
    code: Optional[CodeableConcept] = element(CodeableConcept)
    subject: Optional[Reference] = element(Reference)
    focus: list[Reference] = element(Reference, repeated=True)
    encounter: Optional[Reference] = element(Reference)
    effective: Any = choice(DateTime, Period, Timing, Instant)
    issued: Optional[Instant] = element(Instant)
    performer: list[Reference] = element(Reference, repeated=True)
    value: Any = choice(*OBSERVATION_VALUE_TYPES)
    data_absent_reason: Optional[CodeableConcept] = element(CodeableConcept)
    interpretation: list[CodeableConcept] = element(CodeableConcept, repeated=True)
    note: list[Annotation] = element(Annotation, repeated=True)
    body_site: Optional[CodeableConcept] = element(CodeableConcept)
    method: Optional[CodeableConcept] = element(CodeableConcept)
    specimen: Optional[Reference] = element(Reference)
    device: Optional[Reference] = element(Reference)
    reference_range: list[ObservationReferenceRange] = element(ObservationReferenceRange, repeated=True)
    has_member: list[Reference] = element(Reference, repeated=True)
    derived_from: list[Reference] = element(Reference, repeated=True)
    component: list[ObservationComponent] = element(ObservationComponent, repeated=True)
