"""Appointment: a booking of a healthcare event among patients, practitioners and devices."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fhir_toolbox.element import BackboneElement, DomainResource, element
from fhir_toolbox.primitives import Code, DateTime, Instant, PositiveInt, String, UnsignedInt
from fhir_toolbox.r4._datatypes import CodeableConcept, Identifier, Period, Reference


@dataclass
class AppointmentParticipant(BackboneElement):
    type: list[CodeableConcept] = element(CodeableConcept, repeated=True)
    actor: Optional[Reference] = element(Reference)
    required: Optional[Code] = element(Code)
    status: Optional[Code] = element(Code)
    period: Optional[Period] = element(Period)


@dataclass
class Appointment(DomainResource):
    resource_type = "Appointment"

    identifier: list[Identifier] = element(Identifier, repeated=True)
    status: Optional[Code] = element(Code)
    cancelation_reason: Optional[CodeableConcept] = element(CodeableConcept)
    service_category: list[CodeableConcept] = element(CodeableConcept, repeated=True)
    service_type: list[CodeableConcept] = element(CodeableConcept, repeated=True)
    specialty: list[CodeableConcept] = element(CodeableConcept, repeated=True)
    appointment_type: Optional[CodeableConcept] = element(CodeableConcept)
    reason_code: list[CodeableConcept] = element(CodeableConcept, repeated=True)
    reason_reference: list[Reference] = element(Reference, repeated=True)
    priority: Optional[UnsignedInt] = element(UnsignedInt)
    description: Optional[String] = element(String)
    supporting_information: list[Reference] = element(Reference, repeated=True)
    start: Optional[Instant] = element(Instant)
    end: Optional[Instant] = element(Instant)
    minutes_duration: Optional[PositiveInt] = element(PositiveInt)
    slot: list[Reference] = element(Reference, repeated=True)
    created: Optional[DateTime] = element(DateTime)
    comment: Optional[String] = element(String)
    patient_instruction: Optional[String] = element(String)
    based_on: list[Reference] = element(Reference, repeated=True)
    participant: list[AppointmentParticipant] = element(AppointmentParticipant, repeated=True)
    requested_period: list[Period] = element(Period, repeated=True)
