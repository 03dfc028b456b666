"""Patient: demographics about an individual receiving care."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from fhir_toolbox.element import BackboneElement, DomainResource, choice, element
from fhir_toolbox.primitives import Boolean, Code, Date, DateTime, Integer
from fhir_toolbox.r4._datatypes import (
    Address,
    Attachment,
    CodeableConcept,
    ContactPoint,
    HumanName,
    Identifier,
    Period,
    Reference,
)


@dataclass
class PatientContact(BackboneElement):
    relationship: list[CodeableConcept] = element(CodeableConcept, repeated=True)
    name: Optional[HumanName] = element(HumanName)
    telecom: list[ContactPoint] = element(ContactPoint, repeated=True)
    address: Optional[Address] = element(Address)
    gender: Optional[Code] = element(Code)
    organization: Optional[Reference] = element(Reference)
    period: Optional[Period] = element(Period)


@dataclass
class PatientCommunication(BackboneElement):
    language: Optional[CodeableConcept] = element(CodeableConcept)
    preferred: Optional[Boolean] = element(Boolean)


@dataclass
class PatientLink(BackboneElement):
    other: Optional[Reference] = element(Reference)
    type: Optional[Code] = element(Code)


@dataclass
class Patient(DomainResource):
    resource_type = "Patient"

    identifier: list[Identifier] = element(Identifier, repeated=True)
    active: Optional[Boolean] = element(Boolean)
    name: list[HumanName] = element(HumanName, repeated=True)
    telecom: list[ContactPoint] = element(ContactPoint, repeated=True)
    gender: Optional[Code] = element(Code)
    birth_date: Optional[Date] = element(Date)
    deceased: Any = choice(Boolean, DateTime)
    address: list[Address] = element(Address, repeated=True)
    marital_status: Optional[CodeableConcept] = element(CodeableConcept)
    multiple_birth: Any = choice(Boolean, Integer)
    photo: list[Attachment] = element(Attachment, repeated=True)
    contact: list[PatientContact] = element(PatientContact, repeated=True)
    communication: list[PatientCommunication] = element(PatientCommunication, repeated=True)
    general_practitioner: list[Reference] = element(Reference, repeated=True)
    managing_organization: Optional[Reference] = element(Reference)
    link: list[PatientLink] = element(PatientLink, repeated=True)
