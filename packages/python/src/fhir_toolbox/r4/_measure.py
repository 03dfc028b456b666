"""Measure: a quality measure definition."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from fhir_toolbox.element import BackboneElement, DomainResource, choice, element
from fhir_toolbox.primitives import Boolean, Canonical, Code, Date, DateTime, Markdown, String, Uri
from fhir_toolbox.r4._datatypes import (
    CodeableConcept,
    ContactDetail,
    Expression,
    Identifier,
    Period,
    Reference,
    RelatedArtifact,
    UsageContext,
)


@dataclass
class MeasureGroupPopulation(BackboneElement):
    code: Optional[CodeableConcept] = element(CodeableConcept)
    description: Optional[String] = element(String)
    criteria: Optional[Expression] = element(Expression)


@dataclass
class MeasureGroupStratifierComponent(BackboneElement):
    code: Optional[CodeableConcept] = element(CodeableConcept)
    description: Optional[String] = element(String)
    criteria: Optional[Expression] = element(Expression)


@dataclass
class MeasureGroupStratifier(BackboneElement):
    code: Optional[CodeableConcept] = element(CodeableConcept)
    description: Optional[String] = element(String)
    criteria: Optional[Expression] = element(Expression)
    component: list[MeasureGroupStratifierComponent] = element(MeasureGroupStratifierComponent, repeated=True)


@dataclass
class MeasureGroup(BackboneElement):
    code: Optional[CodeableConcept] = element(CodeableConcept)
    description: Optional[String] = element(String)
    population: list[MeasureGroupPopulation] = element(MeasureGroupPopulation, repeated=True)
    stratifier: list[MeasureGroupStratifier] = element(MeasureGroupStratifier, repeated=True)


@dataclass
class MeasureSupplementalData(BackboneElement):
    code: Optional[CodeableConcept] = element(CodeableConcept)
    usage: list[CodeableConcept] = element(CodeableConcept, repeated=True)
    description: Optional[String] = element(String)
    criteria: Optional[Expression] = element(Expression)


@dataclass
class Measure(DomainResource):
    resource_type = "Measure"

    url: Optional[Uri] = element(Uri)
    identifier: list[Identifier] = element(Identifier, repeated=True)
    version: Optional[String] = element(String)
    name: Optional[String] = element(String)
    title: Optional[String] = element(String)
    subtitle: Optional[String] = element(String)
    status: Optional[Code] = element(Code)
    experimental: Optional[Boolean] = element(Boolean)
    subject: Any = choice(CodeableConcept, Reference)
    date: Optional[DateTime] = element(DateTime)
    publisher: Optional[String] = element(String)
    contact: list[ContactDetail] = element(ContactDetail, repeated=True)
    description: Optional[Markdown] = element(Markdown)
    use_context: list[UsageContext] = element(UsageContext, repeated=True)
    jurisdiction: list[CodeableConcept] = element(CodeableConcept, repeated=True)
    purpose: Optional[Markdown] = element(Markdown)
    usage: Optional[String] = element(String)
    copyright: Optional[Markdown] = element(Markdown)
    approval_date: Optional[Date] = element(Date)
    last_review_date: Optional[Date] = element(Date)
    effective_period: Optional[Period] = element(Period)
    topic: list[CodeableConcept] = element(CodeableConcept, repeated=True)
    author: list[ContactDetail] = element(ContactDetail, repeated=True)
    editor: list[ContactDetail] = element(ContactDetail, repeated=True)
    reviewer: list[ContactDetail] = element(ContactDetail, repeated=True)
    endorser: list[ContactDetail] = element(ContactDetail, repeated=True)
    related_artifact: list[RelatedArtifact] = element(RelatedArtifact, repeated=True)
    library: list[Canonical] = element(Canonical, repeated=True)
    disclaimer: Optional[Markdown] = element(Markdown)
    scoring: Optional[CodeableConcept] = element(CodeableConcept)
    composite_scoring: Optional[CodeableConcept] = element(CodeableConcept)
    type: list[CodeableConcept] = element(CodeableConcept, repeated=True)
    risk_adjustment: Optional[String] = element(String)
    rate_aggregation: Optional[String] = element(String)
    rationale: Optional[Markdown] = element(Markdown)
    clinical_recommendation_statement: Optional[Markdown] = element(Markdown)
    improvement_notation: Optional[CodeableConcept] = element(CodeableConcept)
    definition: list[Markdown] = element(Markdown, repeated=True)
    guidance: Optional[Markdown] = element(Markdown)
    group: list[MeasureGroup] = element(MeasureGroup, repeated=True)
    supplemental_data: list[MeasureSupplementalData] = element(MeasureSupplementalData, repeated=True)
