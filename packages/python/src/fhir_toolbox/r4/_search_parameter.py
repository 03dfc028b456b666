"""SearchParameter: a search parameter that defines a named search item."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fhir_toolbox.element import BackboneElement, DomainResource, element
from fhir_toolbox.primitives import Boolean, Canonical, Code, DateTime, Markdown, String, Uri
from fhir_toolbox.r4._datatypes import CodeableConcept, ContactDetail, UsageContext


@dataclass
class SearchParameterComponent(BackboneElement):
    definition: Optional[Canonical] = element(Canonical)
    expression: Optional[String] = element(String)


@dataclass
class SearchParameter(DomainResource):
    resource_type = "SearchParameter"

    url: Optional[Uri] = element(Uri)
    version: Optional[String] = element(String)
    name: Optional[String] = element(String)
    derived_from: Optional[Canonical] = element(Canonical)
    status: Optional[Code] = element(Code)
    experimental: Optional[Boolean] = element(Boolean)
    date: Optional[DateTime] = element(DateTime)
    publisher: Optional[String] = element(String)
    contact: list[ContactDetail] = element(ContactDetail, repeated=True)
    description: Optional[Markdown] = element(Markdown)
    use_context: list[UsageContext] = element(UsageContext, repeated=True)
    jurisdiction: list[CodeableConcept] = element(CodeableConcept, repeated=True)
    purpose: Optional[Markdown] = element(Markdown)
    code: Optional[Code] = element(Code)
    base: list[Code] = element(Code, repeated=True)
    type: Optional[Code] = element(Code)
    expression: Optional[String] = element(String)
    xpath: Optional[String] = element(String)
    xpath_usage: Optional[Code] = element(Code)
    target: list[Code] = element(Code, repeated=True)
    multiple_or: Optional[Boolean] = element(Boolean)
    multiple_and: Optional[Boolean] = element(Boolean)
    comparator: list[Code] = element(Code, repeated=True)
    modifier: list[Code] = element(Code, repeated=True)
    chain: list[String] = element(String, repeated=True)
    component: list[SearchParameterComponent] = element(SearchParameterComponent, repeated=True)
