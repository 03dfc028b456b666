"""TestReport: a summary of information based on the results of executing a TestScript."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fhir_toolbox.element import BackboneElement, DomainResource, element
from fhir_toolbox.primitives import Code, DateTime, Decimal, Markdown, String, Uri
from fhir_toolbox.r4._datatypes import Identifier, Reference


@dataclass
class TestReportParticipant(BackboneElement):
    type: Optional[Code] = element(Code)
    uri: Optional[Uri] = element(Uri)
    display: Optional[String] = element(String)


@dataclass
class TestReportSetupActionOperation(BackboneElement):
    result: Optional[Code] = element(Code)
    message: Optional[Markdown] = element(Markdown)
    detail: Optional[Uri] = element(Uri)


@dataclass
class TestReportSetupActionAssert(BackboneElement):
    result: Optional[Code] = element(Code)
    message: Optional[Markdown] = element(Markdown)
    detail: Optional[String] = element(String)


@dataclass
class TestReportSetupAction(BackboneElement):
    operation: Optional[TestReportSetupActionOperation] = element(TestReportSetupActionOperation)
    assert_: Optional[TestReportSetupActionAssert] = element(TestReportSetupActionAssert)


@dataclass
class TestReportSetup(BackboneElement):
    action: list[TestReportSetupAction] = element(TestReportSetupAction, repeated=True)


@dataclass
class TestReportTestAction(BackboneElement):
    operation: Optional[TestReportSetupActionOperation] = element(TestReportSetupActionOperation)
    assert_: Optional[TestReportSetupActionAssert] = element(TestReportSetupActionAssert)


@dataclass
class TestReportTest(BackboneElement):
    name: Optional[String] = element(String)
    description: Optional[String] = element(String)
    action: list[TestReportTestAction] = element(TestReportTestAction, repeated=True)


@dataclass
class TestReportTeardownAction(BackboneElement):
    operation: Optional[TestReportSetupActionOperation] = element(TestReportSetupActionOperation)


@dataclass
class TestReportTeardown(BackboneElement):
    action: list[TestReportTeardownAction] = element(TestReportTeardownAction, repeated=True)


@dataclass
class TestReport(DomainResource):
    resource_type = "TestReport"

    identifier: Optional[Identifier] = element(Identifier)
    name: Optional[String] = element(String)
    status: Optional[Code] = element(Code)
    test_script: Optional[Reference] = element(Reference)
    result: Optional[Code] = element(Code)
    score: Optional[Decimal] = element(Decimal)
    tester: Optional[String] = element(String)
    issued: Optional[DateTime] = element(DateTime)
    participant: list[TestReportParticipant] = element(TestReportParticipant, repeated=True)
    setup: Optional[TestReportSetup] = element(TestReportSetup)
    test: list[TestReportTest] = element(TestReportTest, repeated=True)
    teardown: Optional[TestReportTeardown] = element(TestReportTeardown)
