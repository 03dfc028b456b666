"""
FHIR R4 type catalogue.

Importing this package registers every datatype and resource below
with :mod:`fhir_toolbox.registry`.  The catalogue is representative
rather than exhaustive: the general-purpose and metadata datatypes,
plus Appointment, Bundle, Measure, Observation, Parameters, Patient,
SearchParameter and TestReport.
"""

from fhir_toolbox.r4._datatypes import (
    OPEN_TYPES,
    Address,
    Age,
    Annotation,
    Attachment,
    CodeableConcept,
    Coding,
    ContactDetail,
    ContactPoint,
    Count,
    Distance,
    Duration,
    Expression,
    Extension,
    HumanName,
    Identifier,
    Meta,
    Money,
    Narrative,
    Period,
    Quantity,
    Range,
    Ratio,
    Reference,
    RelatedArtifact,
    SampledData,
    Signature,
    Timing,
    TimingRepeat,
    UsageContext,
)
from fhir_toolbox.r4._appointment import Appointment, AppointmentParticipant
from fhir_toolbox.r4._bundle import (
    Bundle,
    BundleEntry,
    BundleEntryRequest,
    BundleEntryResponse,
    BundleEntrySearch,
    BundleLink,
)
from fhir_toolbox.r4._measure import (
    Measure,
    MeasureGroup,
    MeasureGroupPopulation,
    MeasureGroupStratifier,
    MeasureGroupStratifierComponent,
    MeasureSupplementalData,
)
from fhir_toolbox.r4._observation import (
    Observation,
    ObservationComponent,
    ObservationReferenceRange,
)
from fhir_toolbox.r4._parameters import Parameters, ParametersParameter
from fhir_toolbox.r4._patient import (
    Patient,
    PatientCommunication,
    PatientContact,
    PatientLink,
)
from fhir_toolbox.r4._search_parameter import SearchParameter, SearchParameterComponent
from fhir_toolbox.r4._test_report import (
    TestReport,
    TestReportParticipant,
    TestReportSetup,
    TestReportSetupAction,
    TestReportSetupActionAssert,
    TestReportSetupActionOperation,
    TestReportTeardown,
    TestReportTeardownAction,
    TestReportTest,
    TestReportTestAction,
)

__all__ = [
    # Datatypes
    "OPEN_TYPES",
    "Address",
    "Age",
    "Annotation",
    "Attachment",
    "CodeableConcept",
    "Coding",
    "ContactDetail",
    "ContactPoint",
    "Count",
    "Distance",
    "Duration",
    "Expression",
    "Extension",
    "HumanName",
    "Identifier",
    "Meta",
    "Money",
    "Narrative",
    "Period",
    "Quantity",
    "Range",
    "Ratio",
    "Reference",
    "RelatedArtifact",
    "SampledData",
    "Signature",
    "Timing",
    "TimingRepeat",
    "UsageContext",
    # Resources
    "Appointment",
    "AppointmentParticipant",
    "Bundle",
    "BundleEntry",
    "BundleEntryRequest",
    "BundleEntryResponse",
    "BundleEntrySearch",
    "BundleLink",
    "Measure",
    "MeasureGroup",
    "MeasureGroupPopulation",
    "MeasureGroupStratifier",
    "MeasureGroupStratifierComponent",
    "MeasureSupplementalData",
    "Observation",
    "ObservationComponent",
    "ObservationReferenceRange",
    "Parameters",
    "ParametersParameter",
    "Patient",
    "PatientCommunication",
    "PatientContact",
    "PatientLink",
    "SearchParameter",
    "SearchParameterComponent",
    "TestReport",
    "TestReportParticipant",
    "TestReportSetup",
    "TestReportSetupAction",
    "TestReportSetupActionAssert",
    "TestReportSetupActionOperation",
    "TestReportTeardown",
    "TestReportTeardownAction",
    "TestReportTest",
    "TestReportTestAction",
]
