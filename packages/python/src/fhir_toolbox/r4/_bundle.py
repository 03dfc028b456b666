"""
Bundle: a container for a collection of resources.

``Bundle.entry.resource`` and ``Bundle.entry.response.outcome`` are
boxed: they hold any registered resource and carry its
``resourceType`` on the wire.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fhir_toolbox.element import BackboneElement, Resource, element
from fhir_toolbox.primitives import Code, Decimal, Instant, String, UnsignedInt, Uri
from fhir_toolbox.r4._datatypes import Identifier, Signature


@dataclass
class BundleLink(BackboneElement):
    relation: Optional[String] = element(String)
    url: Optional[Uri] = element(Uri)


@dataclass
class BundleEntrySearch(BackboneElement):
    mode: Optional[Code] = element(Code)
    score: Optional[Decimal] = element(Decimal)


@dataclass
class BundleEntryRequest(BackboneElement):
    method: Optional[Code] = element(Code)
    url: Optional[Uri] = element(Uri)
    if_none_match: Optional[String] = element(String)
    if_modified_since: Optional[Instant] = element(Instant)
    if_match: Optional[String] = element(String)
    if_none_exist: Optional[String] = element(String)


@dataclass
class BundleEntryResponse(BackboneElement):
    status: Optional[String] = element(String)
    location: Optional[Uri] = element(Uri)
    etag: Optional[String] = element(String)
    last_modified: Optional[Instant] = element(Instant)
    outcome: Optional[Resource] = element(Resource)


@dataclass
class BundleEntry(BackboneElement):
    link: list[BundleLink] = element(BundleLink, repeated=True)
    full_url: Optional[Uri] = element(Uri)
    resource: Optional[Resource] = element(Resource)
    search: Optional[BundleEntrySearch] = element(BundleEntrySearch)
    request: Optional[BundleEntryRequest] = element(BundleEntryRequest)
    response: Optional[BundleEntryResponse] = element(BundleEntryResponse)


@dataclass
class Bundle(Resource):
    resource_type = "Bundle"

    identifier: Optional[Identifier] = element(Identifier)
    type: Optional[Code] = element(Code)
    timestamp: Optional[Instant] = element(Instant)
    total: Optional[UnsignedInt] = element(UnsignedInt)
    link: list[BundleLink] = element(BundleLink, repeated=True)
    entry: list[BundleEntry] = element(BundleEntry, repeated=True)
    signature: Optional[Signature] = element(Signature)

    def resources(self) -> list[Resource]:
        """The resources of all entries, in entry order."""
        return [e.resource for e in self.entry if e.resource is not None]
