"""Parameters: operation request or response parameters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from fhir_toolbox.element import BackboneElement, Resource, choice, element
from fhir_toolbox.primitives import String
from fhir_toolbox.r4._datatypes import OPEN_TYPES


@dataclass
class ParametersParameter(BackboneElement):
    name: Optional[String] = element(String)
    value: Any = choice(*OPEN_TYPES)
    resource: Optional[Resource] = element(Resource)
    part: list[ParametersParameter] = element("ParametersParameter", repeated=True)


@dataclass
class Parameters(Resource):
    resource_type = "Parameters"

    parameter: list[ParametersParameter] = element(ParametersParameter, repeated=True)

    def get(self, name: str) -> Optional[ParametersParameter]:
        """First top-level parameter called ``name``, or ``None``."""
        for param in self.parameter:
            if param.name is not None and param.name.value == name:
                return param
        return None
