"""Exception hierarchy for the organ tree engine."""

from __future__ import annotations


class OrganTreeError(Exception):
    """Base class for organ tree failures."""


class ParameterLookupError(OrganTreeError, LookupError):
    """No organ type parameter was registered for an (organ type, sub type) pair."""

    def __init__(self, organ_type: int, sub_type: int):
        self.organ_type = organ_type
        self.sub_type = sub_type
        super().__init__(
            f"organ type parameter of organ type {organ_type}, sub type {sub_type} was not set"
        )


class OrganTypeNameError(OrganTreeError, LookupError):
    """Organ type name or number outside the organ type table."""


class MalformedInputError(OrganTreeError, ValueError):
    """A parameter file is missing, unparsable, or lacks an expected tag."""
