"""Humaans people directory access."""

from org_contributions.humaans.client import EmployeeRecord, HumaansClient

__all__ = ["EmployeeRecord", "HumaansClient"]
