"""Salesforce query connector and SOQL builders."""

from .connector import SalesforceConnector

__all__ = ["SalesforceConnector"]
