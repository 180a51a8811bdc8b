"""Contract reconciliation and enrichment for CRM sales reporting."""

__version__ = "0.1.0"
