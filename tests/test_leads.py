"""Tests for lead attribution and UTM parsing."""

import pytest

from conftest import make_contract
from contract_enrichment.enrichment.leads import (
    attribute_lead,
    index_leads,
    lead_reason,
    needs_fallback,
    parse_lead,
    parse_utm_params,
)
from contract_enrichment.enrichment.normalizer import normalize_contract
from contract_enrichment.models.contract import ContractRecord, LeadSummary
from contract_enrichment.models.metric import Metric
from contract_enrichment.models.raw import RawRecord


def _contract(**kwargs) -> ContractRecord:
    return normalize_contract(RawRecord(data=make_contract(**kwargs)))


def _lead(lead_id: str, created_at: str | None = "2025-07-20T00:00:00.000+0000", **extra) -> RawRecord:
    return RawRecord(data={"Id": lead_id, "CreatedDate": created_at, "Company": "Seoul Bistro", **extra})


class TestParseUtmParams:
    """Tests for parse_utm_params."""

    def test_full_url(self) -> None:
        """Parameters are read from the query part of a URL."""
        result = parse_utm_params(
            "https://example.com/landing?utm_source=naver&utm_content=banner&utm_term=pos%20system"
        )
        assert result == {"utm_source": "naver", "utm_content": "banner", "utm_term": "pos system"}

    def test_bare_query_string(self) -> None:
        """A query string without a URL works too."""
        assert parse_utm_params("utm_source=google")["utm_source"] == "google"

    def test_absent_keys_are_none(self) -> None:
        """Missing and blank parameters come back as None."""
        result = parse_utm_params("https://example.com/?utm_source=&foo=bar")
        assert result == {"utm_source": None, "utm_content": None, "utm_term": None}

    @pytest.mark.parametrize("raw", [None, "", "???", "%%%", "no params here"])
    def test_never_raises(self, raw: str | None) -> None:
        """Garbage input yields all three keys."""
        result = parse_utm_params(raw)
        assert set(result) == {"utm_source", "utm_content", "utm_term"}

    def test_first_value_wins(self) -> None:
        """Repeated parameters take the first occurrence."""
        assert parse_utm_params("?utm_source=a&utm_source=b")["utm_source"] == "a"


class TestParseLead:
    """Tests for parse_lead."""

    @pytest.mark.parametrize("field", ["utm__c", "UTM__c", "Utm__c"])
    def test_utm_field_spellings(self, field: str) -> None:
        """The UTM string is found under any of its spellings."""
        lead = parse_lead(_lead("00Q1", **{field: "?utm_source=kakao"}))
        assert lead.utm == "?utm_source=kakao"
        assert lead.utm_source == "kakao"

    def test_fields(self) -> None:
        """Basic lead fields are carried over."""
        lead = parse_lead(_lead("00Q1", LeadSource="Web"))
        assert lead.id == "00Q1"
        assert lead.company == "Seoul Bistro"
        assert lead.lead_source == "Web"
        assert lead.utm is None
        assert lead.utm_source is None


class TestIndexLeads:
    """Tests for index_leads."""

    def test_earliest_created_wins(self) -> None:
        """Several leads on one key resolve to the earliest created."""
        index = index_leads({
            "006A": [
                _lead("00Q2", "2025-07-10T00:00:00.000+0000"),
                _lead("00Q1", "2025-07-01T00:00:00.000+0000"),
            ]
        })
        assert index["006A"].id == "00Q1"

    def test_independent_of_order(self) -> None:
        """The same set in another order resolves identically."""
        a = _lead("00Q2", "2025-07-10T00:00:00.000+0000")
        b = _lead("00Q1", "2025-07-10T00:00:00.000+0000")
        assert index_leads({"k": [a, b]})["k"].id == index_leads({"k": [b, a]})["k"].id == "00Q1"

    def test_undated_lead_loses(self) -> None:
        """A lead without creation date is picked only when nothing else exists."""
        index = index_leads({"k": [_lead("00Q0", None), _lead("00Q9")]})
        assert index["k"].id == "00Q9"


class TestLeadReason:
    """Tests for lead_reason."""

    def test_reasons(self) -> None:
        """Missing, malformed and well-formed references."""
        assert lead_reason(None) == "missing-reference"
        assert lead_reason("") == "missing-reference"
        assert lead_reason("006000000000001") == "invalid-reference-format"
        assert lead_reason("00Q000000000001") == "not-found"


class TestAttributeLead:
    """Tests for attribute_lead."""

    def test_primary_lookup(self) -> None:
        """A converted-lead id found by id is used directly."""
        contract = _contract()
        lead = parse_lead(_lead("00Q000000000001", "2025-07-20T00:00:00.000+0000"))

        result = attribute_lead(contract, {"00Q000000000001": lead}, {})

        assert result.lead == lead
        assert result.lead_reason is None
        # 2025-07-20T00:00Z -> 2025-08-01T00:00Z
        assert result.lead_to_opportunity == Metric.ok(12)

    def test_fallback_by_opportunity(self) -> None:
        """Without a converted-lead id, the lead converted into the opportunity is used."""
        contract = _contract(converted_lead_id=None)
        lead = parse_lead(_lead("00Q000000000009"))

        result = attribute_lead(contract, {}, {"006000000000001": lead})

        assert result.lead is not None
        assert result.lead.id == "00Q000000000009"
        assert result.lead_reason is None

    def test_not_found(self) -> None:
        """A well-formed id that matches nothing anywhere is not-found."""
        result = attribute_lead(_contract(), {}, {})
        assert result.lead is None
        assert result.lead_reason == "not-found"
        assert result.lead_to_opportunity == Metric.missing()

    def test_invalid_format(self) -> None:
        """An id that is not a lead id is reported as such."""
        result = attribute_lead(_contract(converted_lead_id="001000000000001"), {}, {})
        assert result.lead_reason == "invalid-reference-format"

    def test_missing_reference(self) -> None:
        """No id and no fallback match is missing-reference."""
        result = attribute_lead(_contract(converted_lead_id=None), {}, {})
        assert result.lead_reason == "missing-reference"

    def test_lead_without_created_date(self) -> None:
        """A resolved lead without creation date gives a missing-date metric."""
        lead = parse_lead(_lead("00Q000000000001", None))
        result = attribute_lead(_contract(), {"00Q000000000001": lead}, {})
        assert result.lead is not None
        assert result.lead_to_opportunity == Metric.missing()


class TestNeedsFallback:
    """Tests for needs_fallback."""

    def test_only_unresolved(self) -> None:
        """Contracts already resolved by lead id are not looked up again."""
        resolved = _contract(contract_id="a0C1", opportunity_id="006A", converted_lead_id="00QA")
        unresolved = _contract(contract_id="a0C2", opportunity_id="006B", converted_lead_id="00QB")
        no_ref = _contract(contract_id="a0C3", opportunity_id="006C", converted_lead_id=None)
        leads = {"00QA": LeadSummary(id="00QA")}

        assert needs_fallback([resolved, unresolved, no_ref], leads) == ["006B", "006C"]
