"""Pytest fixtures for contract-enrichment tests."""

from typing import Any, Callable, Optional

import pytest

from contract_enrichment.connectors.base import BaseQueryClient
from contract_enrichment.models.raw import QueryPage, RawRecord


class FakeQueryClient(BaseQueryClient):
    """
    In-memory query client. `responder` maps a query string to the records it returns;
    every query is recorded in `queries`.
    """

    def __init__(self, responder: Callable[[str], list[dict[str, Any]]]):
        self._responder = responder
        self.queries: list[str] = []

    def run_query(self, query: str) -> QueryPage:
        self.queries.append(query)
        return QueryPage(records=[RawRecord(data=r) for r in self._responder(query)])

    def query_more(self, cursor: str) -> QueryPage:
        raise AssertionError("FakeQueryClient never paginates")


def make_contract(
    contract_id: str = "a0C000000000001",
    *,
    opportunity_id: Optional[str] = "006000000000001",
    converted_lead_id: Optional[str] = "00Q000000000001",
    products: Optional[list[dict[str, Any]]] = None,
    promotions: Optional[list[dict[str, Any]]] = None,
    opportunity_created: Optional[str] = "2025-08-01T09:00:00.000+0900",
    contract_created: Optional[str] = "2025-09-03T10:30:00.000+0000",
) -> dict[str, Any]:
    """Raw Contract__c record shaped like the Salesforce query response."""
    return {
        "attributes": {"type": "Contract__c"},
        "Id": contract_id,
        "Name": f"C-{contract_id[-4:]}",
        "CreatedDate": contract_created,
        "ContractDateStart__c": "2025-09-05",
        "ContractDateEnd__c": "2027-09-04",
        "ContractStatus__c": "계약서명완료",
        "Opportunity__c": opportunity_id,
        "Opportunity__r": {
            "Id": opportunity_id,
            "StageName": "Closed Won",
            "OwnerId": "005000000000001",
            "Owner": {"Name": "Kim Minji"},
            "Owner_Department__c": "Outbound Sales",
            "AccountId": "001000000000001",
            "Account": {
                "Name": "Seoul Bistro",
                "BranchName__c": "Gangnam",
                "PLIndustry_First__c": "Food",
                "PLIndustry_Second__c": "Korean",
                "TypeofB__c": "Franchise",
            },
            "RecordTypeId": "012000000000001",
            "RecordType": {"Name": "New Business"},
            "FieldUser__r": {"Name": "Park Jiho"},
            "BOUser__r": {"Name": "Lee Sora"},
            "ru_TabletQty__c": 3,
            "ru_MasterTabletQty__c": 1,
            "TotalNumberofEveryTablet__c": 4,
            "CreatedDate": opportunity_created,
            "LeadSource": "Inbound",
            "ConvertedLeadID__c": converted_lead_id,
            "fm_sido__c": "Seoul",
            "fm_Sigugun__c": "Gangnam-gu",
            "fm_StoreType__c": "Restaurant",
        },
        "Account__c": "001000000000001",
        "Account__r": {
            "Name": "Seoul Bistro",
            "BranchName__c": "Gangnam",
            "PLIndustry_First__c": None,
            "PLIndustry_Second__c": None,
            "TypeofB__c": None,
        },
        "ContractProductQuoteContract__r": (
            None if products is None else {"totalSize": len(products), "done": True, "records": products}
        ),
        "ContractProductPromotionContract__r": (
            None if promotions is None else {"totalSize": len(promotions), "done": True, "records": promotions}
        ),
    }


@pytest.fixture
def raw_contract() -> RawRecord:
    """Contract with two products, one negative-priced row and one native promotion."""
    return RawRecord(
        data=make_contract(
            products=[
                {"Id": "p1", "fm_ContractProductFamily__c": "Tablet", "TotalPrice__c": 648000, "Quantity__c": 2},
                {"Id": "p2", "fm_ContractProductFamily__c": "Tablet Pro", "TotalPrice__c": 700000, "Quantity__c": 1},
                {"Id": "p3", "fm_ContractProductFamily__c": "Launch discount", "TotalPrice__c": -50000, "Quantity__c": 2},
            ],
            promotions=[
                {"Id": "n1", "TotalAmount__c": 30000, "PromotionName__r": {"Name": "Welcome"}},
            ],
        )
    )
