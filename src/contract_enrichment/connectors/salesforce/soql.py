"""SOQL query construction. Every interpolated literal goes through quote()."""

from datetime import date
from typing import Iterable, Optional

from .constants import (
    CONTRACT_OBJECT,
    HISTORY_OBJECT,
    LEAD_OBJECT,
    MAX_IN_LIST,
    SIGNED_CONTRACT_STATUSES,
)

_CONTRACT_FIELDS = (
    "Id", "Name", "CreatedDate",
    "ContractDateStart__c", "ContractDateEnd__c",
    "ContractStatus__c",
    "Opportunity__c",
    "Opportunity__r.LeadSource",
    "Opportunity__r.RecordTypeId",
    "Opportunity__r.RecordType.Name",
    "Opportunity__r.BOUser__c",
    "Opportunity__r.BOUser__r.Name",
    "Opportunity__r.FieldUser__c",
    "Opportunity__r.FieldUser__r.Name",
    "Opportunity__r.StageName",
    "Opportunity__r.Id",
    "Opportunity__r.OwnerId",
    "Opportunity__r.Owner.Name",
    "Opportunity__r.Owner_Department__c",
    "Opportunity__r.AccountId",
    "Opportunity__r.Account.Name",
    "Opportunity__r.Account.BranchName__c",
    "Opportunity__r.Account.PLIndustry_First__c",
    "Opportunity__r.Account.PLIndustry_Second__c",
    "Opportunity__r.Account.TypeofB__c",
    "Opportunity__r.ru_TabletQty__c",
    "Opportunity__r.ru_MasterTabletQty__c",
    "Opportunity__r.TotalNumberofEveryTablet__c",
    "Opportunity__r.CreatedDate",
    "Opportunity__r.ConvertedLeadID__c",
    "Opportunity__r.fm_sido__c",
    "Opportunity__r.fm_Sigugun__c",
    "Opportunity__r.fm_StoreType__c",
    "Account__c",
    "Account__r.Name",
    "Account__r.BranchName__c",
    "Account__r.PLIndustry_First__c",
    "Account__r.PLIndustry_Second__c",
    "Account__r.TypeofB__c",
)

_PRODUCTS_SUBQUERY = (
    "(SELECT Id, fm_ContractProductFamily__c, TotalPrice__c, Quantity__c "
    "FROM ContractProductQuoteContract__r)"
)
_PROMOTIONS_SUBQUERY = (
    "(SELECT Id, TotalAmount__c, PromotionName__r.Name "
    "FROM ContractProductPromotionContract__r)"
)

_LEAD_FIELDS = "Id, CreatedDate, Company, LeadSource, utm__c, ConvertedOpportunityId"


def escape(value: object) -> str:
    """Escape a value for use inside a single-quoted SOQL string literal."""
    text = "" if value is None else str(value)
    return text.replace("\\", "\\\\").replace("'", "\\'")


def quote(value: object) -> str:
    """Escaped, single-quoted SOQL string literal."""
    return f"'{escape(value)}'"


def in_list(values: Iterable[object]) -> str:
    """Comma-separated quoted literals for an IN (...) clause."""
    items = [quote(v) for v in values]
    if not items:
        raise ValueError("IN list must not be empty")
    if len(items) > MAX_IN_LIST:
        raise ValueError(f"IN list has {len(items)} literals; the limit is {MAX_IN_LIST}")
    return ",".join(items)


def build_contract_query(start: date, end: date, department: Optional[str] = None) -> str:
    """Contracts starting in [start, end) with a signed status, oldest first."""
    statuses = " OR ".join(f"ContractStatus__c = {quote(s)}" for s in SIGNED_CONTRACT_STATUSES)
    where = [
        "Opportunity__c != NULL",
        f"ContractDateStart__c >= {start.isoformat()}",
        f"ContractDateStart__c < {end.isoformat()}",
        f"({statuses})",
    ]
    if department:
        where.append(f"Opportunity__r.Owner_Department__c = {quote(department)}")

    fields = ",\n    ".join(_CONTRACT_FIELDS + (_PRODUCTS_SUBQUERY, _PROMOTIONS_SUBQUERY))
    return (
        f"SELECT\n    {fields}\n"
        f"FROM {CONTRACT_OBJECT}\n"
        f"WHERE {' AND '.join(where)}\n"
        "ORDER BY CreatedDate ASC"
    )


def build_history_query(opportunity_ids: Iterable[str]) -> str:
    """Stage history rows for a chunk of opportunity ids."""
    return (
        "SELECT CloseDate, CreatedDate, OpportunityId, PrevCloseDate, StageName "
        f"FROM {HISTORY_OBJECT} "
        f"WHERE OpportunityId IN ({in_list(opportunity_ids)}) "
        "ORDER BY CreatedDate ASC"
    )


def build_leads_by_id_query(lead_ids: Iterable[str]) -> str:
    """Leads for a chunk of lead ids."""
    return f"SELECT {_LEAD_FIELDS} FROM {LEAD_OBJECT} WHERE Id IN ({in_list(lead_ids)})"


def build_leads_by_opportunity_query(opportunity_ids: Iterable[str]) -> str:
    """Converted leads for a chunk of converted opportunity ids."""
    return (
        f"SELECT {_LEAD_FIELDS} FROM {LEAD_OBJECT} "
        f"WHERE IsConverted = true AND ConvertedOpportunityId IN ({in_list(opportunity_ids)})"
    )
