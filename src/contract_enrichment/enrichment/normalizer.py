"""Contract normalization: raw nested contract record -> ContractRecord.

Line items with a negative price are discounts entered as products; they are
moved to the promotion list. Only those product-derived discounts reduce the
purchase amount. Native promotions are reported but leave it untouched.
"""

import math
from decimal import Decimal
from typing import Any

from contract_enrichment.connectors.salesforce import constants as sf
from contract_enrichment.connectors.salesforce.parsers import (
    as_dict,
    dig,
    related_records,
    text_or_none,
    to_decimal,
    to_float,
)
from contract_enrichment.enrichment.dates import day_diff
from contract_enrichment.models.contract import (
    ContractRecord,
    LeadTimeSource,
    LineItem,
    OpportunitySummary,
    OptionSurcharge,
    Promotion,
)
from contract_enrichment.models.raw import RawRecord

# Fixed per-unit base price; anything above it is an option surcharge
BASE_PRICE = Decimal(648000)
VAT_RATE = Decimal("0.1")
DEFAULT_PROMOTION_NAME = "프로모션"

_ZERO = Decimal(0)
_ONE = Decimal(1)


def _product_promotion(row: dict[str, Any], price: Decimal, quantity: Decimal) -> Promotion:
    row_id = text_or_none(row.get(sf.ID))
    multiplier = quantity if quantity > 0 else _ONE
    return Promotion(
        id=row_id,
        total_amount=abs(price) * multiplier,
        promotion_name=text_or_none(row.get(sf.PRODUCT_FAMILY)) or f"{DEFAULT_PROMOTION_NAME}({row_id})",
        source="product",
    )


def _line_item(row: dict[str, Any], price: Decimal, quantity: Decimal) -> LineItem:
    extra = price - BASE_PRICE
    option = [OptionSurcharge(option_extra_total=extra)] if extra > 0 else []
    return LineItem(
        id=text_or_none(row.get(sf.ID)),
        family=text_or_none(row.get(sf.PRODUCT_FAMILY)),
        quantity=max(quantity, _ZERO),
        unit_price=BASE_PRICE,
        total_price=price,
        option=option,
    )


def split_line_items(rows: list[dict[str, Any]]) -> tuple[list[LineItem], list[Promotion]]:
    """Separate true products from negative-priced rows, which become promotions."""
    products: list[LineItem] = []
    promotions: list[Promotion] = []
    for row in rows:
        quantity = to_decimal(row.get(sf.PRODUCT_QUANTITY), _ONE)
        price = to_decimal(row.get(sf.PRODUCT_TOTAL_PRICE), _ZERO)
        if price < 0:
            promotions.append(_product_promotion(row, price, quantity))
        else:
            products.append(_line_item(row, price, quantity))
    return products, promotions


def native_promotions(rows: list[dict[str, Any]]) -> list[Promotion]:
    """Promotions recorded in the dedicated related list."""
    return [
        Promotion(
            id=text_or_none(row.get(sf.ID)),
            total_amount=max(to_decimal(row.get(sf.PROMOTION_AMOUNT), _ZERO), _ZERO),
            promotion_name=text_or_none(dig(row, sf.PROMOTION_NAME_REL, sf.NAME)) or DEFAULT_PROMOTION_NAME,
            source="native",
        )
        for row in rows
    ]


def compute_vat(purchase_amount: Decimal) -> int:
    """VAT rounded down to a whole currency unit."""
    return math.floor(purchase_amount * VAT_RATE)


def _opportunity_summary(opp: dict[str, Any], fallback_id: Any = None) -> OpportunitySummary:
    opp_account = as_dict(opp.get("Account"))
    return OpportunitySummary(
        id=text_or_none(opp.get(sf.ID)) or text_or_none(fallback_id),
        stage_name=text_or_none(opp.get("StageName")),
        owner_id=text_or_none(opp.get("OwnerId")),
        owner_name=text_or_none(dig(opp, "Owner", sf.NAME)),
        owner_department=text_or_none(opp.get(sf.OPP_OWNER_DEPARTMENT)),
        account_id=text_or_none(opp.get("AccountId")),
        account_name=text_or_none(opp_account.get(sf.NAME)),
        account_branch_name=text_or_none(opp_account.get(sf.ACCOUNT_BRANCH_NAME)),
        tablet_qty=to_float(opp.get("ru_TabletQty__c")),
        master_tablet_qty=to_float(opp.get("ru_MasterTabletQty__c")),
        total_tablets=to_float(opp.get("TotalNumberofEveryTablet__c")),
        created_date=text_or_none(opp.get(sf.CREATED_DATE)),
        lead_source=text_or_none(opp.get("LeadSource")),
        province=text_or_none(opp.get("fm_sido__c")),
        district=text_or_none(opp.get("fm_Sigugun__c")),
        store_type=text_or_none(opp.get("fm_StoreType__c")),
        industry_first=text_or_none(opp_account.get(sf.ACCOUNT_INDUSTRY_FIRST)),
        industry_second=text_or_none(opp_account.get(sf.ACCOUNT_INDUSTRY_SECOND)),
        business_type=text_or_none(opp_account.get(sf.ACCOUNT_BUSINESS_TYPE)),
        converted_lead_id=text_or_none(opp.get(sf.OPP_CONVERTED_LEAD_ID)),
    )


def normalize_contract(raw: RawRecord) -> ContractRecord:
    """Build the flat contract record with totals and lead time. No I/O."""
    d = raw.data
    opp = as_dict(d.get(sf.OPPORTUNITY_REL))
    account = as_dict(d.get(sf.ACCOUNT_REL))
    opp_account = as_dict(opp.get("Account"))
    opportunity = _opportunity_summary(opp, fallback_id=d.get(sf.OPPORTUNITY_ID))

    products, product_promotions = split_line_items(related_records(d, sf.PRODUCTS_REL))
    natives = native_promotions(related_records(d, sf.PROMOTIONS_REL))

    products_total = sum((p.total_price * p.quantity for p in products), _ZERO)
    from_products = sum((p.total_amount for p in product_promotions), _ZERO)
    native_total = sum((p.total_amount for p in natives), _ZERO)
    purchase_amount = products_total - from_products
    vat = compute_vat(purchase_amount)

    contract_created = text_or_none(d.get(sf.CREATED_DATE))

    def account_field(field: str) -> Any:
        return text_or_none(account.get(field)) or text_or_none(opp_account.get(field))

    return ContractRecord(
        id=str(d.get(sf.ID) or ""),
        name=text_or_none(d.get(sf.NAME)),
        record_type_id=text_or_none(opp.get("RecordTypeId")),
        record_type_name=text_or_none(dig(opp, "RecordType", sf.NAME)),
        account_name=text_or_none(account.get(sf.NAME)),
        account_branch_name=text_or_none(account.get(sf.ACCOUNT_BRANCH_NAME)),
        industry_first=account_field(sf.ACCOUNT_INDUSTRY_FIRST),
        industry_second=account_field(sf.ACCOUNT_INDUSTRY_SECOND),
        business_type=account_field(sf.ACCOUNT_BUSINESS_TYPE),
        created_date=contract_created,
        contract_date_start=text_or_none(d.get(sf.CONTRACT_DATE_START)),
        contract_date_end=text_or_none(d.get(sf.CONTRACT_DATE_END)),
        contract_status=text_or_none(d.get(sf.CONTRACT_STATUS)),
        total_tablets=opportunity.total_tablets,
        field_user=text_or_none(dig(opp, "FieldUser__r", sf.NAME)),
        back_office_user=text_or_none(dig(opp, "BOUser__r", sf.NAME)),
        converted_lead_id=opportunity.converted_lead_id,
        opportunity=opportunity,
        products=products,
        promotions=natives + product_promotions,
        products_total=products_total,
        promotions_from_products_total=from_products,
        promotions_native_total=native_total,
        promotions_total=from_products + native_total,
        total_discount=from_products + native_total,
        purchase_amount=purchase_amount,
        vat=vat,
        total_with_vat=purchase_amount + vat,
        lead_time=day_diff(opportunity.created_date, contract_created),
        lead_time_source=LeadTimeSource(
            opportunity_created=opportunity.created_date,
            contract_created=contract_created,
        ),
    )
