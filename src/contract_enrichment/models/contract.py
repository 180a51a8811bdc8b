"""Enriched contract record and its line-item, promotion and lead parts."""

from decimal import Decimal
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from contract_enrichment.models.metric import Metric

PromotionSource = Literal["native", "product"]
LeadReason = Literal["missing-reference", "invalid-reference-format", "not-found"]


def _json_number(value: Decimal) -> int | float:
    """Whole amounts as int, fractional ones as float."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# Decimal in Python, plain number in JSON output
Amount = Annotated[Decimal, PlainSerializer(_json_number, return_type=int | float, when_used="json")]


class OptionSurcharge(BaseModel):
    """Per-unit amount charged above the base unit price."""

    model_config = ConfigDict(frozen=True)

    has_option: bool = True
    option_extra_total: Amount


class LineItem(BaseModel):
    """A product entry on a contract. Negative-priced rows never become line items."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    family: Optional[str] = None
    quantity: Amount = Field(default=Decimal(1), ge=0)
    unit_price: Amount
    total_price: Amount
    option: list[OptionSurcharge] = Field(default_factory=list)


class Promotion(BaseModel):
    """A discount, either recorded natively or inferred from a negative-priced line item."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    total_amount: Amount = Field(default=Decimal(0), ge=0)
    promotion_name: str
    source: PromotionSource


class LeadSummary(BaseModel):
    """Originating lead of a contract's opportunity, with decoded UTM attribution."""

    model_config = ConfigDict(frozen=True)

    id: str
    created_at: Optional[str] = None
    company: Optional[str] = None
    lead_source: Optional[str] = None
    utm: Optional[str] = None
    utm_source: Optional[str] = None
    utm_content: Optional[str] = None
    utm_term: Optional[str] = None


class OpportunitySummary(BaseModel):
    """Denormalized opportunity fields carried on each contract."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    stage_name: Optional[str] = None
    owner_id: Optional[str] = None
    owner_name: Optional[str] = None
    owner_department: Optional[str] = None
    account_id: Optional[str] = None
    account_name: Optional[str] = None
    account_branch_name: Optional[str] = None
    tablet_qty: Optional[float] = None
    master_tablet_qty: Optional[float] = None
    total_tablets: Optional[float] = None
    created_date: Optional[str] = None
    lead_source: Optional[str] = None
    province: Optional[str] = None
    district: Optional[str] = None
    store_type: Optional[str] = None
    industry_first: Optional[str] = None
    industry_second: Optional[str] = None
    business_type: Optional[str] = None
    converted_lead_id: Optional[str] = None


class LeadTimeSource(BaseModel):
    """The two raw timestamps `lead_time` was computed from."""

    model_config = ConfigDict(frozen=True)

    opportunity_created: Optional[str] = None
    contract_created: Optional[str] = None


class ContractRecord(BaseModel):
    """Flat, derived view of one contract. Built fresh per run and never mutated."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: Optional[str] = None
    record_type_id: Optional[str] = None
    record_type_name: Optional[str] = None
    account_name: Optional[str] = None
    account_branch_name: Optional[str] = None
    industry_first: Optional[str] = None
    industry_second: Optional[str] = None
    business_type: Optional[str] = None

    created_date: Optional[str] = None
    contract_date_start: Optional[str] = None
    contract_date_end: Optional[str] = None
    contract_status: Optional[str] = None

    total_tablets: Optional[float] = None
    field_user: Optional[str] = None
    back_office_user: Optional[str] = None
    converted_lead_id: Optional[str] = None

    opportunity: OpportunitySummary = Field(default_factory=OpportunitySummary)

    products: list[LineItem] = Field(default_factory=list)
    promotions: list[Promotion] = Field(default_factory=list)

    products_total: Amount = Decimal(0)
    promotions_from_products_total: Amount = Decimal(0)
    promotions_native_total: Amount = Decimal(0)
    promotions_total: Amount = Decimal(0)
    total_discount: Amount = Decimal(0)
    purchase_amount: Amount = Decimal(0)
    vat: int = 0
    total_with_vat: Amount = Decimal(0)

    lead_time: Metric = Field(default_factory=Metric.missing)
    lead_time_source: LeadTimeSource = Field(default_factory=LeadTimeSource)

    first_won_at: Optional[str] = None
    before_first_won_at: Optional[str] = None
    prev_to_first_close: Metric = Field(default_factory=Metric.missing)
    first_install_at: Optional[str] = None
    install_to_first_close: Metric = Field(default_factory=Metric.missing)

    lead: Optional[LeadSummary] = None
    lead_reason: Optional[LeadReason] = None
    lead_to_opportunity: Metric = Field(default_factory=Metric.missing)
