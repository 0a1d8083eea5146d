"""
Ledger Data Models for Vadi Hisaab

A ledger record is one expense or income entry. Its shape depends on its
category: a seed purchase carries seed type and kilograms, a labour entry
carries people, days and a daily rate, and so on.

This module holds the category tags and one payload model per shape.
Which payload belongs to which category lives in ONE place, the
CategorySchemaRegistry (vadi_hisaab.ledger.schema).

DESIGN DECISION: Money is Decimal, never float, and goes over the wire as
a JSON number. Field names are snake_case in Python and camelCase on the
wire, matching the persistence service.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import Field

from vadi_hisaab.models.base import Money, Quantity, WireModel


# =============================================================================
# CATEGORY TAGS
# =============================================================================

class ExpenseCategory(str, Enum):
    """Closed set of expense categories."""
    SEED = "Seed"
    FERTILIZER = "Fertilizer"
    PESTICIDE = "Pesticide"
    LABOUR = "Labour"
    MACHINERY = "Machinery"


class IncomeCategory(str, Enum):
    """
    Closed set of income categories.

    Wire values keep the spaces the persistence service uses.
    """
    CROP_SALE = "Crop Sale"
    SUBSIDY = "Subsidy"
    RENTAL_INCOME = "Rental Income"
    OTHER = "Other"


LedgerCategory = Union[ExpenseCategory, IncomeCategory]


class LabourMode(str, Enum):
    """How labour is paid: per day, or as a lump-sum contract advance."""
    DAILY = "Daily"
    CONTRACT = "Contract"


def _compact(value: str) -> str:
    return "".join(value.split()).lower()


_CATEGORY_LOOKUP: dict[str, LedgerCategory] = {
    _compact(member.value): member
    for enum_cls in (ExpenseCategory, IncomeCategory)
    for member in enum_cls
}


def parse_category(value) -> Optional[LedgerCategory]:
    """
    Resolve a raw category tag.

    Accepts enum members, wire values ("Crop Sale") and compact spellings
    ("CropSale", "crop sale"). Returns None for anything unknown.
    """
    if isinstance(value, (ExpenseCategory, IncomeCategory)):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    return _CATEGORY_LOOKUP.get(_compact(value))


def parse_labour_mode(value) -> Optional[LabourMode]:
    """Blank means Daily; unknown values give None."""
    if isinstance(value, LabourMode):
        return value
    if value is None or (isinstance(value, str) and not value.strip()):
        return LabourMode.DAILY
    if isinstance(value, str):
        for mode in LabourMode:
            if mode.value.lower() == value.strip().lower():
                return mode
    return None


# =============================================================================
# PICKER OPTIONS (stored value -> Gujarati label)
# =============================================================================

SEED_TYPES = {
    "Company Brand": "કંપની બ્રાન્ડ",
    "Local/Desi": "દેશી/લોકલ",
    "Hybrid": "હાઇબ્રિડ",
}

FERTILIZER_PRODUCTS = {
    "Urea": "યુરિયા",
    "DAP": "ડીએપી (DAP)",
    "NPK": "એનપીકે (NPK)",
    "Organic": "ઓર્ગેનિક",
    "Sulphur": "સલ્ફર",
    "Micronutrients": "માઇક્રોન્યૂટ્રિઅન્ટ",
}

PESTICIDE_CATEGORIES = {
    "Insecticide": "જંતુનાશક",
    "Fungicide": "ફૂગ નાશક",
    "Herbicide": "નીંદામણ નાશક",
    "Growth Booster": "ગ્રોથ બૂસ્ટર",
}

LABOUR_TASKS = {
    "Weeding": "નીંદામણ",
    "Sowing": "વાવણી",
    "Spraying": "છંટકાવ",
    "Harvesting": "લણણી",
    "Irrigation": "સિંચાઈ",
}

ADVANCE_REASONS = {
    "Medical": "દવા/હોસ્પિટલ",
    "Grocery": "કરિયાણું",
    "Mobile Recharge": "મોબાઇલ રિચાર્જ",
    "Festival": "તહેવાર",
    "Loan": "ઉધાર",
    "Other": "અન્ય",
}

MACHINERY_IMPLEMENTS = {
    "Rotavator": "રોટાવેટર",
    "Plough": "હળ",
    "Sowing Machine": "સોઇંગ મશીન",
    "Thresher": "થ્રેશર",
    "Tractor Rental": "ટ્રેક્ટર ભાડે",
    "બલૂન (Baluun)": "બલૂન",
    "રેપ (Rap)": "રેપ",
}

# Income pickers store the Gujarati text itself
SCHEME_TYPES = (
    "PM-KISAN",
    "ફસલ વીમો (Fasal Bima)",
    "બીજ સબસિડી",
    "ખાતર સબસિડી",
    "સિંચાઈ સબસિડી",
    "ઉપકરણ સબસિડી",
    "અન્ય સરકારી યોજના",
)

ASSET_TYPES = (
    "ટ્રેક્ટર",
    "રોટાવેટર",
    "થ્રેશર",
    "જમીન",
    "પાણીની મોટર",
    "અન્ય ઉપકરણ",
)

OTHER_INCOME_SOURCES = (
    "મજૂરી",
    "પશુ-પાલન",
    "ડેરી",
    "અંશ-સમય કામ",
    "લોન",
    "અન્ય",
)

CATEGORY_LABELS: dict[LedgerCategory, str] = {
    ExpenseCategory.SEED: "બિયારણ",
    ExpenseCategory.FERTILIZER: "ખાતર",
    ExpenseCategory.PESTICIDE: "જંતુ.",
    ExpenseCategory.LABOUR: "મજૂરી",
    ExpenseCategory.MACHINERY: "મશીન",
    IncomeCategory.CROP_SALE: "પાક વેચાણ",
    IncomeCategory.SUBSIDY: "સબસિડી",
    IncomeCategory.RENTAL_INCOME: "ભાડાની આવક",
    IncomeCategory.OTHER: "અન્ય",
}


# =============================================================================
# EXPENSE PAYLOADS
# =============================================================================

class SeedPayload(WireModel):
    """Seed purchase. Rate per kg is derived when quantity is known."""
    seed_type: str = Field(..., min_length=1)
    quantity_kg: Optional[Quantity] = Field(default=None, ge=0)
    total_cost: Money = Field(..., gt=0)
    rate_per_kg: Optional[Money] = Field(default=None, ge=0)


class FertilizerPayload(WireModel):
    product_name: str = Field(..., min_length=1)
    number_of_bags: Optional[Quantity] = Field(default=None, ge=0)
    total_cost: Money = Field(..., gt=0)


class PesticidePayload(WireModel):
    # "category" on the wire, renamed to avoid clashing with the record tag
    pesticide_category: str = Field(..., min_length=1, alias="category")
    dosage_ml: Optional[Quantity] = Field(default=None, ge=0, alias="dosageML")
    cost: Money = Field(..., gt=0)


class LabourDailyPayload(WireModel):
    """Daily-wage labour: total = people x days x daily rate."""
    task: str = Field(..., min_length=1)
    number_of_people: Quantity = Field(..., gt=0)
    days: Quantity = Field(..., gt=0)
    daily_rate: Money = Field(..., gt=0)
    total_cost: Optional[Money] = Field(default=None, ge=0)


class LabourContractPayload(WireModel):
    """Advance handed to contract labour."""
    advance_reason: str = Field(..., min_length=1)
    amount_given: Money = Field(..., gt=0)


class MachineryPayload(WireModel):
    """Machinery work billed per hour or per acre."""
    implement: str = Field(..., min_length=1)
    is_contract: bool = False
    hours_or_acres: Quantity = Field(..., gt=0)
    rate: Money = Field(..., gt=0)
    total_cost: Optional[Money] = Field(default=None, ge=0)


# =============================================================================
# INCOME PAYLOADS
# =============================================================================

class CropSalePayload(WireModel):
    """Produce sold at market: total = kg x price per kg."""
    crop_name: Optional[str] = None
    quantity_kg: Quantity = Field(..., gt=0)
    price_per_kg: Money = Field(..., gt=0)
    buyer_name: Optional[str] = None
    market_name: Optional[str] = None
    total_amount: Optional[Money] = Field(default=None, ge=0)


class SubsidyPayload(WireModel):
    scheme_type: str = Field(..., min_length=1)
    amount: Money = Field(..., gt=0)
    reference_number: Optional[str] = None


class RentalIncomePayload(WireModel):
    """Equipment or land rented out: total = hours/days x rate."""
    asset_type: str = Field(..., min_length=1)
    rented_to_name: Optional[str] = None
    hours_or_days: Quantity = Field(..., gt=0)
    rate_per_unit: Money = Field(..., gt=0)
    total_amount: Optional[Money] = Field(default=None, ge=0)


class OtherIncomePayload(WireModel):
    source: str = Field(..., min_length=1)
    amount: Money = Field(..., gt=0)
    description: Optional[str] = None


ExpensePayload = Union[
    SeedPayload,
    FertilizerPayload,
    PesticidePayload,
    LabourDailyPayload,
    LabourContractPayload,
    MachineryPayload,
]

IncomePayload = Union[
    CropSalePayload,
    SubsidyPayload,
    RentalIncomePayload,
    OtherIncomePayload,
]

LedgerPayload = Union[ExpensePayload, IncomePayload]
