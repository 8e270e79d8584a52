from decimal import Decimal
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class _In(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


# ---- catalog ----
class ProductTypeIn(_In):
    name: str = Field(..., min_length=1, max_length=128)

class SubCategoryIn(_In):
    product_type_id: int = Field(..., validation_alias=_alias("productTypeId", "product_type_id"))
    name: str = Field(..., min_length=1, max_length=128)

class SubCategoryUpdate(_In):
    name: str = Field(..., min_length=1, max_length=128)

class ColorIncrementIn(_In):
    color: str = Field(..., min_length=1, max_length=64)
    percent_increment: Decimal = Field(..., validation_alias=_alias("percentIncrement", "percent_increment"))

class ColorIncrementUpdate(_In):
    percent_increment: Decimal = Field(..., validation_alias=_alias("percentIncrement", "percent_increment"))

class PriceListIn(_In):
    customer_id: Optional[int] = Field(None, validation_alias=_alias("customerId", "customer_id"))
    product_type_id: int = Field(..., validation_alias=_alias("productTypeId", "product_type_id"))
    sub_category_id: Optional[int] = Field(None, validation_alias=_alias("subCategoryId", "sub_category_id"))
    price_per_sqm: Decimal = Field(..., ge=0, validation_alias=_alias("pricePerSqm", "price_per_sqm"))

class PriceListUpdate(_In):
    price_per_sqm: Decimal = Field(..., ge=0, validation_alias=_alias("pricePerSqm", "price_per_sqm"))


# ---- people ----
class CustomerIn(_In):
    name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, validation_alias=_alias("phone", "phoneNumber", "phone_number"))
    address: Optional[str] = None

class WorkerIn(_In):
    username: str = Field(..., min_length=1, max_length=64)
    access_code: str = Field(..., min_length=1, validation_alias=_alias("access_code", "accessCode"))

class WorkerLoginIn(BaseModel):
    username: str
    access_code: str = Field(..., validation_alias=_alias("access_code", "accessCode"))


# ---- orders ----
class OrderIn(_In):
    customer_id: Optional[int] = Field(None, validation_alias=_alias("customerId", "customer_id"))
    customer_name: Optional[str] = Field(None, validation_alias=_alias("customerName", "customer_name"))
    product_type_id: int = Field(..., validation_alias=_alias("productTypeId", "product_type_id"))
    sub_category_id: Optional[int] = Field(None, validation_alias=_alias("subCategoryId", "sub_category_id"))
    quantity: int = Field(1, ge=1)
    dimensions: str
    color: str = Field(..., min_length=1)
    custom_notes: Optional[str] = Field("", validation_alias=_alias("customNotes", "custom_notes"))
    phone: Optional[str] = Field(None, validation_alias=_alias("phoneNumber", "phone", "phone_number"))
    address: Optional[str] = None

class OrderStatusIn(_In):
    status: str = Field(..., min_length=1, max_length=64)
    worker_id: Optional[int] = Field(None, validation_alias=_alias("workerId", "worker_id"))

class OrderPriceIn(BaseModel):
    # null, "" or an absent key clear the override
    manual_price: Optional[Decimal] = Field(None, validation_alias=_alias("manualPrice", "manual_price"))

    @field_validator("manual_price", mode="before")
    @classmethod
    def _blank_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


# ---- work statuses ----
class WorkStatusIn(BaseModel):
    product_type_id: int = Field(..., validation_alias=_alias("productTypeId", "product_type_id"))
    sub_category_id: Optional[int] = Field(None, validation_alias=_alias("subCategoryId", "sub_category_id"))
    status_list: List[str] = Field(..., validation_alias=_alias("statusList", "status_list"))

    @field_validator("status_list")
    @classmethod
    def _clean(cls, v: List[str]) -> List[str]:
        cleaned = [s.strip() for s in v if s and s.strip()]
        if not cleaned:
            raise ValueError("statusList must contain at least one label")
        return cleaned
