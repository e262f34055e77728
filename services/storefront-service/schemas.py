"""Pydantic schemas for request/response validation."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class LocalizedText(BaseModel):
    """Text in English and Vietnamese."""
    en: str = ""
    vi: str = ""


class ProductCreate(BaseModel):
    """Schema for creating a product."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    name: LocalizedText
    description: LocalizedText = Field(default_factory=LocalizedText)
    price: float = Field(ge=0)
    category_id: Optional[str] = Field(default=None, alias="categoryId")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    in_stock: bool = Field(default=True, alias="inStock")


class ProductUpdate(BaseModel):
    """Schema for a partial product update."""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[LocalizedText] = None
    description: Optional[LocalizedText] = None
    price: Optional[float] = Field(default=None, ge=0)
    category_id: Optional[str] = Field(default=None, alias="categoryId")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    in_stock: Optional[bool] = Field(default=None, alias="inStock")


class ProductResponse(BaseModel):
    """Schema for product response."""
    id: str
    name: LocalizedText
    description: LocalizedText
    price: float
    categoryId: Optional[str] = None
    imageUrl: Optional[str] = None
    inStock: bool = True
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class CartLineRequest(BaseModel):
    """A single cart line as submitted by the client.

    ``quantity`` is left untyped and normalized by the checkout service.
    Unknown fields, including any client-side price, are dropped.
    """
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    quantity: Any = None


class CustomerRequest(BaseModel):
    """Customer details as submitted by the client."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class CheckoutRequest(BaseModel):
    """Schema for checkout request."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    items: Optional[List[CartLineRequest]] = None
    paymentMethod: str = ""
    customer: Optional[CustomerRequest] = None


class CheckoutResponse(BaseModel):
    """Schema for checkout response."""
    orderId: int
    status: str


class OrderItemResponse(BaseModel):
    """Snapshot of a product line on an order."""
    productId: str
    name_en: str
    name_vi: str
    price: float
    quantity: int


class OrderResponse(BaseModel):
    """Schema for order response."""
    id: int
    status: str
    totalAmount: float
    currency: str
    customerName: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: str
    paymentMethod: str
    createdAt: Optional[str] = None
    items: List[OrderItemResponse]


class OrdersListResponse(BaseModel):
    """Schema for orders list response."""
    orders: List[OrderResponse]


# Store settings. Only the payment section is validated; other admin keys
# are kept as submitted.

class ToggleSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    enabled: Optional[StrictBool] = None


class BankTransferSettings(ToggleSettings):
    bankName: Optional[str] = None
    accountName: Optional[str] = None
    accountNumber: Optional[str] = None
    instruction: Optional[str] = None


class MomoSettings(ToggleSettings):
    phone: Optional[str] = None
    qrImageUrl: Optional[str] = None
    instruction: Optional[str] = None


class CustomPaymentMethodSettings(ToggleSettings):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    name: Optional[str] = None
    instruction: Optional[str] = None
    qrImageUrl: Optional[str] = None


class PaymentMethodsSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    cod: Optional[ToggleSettings] = None
    bankTransfer: Optional[BankTransferSettings] = None
    momo: Optional[MomoSettings] = None
    custom: List[CustomPaymentMethodSettings] = Field(default_factory=list)


class StoreSettings(BaseModel):
    """Shape check for the store settings document."""
    model_config = ConfigDict(extra="allow")

    paymentMethods: Optional[PaymentMethodsSettings] = None


class SettingsResponse(BaseModel):
    settings: Optional[Dict[str, Any]] = None


class SettingsUpdateResponse(BaseModel):
    message: str
    settings: Dict[str, Any]
