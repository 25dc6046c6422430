"""
Request/response models for every HTTP operation.

Each endpoint takes and returns one of these instead of loose dicts, so
validation happens at the edge and the services only see clean data.
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fornaccio.domain.phone import validate_phone
from fornaccio.domain.pricing import MAX_QUANTITY
from fornaccio.domain.status import OrderStatus

IngredientCategory = Literal["base", "cheese", "meat", "vegetable", "finish"]
Fulfillment = Literal["takeaway", "delivery"]


# ---------- Catalog ----------
class IngredientOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    price: float
    category: str
    is_available: bool = True


class IngredientIn(BaseModel):
    id: Optional[str] = Field(None, description="Slug-like key; derived from the name when omitted")
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    category: IngredientCategory
    is_available: bool = True


class PizzaOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    name: str
    description: str
    base_price: float
    image: str
    ingredients: List[str]
    is_available: bool = True


class PizzaIn(BaseModel):
    name: str = Field(..., min_length=1)
    slug: Optional[str] = None
    description: str = ""
    base_price: float = Field(..., ge=0)
    image: str = ""
    ingredients: List[str] = []
    is_available: bool = True


class MenuPizza(PizzaOut):
    default_ingredients: List[IngredientOut] = []


# ---------- Cart & checkout ----------
class CartLineIn(BaseModel):
    pizza_id: str
    added: List[str] = []
    removed: List[str] = []
    quantity: int = Field(1, ge=1, le=MAX_QUANTITY)


class CartLine(BaseModel):
    id: str
    pizza_id: str
    name: str
    base_price: float
    added: List[str] = []
    removed: List[str] = []
    quantity: int = 1
    total_price: float


class CartOut(BaseModel):
    items: List[CartLine] = []
    total: float = 0.0


class QuoteOut(BaseModel):
    pizza_id: str
    name: str
    base_price: float
    unit_price: float
    quantity: int
    total_price: float


class CheckoutForm(BaseModel):
    name: str = Field(..., min_length=2, description="Le nom est requis")
    phone: str
    address: str = Field(..., min_length=5, description="L'adresse est requise")
    instructions: Optional[str] = None

    @field_validator("name", "address")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

    @field_validator("phone")
    @classmethod
    def normalize(cls, value: str) -> str:
        return validate_phone(value)


class CheckoutRequest(BaseModel):
    customer: CheckoutForm
    items: List[CartLineIn] = Field(..., min_length=1)


class CartCheckoutRequest(BaseModel):
    customer: CheckoutForm


class OrderCreated(BaseModel):
    order_id: int
    total: float


class CreatePaymentRequest(BaseModel):
    order_id: int


class CreatePaymentResponse(BaseModel):
    checkout_url: str


# ---------- Orders ----------
class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    pizza_name: str
    base_price: float
    final_price: float
    quantity: int
    added_ingredients: List[str] = []
    removed_ingredients: List[str] = []


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    status: OrderStatus
    customer_name: str
    customer_phone: str
    customer_address: str
    instructions: str = ""
    fulfillment: str = "delivery"
    total: float
    payment_id: Optional[str] = None
    driver_lat: Optional[float] = None
    driver_lng: Optional[float] = None
    customer_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItemOut] = []


class OrderTracking(BaseModel):
    id: int
    status: OrderStatus
    stage: str
    customer_name: str
    customer_address: str
    total: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    driver_lat: Optional[float] = None
    driver_lng: Optional[float] = None
    items: List[OrderItemOut] = []


class StatusUpdateRequest(BaseModel):
    status: str
    force: bool = False


class ManualOrderItem(BaseModel):
    pizza_id: str
    quantity: int = Field(1, ge=1, le=MAX_QUANTITY)
    added: List[str] = []
    removed: List[str] = []


class ManualOrderRequest(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = ""
    phone: str = Field(..., min_length=4)
    address: Optional[str] = None
    type: Fulfillment = "takeaway"
    items: List[ManualOrderItem] = Field(..., min_length=1)

    @property
    def customer_name(self) -> str:
        return f"{self.first_name.strip()} {self.last_name.strip()}".strip()


class BoardColumn(BaseModel):
    id: OrderStatus
    title: str
    orders: List[OrderOut] = []


# ---------- Customers ----------
class CustomerIn(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = ""
    phone: str = Field(..., min_length=4)
    email: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None


class CustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    name: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    updated_at: Optional[datetime] = None


class CustomerWithOrders(CustomerOut):
    order_count: int = 0
    orders: List[OrderOut] = []


class CustomerDetails(CustomerOut):
    orders: List[OrderOut] = []
    total_spent: float = 0.0
    total_count: int = 0


# ---------- Driver & tracking ----------
class DriverLocation(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


# ---------- Stats ----------
class BestSeller(BaseModel):
    name: str
    count: int
    total: float


class AdminStats(BaseModel):
    daily_revenue: float
    today_count: int
    total_revenue: float
    total_count: int
    best_sellers: List[BestSeller] = []
    best_seller_name: str = "N/A"
    best_seller_count: int = 0


class BoardOut(BaseModel):
    columns: List[BoardColumn]
    stats: AdminStats


# ---------- Auth ----------
class LoginRequest(BaseModel):
    password: str


class UploadOut(BaseModel):
    url: str
