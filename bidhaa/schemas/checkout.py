from pydantic import BaseModel, Field
from typing import List, Optional


class CartItemIn(BaseModel):
    id: Optional[str] = None
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    image: Optional[str] = None
    category: Optional[str] = None


class CustomerIn(BaseModel):
    email: str
    subscribed: bool = False


class ShippingIn(BaseModel):
    county: str
    town: str
    deliveryAddress: str
    contactPerson: str
    phoneNumber: str


class CheckoutSummaryRequest(BaseModel):
    cart: List[CartItemIn] = Field(default_factory=list)
    county: Optional[str] = None


class WhatsAppOrderRequest(BaseModel):
    customer: CustomerIn
    shipping: ShippingIn
    cart: List[CartItemIn] = Field(min_length=1)
