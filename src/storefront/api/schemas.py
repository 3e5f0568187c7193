"""Pydantic request/response schemas for the storefront API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from storefront.catalogue.product.product import DEFAULT_INITIAL_STOCK

# --- Catalogue ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Walnut Desk Lamp",
                    "price": 49.9,
                    "stock": 12,
                    "category_id": "c3d4e5f6-a7b8-9012-cdef-123456789012",
                    "city": "Lisbon",
                    "description": "Hand-turned walnut base, linen shade.",
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    price: float = Field(..., ge=0)
    stock: int = Field(DEFAULT_INITIAL_STOCK, ge=0)
    category_id: str | None = None
    city: str | None = Field(None, max_length=100)
    description: str | None = None
    seller_id: str | None = None


class UpdateProductDetailsRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    description: str | None = None
    city: str | None = Field(None, max_length=100)
    category_id: str | None = None


class UpdatePriceRequest(BaseModel):
    price: float = Field(..., ge=0)


class RestockRequest(BaseModel):
    quantity: int = Field(..., ge=1)


class ProductResponse(BaseModel):
    product_id: str
    name: str
    description: str | None = None
    price: float
    stock: int
    category_id: str | None = None
    city: str | None = None
    seller_id: str | None = None


class ProductListResponse(BaseModel):
    products: list[ProductResponse]


class ProductIdResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"product_id": "b2c3d4e5-f6a7-8901-bcde-f12345678901"}]}}

    product_id: str


class CreateCategoryRequest(BaseModel):
    name: str = Field(..., max_length=100)


class CategoryResponse(BaseModel):
    category_id: str
    name: str


class CategoryListResponse(BaseModel):
    categories: list[CategoryResponse]


class CategoryIdResponse(BaseModel):
    category_id: str


class CityListResponse(BaseModel):
    cities: list[str]


# --- Cart ---


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)


class UpdateCartQuantityRequest(BaseModel):
    quantity: int = Field(..., ge=1)


class CartItemResponse(BaseModel):
    product_id: str
    name: str | None = None
    price: float
    quantity: int
    total: float


class CartResponse(BaseModel):
    items: list[CartItemResponse]
    total: float


# --- Orders ---


class OrderLineRequest(BaseModel):
    product_id: str
    quantity: int = Field(..., ge=1)


class PlaceOrderRequest(BaseModel):
    """Explicit lines to buy. Omit ``items`` to check out the whole cart."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"items": [{"product_id": "b2c3d4e5-f6a7-8901-bcde-f12345678901", "quantity": 2}]},
            ]
        }
    }

    items: list[OrderLineRequest] | None = None


class CompletePaymentRequest(BaseModel):
    method: str = Field(..., min_length=1, max_length=50)


class UpdateOrderStatusRequest(BaseModel):
    status: str


class OrderIdResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"order_id": "d4e5f6a7-b8c9-0123-def0-234567890123"}]}}

    order_id: str


class OrderItemResponse(BaseModel):
    product_id: str
    name: str | None = None
    quantity: int
    unit_price: float
    line_total: float


class PaymentResponse(BaseModel):
    payment_id: str
    amount: float
    status: str
    method: str | None = None


class OrderResponse(BaseModel):
    order_id: str
    customer_id: str
    status: str
    total_price: float
    items: list[OrderItemResponse]
    created_at: str | None = None
    payment: PaymentResponse | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]


# --- Reviews ---


class AddReviewRequest(BaseModel):
    product_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: str | None = None


class ReviewResponse(BaseModel):
    review_id: str
    product_id: str
    user_id: str
    rating: int
    comment: str | None = None
    created_at: str | None = None


class ReviewListResponse(BaseModel):
    reviews: list[ReviewResponse]


class ReviewIdResponse(BaseModel):
    review_id: str


# --- Users ---


class RegisterUserRequest(BaseModel):
    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=8, max_length=128)
    role: str = "customer"


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    user_id: str
    email: str
    role: str


class UserListResponse(BaseModel):
    users: list[UserResponse]


# --- Admin ---


class DashboardResponse(BaseModel):
    order_count: int
    total_revenue: float
    product_count: int
    user_count: int


class StatusResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "ok"}]}}

    status: str = "ok"
