"""FastAPI endpoints for the storefront.

Routes translate HTTP into commands and pipeline calls; the caller identity
comes from ``get_auth`` and every authorization decision is made against it.
Routes that take stock locks or may wait on a full order queue are plain
``def`` so they run in the threadpool instead of on the event loop.
"""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.dependencies import get_auth, get_pipeline
from storefront.api.schemas import (
    AddReviewRequest,
    AddToCartRequest,
    CartItemResponse,
    CartResponse,
    CategoryIdResponse,
    CategoryListResponse,
    CategoryResponse,
    CityListResponse,
    CompletePaymentRequest,
    CreateCategoryRequest,
    CreateProductRequest,
    DashboardResponse,
    LoginRequest,
    OrderIdResponse,
    OrderItemResponse,
    OrderListResponse,
    OrderResponse,
    PaymentResponse,
    PlaceOrderRequest,
    ProductIdResponse,
    ProductListResponse,
    ProductResponse,
    RegisterUserRequest,
    RestockRequest,
    ReviewIdResponse,
    ReviewListResponse,
    ReviewResponse,
    StatusResponse,
    UpdateCartQuantityRequest,
    UpdateOrderStatusRequest,
    UpdatePriceRequest,
    UpdateProductDetailsRequest,
    UserListResponse,
    UserResponse,
)
from storefront.cart.management import (
    AddToCart,
    ClearCart,
    RemoveFromCart,
    UpdateCartQuantity,
    cart_items,
    cart_total,
)
from storefront.catalogue.category.management import CreateCategory, all_categories
from storefront.catalogue.product.management import (
    CreateProduct,
    DeleteProduct,
    RestockProduct,
    UpdateProductDetails,
    UpdateProductPrice,
    authorize_product_write,
    load_product,
)
from storefront.catalogue.product.queries import product_count, products_by_seller, search_products, unique_cities
from storefront.identity.auth import require_owner, require_role
from storefront.identity.registration import RegisterUser, RemoveUser, all_users, authenticate, user_count
from storefront.identity.user import Role
from storefront.ordering.order.queries import (
    all_orders,
    load_order,
    order_count,
    orders_for_customer,
    payment_for_order,
    total_revenue,
)
from storefront.reviews.submission import AddReview, reviews_for_product

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])
cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
review_router = APIRouter(prefix="/reviews", tags=["reviews"])
user_router = APIRouter(prefix="/users", tags=["users"])
admin_router = APIRouter(prefix="/admin", tags=["admin"])


def _product_response(product) -> ProductResponse:
    return ProductResponse(
        product_id=str(product.id),
        name=product.name,
        description=product.description,
        price=product.price,
        stock=product.stock,
        category_id=str(product.category_id) if product.category_id else None,
        city=product.city,
        seller_id=str(product.seller_id) if product.seller_id else None,
    )


def _order_response(order, with_payment=False) -> OrderResponse:
    payment = payment_for_order(order.id) if with_payment else None
    return OrderResponse(
        order_id=str(order.id),
        customer_id=str(order.customer_id),
        status=order.status,
        total_price=order.total_price,
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                name=item.name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                line_total=item.line_total,
            )
            for item in order.items
        ],
        created_at=str(order.created_at) if order.created_at else None,
        payment=PaymentResponse(
            payment_id=str(payment.id),
            amount=payment.amount,
            status=payment.status,
            method=payment.method,
        )
        if payment
        else None,
    )


def _user_response(user) -> UserResponse:
    return UserResponse(user_id=str(user.id), email=user.email, role=user.role)


# --- Products ---


@product_router.get("", response_model=ProductListResponse)
async def list_products(
    search: str | None = None,
    category_id: str | None = None,
    city: str | None = None,
    seller_id: str | None = None,
) -> ProductListResponse:
    products = search_products(search=search, category_id=category_id, city=city, seller_id=seller_id)
    return ProductListResponse(products=[_product_response(p) for p in products])


@product_router.get("/cities", response_model=CityListResponse)
async def list_cities() -> CityListResponse:
    return CityListResponse(cities=unique_cities())


@product_router.get("/mine", response_model=ProductListResponse)
async def list_my_products(auth=Depends(get_auth)) -> ProductListResponse:
    """The calling seller's own listings."""
    auth = require_role(auth, Role.SELLER, Role.ADMIN)
    return ProductListResponse(products=[_product_response(p) for p in products_by_seller(auth.user_id)])


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(load_product(product_id))


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest, auth=Depends(get_auth)) -> ProductIdResponse:
    auth = require_role(auth, Role.SELLER, Role.ADMIN)
    seller_id = body.seller_id if auth.is_admin and body.seller_id else auth.user_id
    command = CreateProduct(
        name=body.name,
        price=body.price,
        stock=body.stock,
        seller_id=seller_id,
        category_id=body.category_id,
        city=body.city,
        description=body.description,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}", response_model=StatusResponse)
def update_product_details(
    product_id: str, body: UpdateProductDetailsRequest, auth=Depends(get_auth), pipeline=Depends(get_pipeline)
) -> StatusResponse:
    authorize_product_write(auth, product_id)
    command = UpdateProductDetails(
        product_id=product_id,
        name=body.name,
        description=body.description,
        city=body.city,
        category_id=body.category_id,
    )
    with pipeline.stock_guard.hold([product_id]):
        current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/price", response_model=StatusResponse)
def update_product_price(
    product_id: str, body: UpdatePriceRequest, auth=Depends(get_auth), pipeline=Depends(get_pipeline)
) -> StatusResponse:
    authorize_product_write(auth, product_id)
    with pipeline.stock_guard.hold([product_id]):
        current_domain.process(UpdateProductPrice(product_id=product_id, price=body.price), asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/restock", response_model=StatusResponse)
def restock_product(
    product_id: str, body: RestockRequest, auth=Depends(get_auth), pipeline=Depends(get_pipeline)
) -> StatusResponse:
    authorize_product_write(auth, product_id)
    with pipeline.stock_guard.hold([product_id]):
        current_domain.process(RestockProduct(product_id=product_id, quantity=body.quantity), asynchronous=False)
    return StatusResponse()


@product_router.delete("/{product_id}", response_model=StatusResponse)
def delete_product(product_id: str, auth=Depends(get_auth), pipeline=Depends(get_pipeline)) -> StatusResponse:
    authorize_product_write(auth, product_id)
    with pipeline.stock_guard.hold([product_id]):
        current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@product_router.get("/{product_id}/reviews", response_model=ReviewListResponse)
async def list_product_reviews(product_id: str) -> ReviewListResponse:
    load_product(product_id)
    return ReviewListResponse(
        reviews=[
            ReviewResponse(
                review_id=str(r.id),
                product_id=str(r.product_id),
                user_id=str(r.user_id),
                rating=r.rating,
                comment=r.comment,
                created_at=str(r.created_at) if r.created_at else None,
            )
            for r in reviews_for_product(product_id)
        ]
    )


# --- Categories ---


@category_router.get("", response_model=CategoryListResponse)
async def list_categories() -> CategoryListResponse:
    return CategoryListResponse(
        categories=[CategoryResponse(category_id=str(c.id), name=c.name) for c in all_categories()]
    )


@category_router.post("", status_code=201, response_model=CategoryIdResponse)
async def create_category(body: CreateCategoryRequest, auth=Depends(get_auth)) -> CategoryIdResponse:
    require_role(auth, Role.ADMIN)
    result = current_domain.process(CreateCategory(name=body.name), asynchronous=False)
    return CategoryIdResponse(category_id=result)


# --- Cart ---


@cart_router.get("", response_model=CartResponse)
async def get_cart(auth=Depends(get_auth)) -> CartResponse:
    auth = require_role(auth)
    items = cart_items(auth.user_id)
    return CartResponse(
        items=[
            CartItemResponse(
                product_id=str(i.product_id),
                name=i.name,
                price=i.price,
                quantity=i.quantity,
                total=i.total,
            )
            for i in items
        ],
        total=cart_total(items),
    )


@cart_router.post("", status_code=201, response_model=StatusResponse)
async def add_to_cart(body: AddToCartRequest, auth=Depends(get_auth)) -> StatusResponse:
    auth = require_role(auth)
    command = AddToCart(user_id=auth.user_id, product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.put("/{product_id}", response_model=StatusResponse)
async def update_cart_quantity(
    product_id: str, body: UpdateCartQuantityRequest, auth=Depends(get_auth)
) -> StatusResponse:
    auth = require_role(auth)
    command = UpdateCartQuantity(user_id=auth.user_id, product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{product_id}", response_model=StatusResponse)
async def remove_from_cart(product_id: str, auth=Depends(get_auth)) -> StatusResponse:
    auth = require_role(auth)
    current_domain.process(RemoveFromCart(user_id=auth.user_id, product_id=product_id), asynchronous=False)
    return StatusResponse()


@cart_router.delete("", response_model=StatusResponse)
async def clear_cart(auth=Depends(get_auth)) -> StatusResponse:
    auth = require_role(auth)
    current_domain.process(ClearCart(user_id=auth.user_id), asynchronous=False)
    return StatusResponse()


# --- Orders ---


@order_router.post("", status_code=201, response_model=OrderIdResponse)
def place_order(
    body: PlaceOrderRequest | None = None, auth=Depends(get_auth), pipeline=Depends(get_pipeline)
) -> OrderIdResponse:
    """Buy the given items, or the caller's whole cart when no items are sent."""
    if body is None or body.items is None:
        order_id = pipeline.place_order_from_cart(auth)
    else:
        order_id = pipeline.place_order(auth, [(line.product_id, line.quantity) for line in body.items])
    return OrderIdResponse(order_id=order_id)


@order_router.get("", response_model=OrderListResponse)
async def list_my_orders(auth=Depends(get_auth)) -> OrderListResponse:
    auth = require_role(auth)
    return OrderListResponse(orders=[_order_response(o) for o in orders_for_customer(auth.user_id)])


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, auth=Depends(get_auth)) -> OrderResponse:
    order = load_order(order_id)
    require_owner(auth, order.customer_id)
    return _order_response(order, with_payment=True)


@order_router.post("/{order_id}/payment", response_model=StatusResponse)
def complete_payment(
    order_id: str, body: CompletePaymentRequest, auth=Depends(get_auth), pipeline=Depends(get_pipeline)
) -> StatusResponse:
    pipeline.complete_payment(auth, order_id, body.method)
    return StatusResponse()


# --- Reviews ---


@review_router.post("", status_code=201, response_model=ReviewIdResponse)
async def add_review(body: AddReviewRequest, auth=Depends(get_auth)) -> ReviewIdResponse:
    auth = require_role(auth)
    command = AddReview(product_id=body.product_id, user_id=auth.user_id, rating=body.rating, comment=body.comment)
    result = current_domain.process(command, asynchronous=False)
    return ReviewIdResponse(review_id=result)


# --- Users ---


@user_router.post("", status_code=201, response_model=UserResponse)
async def register_user(body: RegisterUserRequest, auth=Depends(get_auth)) -> UserResponse:
    if body.role == Role.ADMIN.value:
        require_role(auth, Role.ADMIN)
    command = RegisterUser(email=body.email, password=body.password, role=body.role)
    user_id = current_domain.process(command, asynchronous=False)
    return UserResponse(user_id=user_id, email=body.email.strip().lower(), role=body.role)


@user_router.post("/login", response_model=UserResponse)
async def login(body: LoginRequest) -> UserResponse:
    return _user_response(authenticate(body.email, body.password))


# --- Admin ---


@admin_router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(auth=Depends(get_auth)) -> DashboardResponse:
    require_role(auth, Role.ADMIN)
    return DashboardResponse(
        order_count=order_count(),
        total_revenue=total_revenue(),
        product_count=product_count(),
        user_count=user_count(),
    )


@admin_router.get("/users", response_model=UserListResponse)
async def list_users(auth=Depends(get_auth)) -> UserListResponse:
    require_role(auth, Role.ADMIN)
    return UserListResponse(users=[_user_response(u) for u in all_users()])


@admin_router.delete("/users/{user_id}", response_model=StatusResponse)
async def remove_user(user_id: str, auth=Depends(get_auth)) -> StatusResponse:
    require_role(auth, Role.ADMIN)
    current_domain.process(RemoveUser(user_id=user_id), asynchronous=False)
    return StatusResponse()


@admin_router.get("/orders", response_model=OrderListResponse)
async def list_all_orders(auth=Depends(get_auth)) -> OrderListResponse:
    require_role(auth, Role.ADMIN)
    return OrderListResponse(orders=[_order_response(o, with_payment=True) for o in all_orders()])


@admin_router.put("/orders/{order_id}/status", response_model=StatusResponse)
def update_order_status(
    order_id: str, body: UpdateOrderStatusRequest, auth=Depends(get_auth), pipeline=Depends(get_pipeline)
) -> StatusResponse:
    pipeline.update_order_status(auth, order_id, body.status)
    return StatusResponse()
