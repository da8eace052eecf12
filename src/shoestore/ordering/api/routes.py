"""FastAPI routes for the Ordering domain: carts and orders.

Every route acts on behalf of the signed-in account; carts and orders of
other customers are never reachable through these endpoints.
"""

import json

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from shoestore.catalogue.product import Product
from shoestore.identity.account import Account
from shoestore.identity.api.dependencies import get_current_account
from shoestore.ordering.api.schemas import (
    AddToCartRequest,
    CartItemResponse,
    CartLineRequest,
    CartResponse,
    OrderItemResponse,
    OrderResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
    ProductSnapshot,
    ShippingAddressSchema,
    UpdateCartQuantityRequest,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from shoestore.ordering.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity, cart_for
from shoestore.ordering.order.creation import PlaceOrder
from shoestore.ordering.order.order import Order
from shoestore.ordering.order.payment import VerifyOrderPayment


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------
def cart_response(customer_id) -> CartResponse:
    cart = cart_for(customer_id)
    product_repo = current_domain.repository_for(Product)

    items = []
    for item in cart.items:
        try:
            product = product_repo.get(item.product_id)
            snapshot = ProductSnapshot(
                id=str(product.id),
                name=product.name,
                price=product.price,
                images=product.image_urls,
            )
        except ObjectNotFoundError:
            snapshot = None
        items.append(
            CartItemResponse(
                product_id=str(item.product_id),
                size=item.size,
                quantity=item.quantity,
                product=snapshot,
            )
        )
    return CartResponse(items=items)


def order_response(order: Order) -> OrderResponse:
    address = order.shipping_address
    return OrderResponse(
        id=str(order.id),
        customer_id=str(order.customer_id),
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                name=item.name,
                size=item.size,
                quantity=item.quantity,
                unit_price=item.unit_price,
                image=item.image,
            )
            for item in order.items
        ],
        shipping_address=(
            ShippingAddressSchema(
                street=address.street,
                city=address.city,
                state=address.state,
                zip_code=address.zip_code,
                phone=address.phone,
            )
            if address
            else None
        ),
        total_amount=order.total_amount,
        currency=order.currency,
        status=order.status,
        payment_status=order.payment_status,
        payment_order_handle=order.payment_order_handle,
        payment_id=order.payment_id,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(account: Account = Depends(get_current_account)) -> CartResponse:
    return cart_response(account.id)


@cart_router.post("/add", response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest, account: Account = Depends(get_current_account)) -> CartResponse:
    command = AddToCart(
        customer_id=str(account.id),
        product_id=body.product_id,
        size=body.size,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return cart_response(account.id)


@cart_router.post("/update", response_model=CartResponse)
async def update_cart_quantity(
    body: UpdateCartQuantityRequest, account: Account = Depends(get_current_account)
) -> CartResponse:
    command = UpdateCartQuantity(
        customer_id=str(account.id),
        product_id=body.product_id,
        size=body.size,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return cart_response(account.id)


@cart_router.post("/remove", response_model=CartResponse)
async def remove_from_cart(body: CartLineRequest, account: Account = Depends(get_current_account)) -> CartResponse:
    command = RemoveFromCart(
        customer_id=str(account.id),
        product_id=body.product_id,
        size=body.size,
    )
    current_domain.process(command, asynchronous=False)
    return cart_response(account.id)


@cart_router.post("/clear", response_model=CartResponse)
async def clear_cart(account: Account = Depends(get_current_account)) -> CartResponse:
    current_domain.process(ClearCart(customer_id=str(account.id)), asynchronous=False)
    return cart_response(account.id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=PlaceOrderResponse)
async def place_order(body: PlaceOrderRequest, account: Account = Depends(get_current_account)) -> PlaceOrderResponse:
    command = PlaceOrder(
        customer_id=str(account.id),
        items=json.dumps([item.model_dump() for item in body.items]),
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        total_amount=body.total_amount,
    )
    result = current_domain.process(command, asynchronous=False)
    return PlaceOrderResponse(**result)


@order_router.post("/{order_id}/verify", response_model=VerifyPaymentResponse)
async def verify_payment(
    order_id: str, body: VerifyPaymentRequest, account: Account = Depends(get_current_account)
) -> VerifyPaymentResponse:
    command = VerifyOrderPayment(
        order_id=order_id,
        customer_id=str(account.id),
        payment_id=body.payment_id,
        payment_order_id=body.payment_order_id,
        signature=body.signature,
    )
    result = current_domain.process(command, asynchronous=False)
    return VerifyPaymentResponse(**result)


@order_router.get("/my-orders", response_model=list[OrderResponse])
async def my_orders(account: Account = Depends(get_current_account)) -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).for_customer(account.id)
    return [order_response(order) for order in orders]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, account: Account = Depends(get_current_account)) -> OrderResponse:
    order = current_domain.repository_for(Order).get(order_id)
    if str(order.customer_id) != str(account.id) and not account.is_admin:
        raise ObjectNotFoundError(f"Order {order_id} does not exist")
    return order_response(order)
