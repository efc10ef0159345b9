import itertools
from typing import Dict, List, Optional

from apps.carts.dtos import MutationOutcome
from apps.carts.mappers import CartMapper
from apps.commerce.errors import ErrorCode, StructuredError


def money(amount="10.0", currency="USD"):
    return {"amount": amount, "currencyCode": currency}


def line_node(line_id, variant_id="gid://shopify/ProductVariant/1", quantity=1):
    return {
        "id": line_id,
        "quantity": quantity,
        "cost": {"subtotalAmount": money(str(10.0 * quantity))},
        "merchandise": {
            "id": variant_id,
            "title": "Default Title",
            "product": {"id": "gid://shopify/Product/1", "handle": "tee", "title": "Tee"},
            "price": money(),
        },
    }


def cart_node(cart_id, lines=()):
    lines = list(lines)
    total = sum(line["quantity"] for line in lines)
    return {
        "id": cart_id,
        "checkoutUrl": f"https://shop.example.com/cart/c/{cart_id.rsplit('/', 1)[-1]}",
        "totalQuantity": total,
        "cost": {
            "subtotalAmount": money(str(10.0 * total)),
            "totalAmount": money(str(10.0 * total)),
        },
        "lines": {"edges": [{"node": line} for line in lines]},
    }


def not_found(message="Cart not found"):
    return MutationOutcome.failure(StructuredError.of(ErrorCode.CART_NOT_FOUND, message))


class FakeCartRepository:
    """In-memory stand-in for the upstream cart API.

    Carts live in ``self.carts``; ids outside it are reported as not found.
    ``stale_after_create`` makes every freshly created cart unknown again, which
    simulates an upstream that never recognises any cart.
    """

    def __init__(self, *, stale_after_create: bool = False):
        self.carts: Dict[str, List[dict]] = {}
        self.calls: List[tuple] = []
        self.stale_after_create = stale_after_create
        self.create_error: Optional[StructuredError] = None
        self.add_error: Optional[StructuredError] = None
        self._ids = itertools.count(1)
        self._line_ids = itertools.count(1)
        self.mapper = CartMapper()

    @property
    def upstream_calls(self) -> int:
        return len(self.calls)

    def seed(self, cart_id: str, lines=()) -> str:
        self.carts[cart_id] = list(lines)
        return cart_id

    def _outcome(self, cart_id):
        return MutationOutcome.success(self.mapper.to_dto(cart_node(cart_id, self.carts[cart_id])))

    def fetch(self, cart_id):
        self.calls.append(("fetch", cart_id))
        if cart_id not in self.carts:
            return MutationOutcome.success(None)
        return self._outcome(cart_id)

    def create(self):
        self.calls.append(("create",))
        if self.create_error:
            return MutationOutcome.failure(self.create_error)
        cart_id = f"gid://shopify/Cart/new-{next(self._ids)}"
        if self.stale_after_create:
            return MutationOutcome.success(self.mapper.to_dto(cart_node(cart_id)))
        self.carts[cart_id] = []
        return self._outcome(cart_id)

    def add_lines(self, cart_id, lines):
        lines = [dict(line) for line in lines]
        self.calls.append(("add_lines", cart_id, lines))
        if self.add_error:
            return MutationOutcome.failure(self.add_error)
        if cart_id not in self.carts:
            return not_found()
        for line in lines:
            self.carts[cart_id].append(
                line_node(
                    f"gid://shopify/CartLine/{next(self._line_ids)}",
                    line["merchandiseId"],
                    line["quantity"],
                )
            )
        return self._outcome(cart_id)

    def update_lines(self, cart_id, lines):
        lines = [dict(line) for line in lines]
        self.calls.append(("update_lines", cart_id, lines))
        if cart_id not in self.carts:
            return not_found()
        for change in lines:
            for node in self.carts[cart_id]:
                if node["id"] == change["id"]:
                    node["quantity"] = change["quantity"]
        return self._outcome(cart_id)

    def remove_lines(self, cart_id, line_ids):
        line_ids = list(line_ids)
        self.calls.append(("remove_lines", cart_id, line_ids))
        if cart_id not in self.carts:
            return not_found()
        self.carts[cart_id] = [n for n in self.carts[cart_id] if n["id"] not in line_ids]
        return self._outcome(cart_id)
