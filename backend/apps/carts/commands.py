from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class CartLineAddCommand:
    merchandise_id: str
    quantity: int

    @staticmethod
    def from_validated(data: Dict[str, Any]) -> "CartLineAddCommand":
        return CartLineAddCommand(
            merchandise_id=data["merchandiseId"], quantity=int(data["quantity"])
        )

    def to_line_input(self) -> Dict[str, Any]:
        return {"merchandiseId": self.merchandise_id, "quantity": self.quantity}


@dataclass(frozen=True)
class CartLineUpdateCommand:
    line_id: str
    quantity: int

    @staticmethod
    def from_validated(data: Dict[str, Any]) -> "CartLineUpdateCommand":
        return CartLineUpdateCommand(line_id=data["lineId"], quantity=int(data["quantity"]))

    def to_line_input(self) -> Dict[str, Any]:
        return {"id": self.line_id, "quantity": self.quantity}


@dataclass(frozen=True)
class CartLineRemoveCommand:
    line_id: str

    @staticmethod
    def from_validated(data: Dict[str, Any]) -> "CartLineRemoveCommand":
        return CartLineRemoveCommand(line_id=data["lineId"])
