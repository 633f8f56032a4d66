from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.models import Payments, SaleItem
from app.utils.money import to_decimal


class SaleItemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    product_id: str = Field(alias="producto")
    quantity: Decimal = Field(alias="cantidad", ge=0)
    price: Decimal = Field(default=Decimal("0"), alias="precio")

    @field_validator("product_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return str(value or "")

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value: Any) -> Decimal:
        return max(Decimal("0"), to_decimal(value))

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> Decimal:
        return to_decimal(value)


class SaleRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    folio: Optional[str] = None
    pharmacy_id: str = Field(alias="farmacia")
    customer_id: Optional[str] = Field(default=None, alias="clienteId")
    consultation_id: Optional[str] = Field(default=None, alias="fichaId")
    items: List[SaleItemRequest] = Field(alias="productos")
    inapam: bool = Field(default=False, alias="aplicaInapam")
    cash: Decimal = Field(default=Decimal("0"), alias="efectivo")
    card: Decimal = Field(default=Decimal("0"), alias="tarjeta")
    transfer: Decimal = Field(default=Decimal("0"), alias="transferencia")
    voucher: Decimal = Field(default=Decimal("0"), alias="importeVale")

    @field_validator("cash", "card", "transfer", "voucher", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> Decimal:
        return to_decimal(value)

    @field_validator("inapam", mode="before")
    @classmethod
    def _strict_flag(cls, value: Any) -> bool:
        # Only an explicit true enables the senior discount
        return value is True

    def to_sale_items(self) -> List[SaleItem]:
        return [
            SaleItem(product_id=row.product_id, quantity=row.quantity, price=row.price)
            for row in self.items
        ]

    def to_payments(self) -> Payments:
        return Payments(
            cash=self.cash,
            card=self.card,
            transfer=self.transfer,
            voucher=self.voucher,
        )
