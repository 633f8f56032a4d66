"""
Inventory document schemas

Parse pharmacy inventory rows as stored in the document database
(Spanish field names) into domain objects.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.models import (
    DayPromotion,
    InventoryItem,
    PromotionSource,
    QuantityPromotion,
    SeasonalPromotion,
)
from app.utils.money import to_decimal

DateValue = Optional[Union[datetime, date, str]]


class PromoDocument(BaseModel):
    """Weekday or seasonal promotion sub-document"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    percentage: Decimal = Field(default=Decimal("0"), alias="porcentaje")
    start_date: DateValue = Field(default=None, alias="inicio")
    end_date: DateValue = Field(default=None, alias="fin")
    wallet: Optional[bool] = Field(default=None, alias="monedero")

    @field_validator("percentage", mode="before")
    @classmethod
    def _coerce_percentage(cls, value: Any) -> Decimal:
        return to_decimal(value)

    def to_day_promotion(self) -> DayPromotion:
        return DayPromotion(
            percentage=self.percentage,
            wallet_eligible=bool(self.wallet),
            start_date=self.start_date,
            end_date=self.end_date,
        )

    def to_seasonal_promotion(self) -> SeasonalPromotion:
        return SeasonalPromotion(
            percentage=self.percentage,
            wallet_eligible=self.wallet is True,
            start_date=self.start_date,
            end_date=self.end_date,
        )


class ProductDocument(BaseModel):
    """Populated product reference"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(default="", alias="_id")
    name: str = Field(default="", alias="nombre")
    category: str = Field(default="", alias="categoria")
    cost: Decimal = Field(default=Decimal("0"), alias="costo")
    vat: Decimal = Field(default=Decimal("0"), alias="iva")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return str(value or "")

    @field_validator("cost", "vat", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> Decimal:
        return to_decimal(value)


class InventoryDocument(BaseModel):
    """InventarioFarmacia row with its promotion schedule"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    product: ProductDocument = Field(alias="producto")
    stock: Decimal = Field(default=Decimal("0"), alias="existencia")
    sale_price: Decimal = Field(alias="precioVenta")

    promo_sunday: Optional[PromoDocument] = Field(default=None, alias="promoDomingo")
    promo_monday: Optional[PromoDocument] = Field(default=None, alias="promoLunes")
    promo_tuesday: Optional[PromoDocument] = Field(default=None, alias="promoMartes")
    promo_wednesday: Optional[PromoDocument] = Field(default=None, alias="promoMiercoles")
    promo_thursday: Optional[PromoDocument] = Field(default=None, alias="promoJueves")
    promo_friday: Optional[PromoDocument] = Field(default=None, alias="promoViernes")
    promo_saturday: Optional[PromoDocument] = Field(default=None, alias="promoSabado")
    promo_seasonal: Optional[PromoDocument] = Field(default=None, alias="promoDeTemporada")

    quantity_required: Optional[int] = Field(default=None, alias="promoCantidadRequerida")
    quantity_start: DateValue = Field(default=None, alias="inicioPromoCantidad")
    quantity_end: DateValue = Field(default=None, alias="finPromoCantidad")

    inapam_discount: bool = Field(default=False, alias="descuentoINAPAM")

    @field_validator("stock", "sale_price", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> Decimal:
        return to_decimal(value)

    @field_validator("quantity_required", mode="before")
    @classmethod
    def _coerce_quantity_required(cls, value: Any) -> Optional[int]:
        if value in (None, ""):
            return None
        return int(to_decimal(value))

    @field_validator("inapam_discount", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return bool(value)

    def to_promotion_source(self) -> PromotionSource:
        slots = (
            self.promo_sunday,
            self.promo_monday,
            self.promo_tuesday,
            self.promo_wednesday,
            self.promo_thursday,
            self.promo_friday,
            self.promo_saturday,
        )
        return PromotionSource(
            day_promotions=tuple(
                slot.to_day_promotion() if slot else DayPromotion() for slot in slots
            ),
            seasonal=self.promo_seasonal.to_seasonal_promotion() if self.promo_seasonal else None,
            inapam_discount_enabled=self.inapam_discount,
        )

    def to_quantity_promotion(self) -> QuantityPromotion:
        return QuantityPromotion(
            required_quantity=self.quantity_required or 0,
            start_date=self.quantity_start,
            end_date=self.quantity_end,
        )

    def to_inventory_item(self) -> InventoryItem:
        return InventoryItem(
            product_id=self.product.id,
            name=self.product.name,
            category=self.product.category,
            sale_price=self.sale_price,
            stock=self.stock,
            cost=self.product.cost,
            vat=self.product.vat,
            promotions=self.to_promotion_source(),
            quantity_promotion=self.to_quantity_promotion(),
        )
