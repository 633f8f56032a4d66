"""
SALE PRICING SERVICE
Turn requested ticket rows into priced lines, totals and a wallet movement

RESPONSIBILITIES:
- Merge rows per product and check inventory stock
- Validate free rows against the quantity promotion
- Price charged rows (quantity promotion or unit price resolution)
- Validate payments and loyalty wallet usage

RULES:
❌ No persistence, no stock mutation
✅ Invalid sales raise ValueError before anything is returned
✅ Line amounts rounded half-up to cents
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from app.domain.models import (
    InventoryItem,
    Payments,
    PricedLine,
    PriceResolutionInput,
    PricingRules,
    SaleItem,
    SaleTicket,
    WalletMovement,
    WalletReason,
)
from app.domain.schemas.inventory import InventoryDocument
from app.domain.schemas.sale import SaleRequest
from app.domain.services.price_resolution_engine import PriceResolutionEngine
from app.domain.services.quantity_promotion_engine import QuantityPromotionEngine
from app.utils.money import ZERO, round_cents, to_cents, to_decimal
from app.utils.time import local_day_of, weekday_index

logger = logging.getLogger(__name__)

# Payments may differ from the ticket total by at most this many cents
PAYMENT_TOLERANCE_CENTS = 1


class SalePricingService:
    """
    Sale Pricing Service
    Prices a whole ticket; the caller persists the result
    """

    def __init__(
        self,
        rules: Optional[PricingRules] = None,
        price_engine: Optional[PriceResolutionEngine] = None,
        quantity_engine: Optional[QuantityPromotionEngine] = None,
    ):
        self.rules = rules or PricingRules()
        self.price_engine = price_engine or PriceResolutionEngine(rules=self.rules)
        self.quantity_engine = quantity_engine or QuantityPromotionEngine()

    def price_sale(
        self,
        items: Sequence[SaleItem],
        inventory: Mapping[str, InventoryItem],
        now: Union[datetime, date],
        payments: Payments = Payments(),
        wallet_balance: Optional[Decimal] = None,
        is_elderly: bool = False,
        has_consultation: bool = False,
    ) -> SaleTicket:
        """
        Price a sale

        Args:
            items: Requested rows (price 0 marks a free row)
            inventory: Inventory rows of the pharmacy by product id
            now: Sale instant
            payments: Tender split
            wallet_balance: Customer wallet balance, None when there is no customer
            is_elderly: Customer presented an INAPAM card
            has_consultation: Sale closes a medical consultation

        Returns:
            SaleTicket

        Raises:
            ValueError: Invalid sale
        """
        if not items:
            raise ValueError("No products to sell")

        is_customer = wallet_balance is not None
        balance = to_decimal(wallet_balance)
        voucher = to_decimal(payments.voucher)
        if is_customer and voucher > balance:
            raise ValueError(f"Insufficient wallet funds, available: {balance}")
        if not is_customer and voucher > ZERO:
            raise ValueError("Customer has no loyalty wallet")

        quantities, free_requested = self._merge_rows(items)
        self._check_stock(quantities, inventory)

        today = local_day_of(now)
        weekday = weekday_index(now)
        self._check_consultation_day(quantities, inventory, weekday)
        is_medical_service = has_consultation
        lines: List[PricedLine] = []
        total = ZERO
        total_discount = ZERO
        total_wallet = ZERO
        item_count = ZERO

        for product_id, quantity in quantities.items():
            item = inventory[product_id]
            if self.rules.is_medical_service(item.category):
                is_medical_service = True
            if quantity <= ZERO:
                continue

            promo = item.quantity_promotion
            promo_active = self.quantity_engine.is_active(promo, today)
            free_allowed = Decimal(self.quantity_engine.free_units(promo, quantity, today))
            free_sent = free_requested.get(product_id, ZERO)

            if free_sent > ZERO or free_allowed > ZERO:
                if not promo_active:
                    raise ValueError(
                        f"{item.name} has a free row but its quantity promotion is not active"
                    )
                if free_sent != free_allowed:
                    raise ValueError(
                        f"Invalid quantity promotion on {item.name}: "
                        f"free rows sent={free_sent}, expected={free_allowed}"
                    )

            paid = max(ZERO, quantity - free_allowed)
            if paid > ZERO:
                line, unrounded = self._charged_line(
                    item, paid, free_allowed, today, weekday, is_customer, is_elderly
                )
                lines.append(line)
                total += unrounded[0]
                total_discount += unrounded[1]
                total_wallet += unrounded[2]
                item_count += paid

            if free_allowed > ZERO:
                line = self._free_line(item, free_allowed)
                lines.append(line)
                total_discount += to_decimal(item.sale_price) * free_allowed
                item_count += free_allowed

        self._check_payments(payments, total)

        movement = None
        if is_customer:
            movement = self.wallet_movement(balance, total_wallet, voucher)

        logger.info(
            f"Sale priced: {len(lines)} lines, total={round_cents(total)}, "
            f"discount={round_cents(total_discount)}, wallet={round_cents(total_wallet)}"
        )

        return SaleTicket(
            lines=tuple(lines),
            item_count=item_count,
            total=round_cents(total),
            total_discount=round_cents(total_discount),
            total_wallet_credit=round_cents(total_wallet),
            is_medical_service=is_medical_service,
            wallet_movement=movement,
        )

    def price_request(
        self,
        request: SaleRequest,
        inventory_documents: Sequence[InventoryDocument],
        now: Union[datetime, date],
        wallet_balance: Optional[Decimal] = None,
    ) -> SaleTicket:
        """
        Price a sale payload against the pharmacy's inventory documents

        Args:
            request: Parsed sale payload
            inventory_documents: Inventory rows for the requested products
            now: Sale instant
            wallet_balance: Balance of the request's customer (0 when unknown)

        Returns:
            SaleTicket
        """
        inventory = {doc.product.id: doc.to_inventory_item() for doc in inventory_documents}
        balance = None
        if request.customer_id:
            balance = wallet_balance if wallet_balance is not None else ZERO

        return self.price_sale(
            items=request.to_sale_items(),
            inventory=inventory,
            now=now,
            payments=request.to_payments(),
            wallet_balance=balance,
            is_elderly=request.inapam,
            has_consultation=bool(request.consultation_id),
        )

    @staticmethod
    def wallet_movement(balance: Decimal, credit: Decimal, voucher: Decimal) -> WalletMovement:
        """Wallet entry for a customer sale"""
        reason = None
        if credit > ZERO:
            reason = WalletReason.REWARD
        if credit > ZERO and voucher > ZERO:
            reason = WalletReason.REWARD_AND_PAYMENT
        if credit <= ZERO and voucher > ZERO:
            reason = WalletReason.PAYMENT

        return WalletMovement(
            reason=reason,
            income=round_cents(credit),
            expense=round_cents(voucher),
            new_balance=round_cents(balance + credit - voucher),
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _merge_rows(items: Sequence[SaleItem]) -> Tuple[Dict[str, Decimal], Dict[str, Decimal]]:
        """Units per product (charged + free) and free units sent per product"""
        quantities: Dict[str, Decimal] = {}
        free_requested: Dict[str, Decimal] = {}
        for row in items:
            product_id = str(row.product_id or "")
            if not product_id:
                continue
            quantities.setdefault(product_id, ZERO)
            quantity = max(ZERO, to_decimal(row.quantity))
            if quantity <= ZERO:
                continue
            quantities[product_id] += quantity
            if to_decimal(row.price) == ZERO:
                free_requested[product_id] = free_requested.get(product_id, ZERO) + quantity
        return quantities, free_requested

    @staticmethod
    def _check_stock(quantities: Mapping[str, Decimal], inventory: Mapping[str, InventoryItem]) -> None:
        for product_id, quantity in quantities.items():
            item = inventory.get(product_id)
            if item is None:
                raise ValueError(f"Product {product_id} is not in this pharmacy's inventory")
            if to_decimal(item.stock) < quantity:
                raise ValueError(
                    f"Not enough stock for {item.name} (requested: {quantity}, available: {item.stock})"
                )

    def _check_consultation_day(
        self,
        quantities: Mapping[str, Decimal],
        inventory: Mapping[str, InventoryItem],
        weekday: int,
    ) -> None:
        """Each consultation product may only be sold on its own days"""
        is_weekend = weekday in (0, 6)
        for product_id in quantities:
            name = inventory[product_id].name
            if is_weekend and self.rules.is_weekday_consultation(name):
                raise ValueError(
                    f"Today is a weekend day. Use \"{self.rules.weekend_consultation_product}\""
                )
            if not is_weekend and self.rules.is_weekend_consultation(name):
                raise ValueError(
                    f"Today is a weekday. Use \"{self.rules.consultation_product}\""
                )

    @staticmethod
    def _check_payments(payments: Payments, total: Decimal) -> None:
        paid_cents = sum(
            to_cents(amount)
            for amount in (payments.cash, payments.card, payments.transfer, payments.voucher)
        )
        total_cents = to_cents(total)
        if abs(paid_cents - total_cents) > PAYMENT_TOLERANCE_CENTS:
            raise ValueError(
                f"Payments ({Decimal(paid_cents) / 100:.2f}) do not match "
                f"the total ({Decimal(total_cents) / 100:.2f})"
            )

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------

    def _charged_line(
        self,
        item: InventoryItem,
        paid: Decimal,
        free_allowed: Decimal,
        today: datetime,
        weekday: int,
        is_customer: bool,
        is_elderly: bool,
    ) -> Tuple[PricedLine, Tuple[Decimal, Decimal, Decimal]]:
        """Charged row plus its unrounded (total, discount, wallet) amounts"""
        base_price = to_decimal(item.sale_price)

        if free_allowed > ZERO:
            # Quantity promotion wins: no weekday/seasonal discount, no wallet credit
            unit_price = base_price
            unit_discount = ZERO
            unit_wallet = ZERO
            label = self.quantity_engine.label(
                self.quantity_engine.required_quantity(item.quantity_promotion)
            )
            display = ""
            if is_elderly and item.promotions.inapam_discount_enabled:
                unit_price = base_price * (Decimal('1') - self.rules.inapam_rate)
                unit_discount = base_price - unit_price
                label = f"{label}-{self.rules.inapam_label}"
                display = self.rules.inapam_display
        else:
            resolved = self.price_engine.resolve_unit_price(
                PriceResolutionInput(
                    base_price=base_price,
                    product=item.product,
                    promos=item.promotions,
                    now=today,
                    weekday=weekday,
                    is_loyalty_customer=is_customer,
                    is_elderly=is_elderly,
                )
            )
            unit_price = resolved.final_price
            unit_discount = resolved.unit_discount
            unit_wallet = resolved.unit_wallet_credit
            label = resolved.applied_promotion_label
            display = resolved.discount_display

        label = self.price_engine.sanitize_label(label) or self.rules.no_promotion_label
        line_total = unit_price * paid
        line_discount = unit_discount * paid
        line_wallet = unit_wallet * paid

        line = PricedLine(
            product_id=item.product_id,
            category=item.category,
            quantity=paid,
            unit_price=round_cents(unit_price),
            line_total=round_cents(line_total),
            discount=round_cents(line_discount),
            wallet_credit=round_cents(line_wallet),
            original_price=round_cents(base_price),
            cost=round_cents(item.cost),
            vat=to_decimal(item.vat),
            promotion_label=label,
            discount_display=display or "",
        )
        return line, (line_total, line_discount, line_wallet)

    def _free_line(self, item: InventoryItem, free_units: Decimal) -> PricedLine:
        base_price = to_decimal(item.sale_price)
        label = self.quantity_engine.label(
            self.quantity_engine.required_quantity(item.quantity_promotion)
        )
        return PricedLine(
            product_id=item.product_id,
            category=item.category,
            quantity=free_units,
            unit_price=ZERO,
            line_total=ZERO,
            discount=round_cents(base_price * free_units),
            wallet_credit=ZERO,
            original_price=round_cents(base_price),
            cost=round_cents(item.cost),
            vat=to_decimal(item.vat),
            promotion_label=f"{label}-{self.rules.free_row_suffix}",
            discount_display="100%",
        )
