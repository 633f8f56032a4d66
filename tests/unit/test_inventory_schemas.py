from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.domain.schemas.inventory import InventoryDocument
from app.domain.schemas.sale import SaleRequest


@pytest.fixture
def inventory_payload():
    return {
        "_id": "665f0c",
        "farmacia": "F1",
        "producto": {
            "_id": "P1",
            "nombre": "Ibuprofeno 400mg",
            "categoria": "Medicamentos",
            "costo": "12.5",
            "iva": None,
        },
        "existencia": 8,
        "precioVenta": 35,
        "promoLunes": {
            "porcentaje": 15,
            "inicio": datetime(2026, 10, 1, tzinfo=timezone.utc),
            "fin": datetime(2026, 10, 31, tzinfo=timezone.utc),
            "monedero": True,
        },
        "promoMiercoles": {"porcentaje": None},
        "promoDeTemporada": {
            "porcentaje": 20,
            "inicio": "2026-12-01",
            "fin": "2026-12-31",
            "monedero": "yes",
        },
        "promoCantidadRequerida": 3,
        "inicioPromoCantidad": "2026-10-01",
        "descuentoINAPAM": True,
    }


class TestInventoryDocument:

    def test_weekday_slots(self, inventory_payload):
        source = InventoryDocument.model_validate(inventory_payload).to_promotion_source()

        monday = source.for_weekday(1)
        assert monday.percentage == Decimal('15')
        assert monday.wallet_eligible is True
        assert source.for_weekday(3).percentage == Decimal('0')
        assert source.for_weekday(0).percentage == Decimal('0')
        assert source.inapam_discount_enabled is True

    def test_seasonal_wallet_needs_real_boolean(self, inventory_payload):
        inventory_payload["promoDeTemporada"]["monedero"] = True
        source = InventoryDocument.model_validate(inventory_payload).to_promotion_source()

        assert source.seasonal.percentage == Decimal('20')
        assert source.seasonal.wallet_eligible is True
        assert source.seasonal.start_date == "2026-12-01"

    def test_inventory_item(self, inventory_payload):
        item = InventoryDocument.model_validate(inventory_payload).to_inventory_item()

        assert item.product_id == "P1"
        assert item.category == "Medicamentos"
        assert item.sale_price == Decimal('35')
        assert item.stock == Decimal('8')
        assert item.cost == Decimal('12.5')
        assert item.vat == Decimal('0')
        assert item.quantity_promotion.required_quantity == 3
        assert item.quantity_promotion.end_date is None

    def test_bare_document(self):
        item = InventoryDocument.model_validate({
            "producto": {"_id": "P2", "categoria": "Recargas"},
            "precioVenta": "abc",
        }).to_inventory_item()

        assert item.sale_price == Decimal('0')
        assert item.promotions.seasonal is None
        assert item.quantity_promotion.required_quantity == 0


class TestSaleRequest:

    def test_aliases_and_coercion(self):
        request = SaleRequest.model_validate({
            "farmacia": "F1",
            "productos": [
                {"producto": "P1", "cantidad": 2, "precio": 35},
                {"producto": "P1", "cantidad": 1, "precio": None},
            ],
            "aplicaInapam": "true",
            "efectivo": "70",
            "importeVale": None,
        })

        items = request.to_sale_items()
        assert items[1].price == Decimal('0')
        assert request.inapam is False
        assert request.to_payments().cash == Decimal('70')
        assert request.to_payments().voucher == Decimal('0')

    def test_bad_quantities_become_zero(self):
        request = SaleRequest.model_validate({
            "farmacia": "F1",
            "productos": [
                {"producto": "P1", "cantidad": -1, "precio": 10},
                {"producto": "P2", "cantidad": "abc", "precio": 10},
                {"producto": "P3", "cantidad": "2", "precio": 10},
            ],
        })

        quantities = [item.quantity for item in request.to_sale_items()]
        assert quantities == [Decimal('0'), Decimal('0'), Decimal('2')]

    def test_rows_must_be_objects(self):
        with pytest.raises(ValidationError):
            SaleRequest.model_validate({"farmacia": "F1", "productos": ["P1"]})
