from cpm.domain.models import MarginLevel, ProductPrices
from cpm.services.catalog_service import CatalogService


def test_normal_vat_row_shows_ttc_and_computed_margin():
    row = CatalogService().price_row(ProductPrices("IP14", "iPhone 14", 900.0, 1200.0, 1000.0, "normal"))

    assert row.regime_label == "TVA normale"
    assert row.purchase == "900 €"
    assert row.retail.price == "1440 €"
    assert row.retail.margin == "33%"
    assert row.retail.level is MarginLevel.HIGH
    assert row.pro.price == "1200 €"
    assert row.pro.margin == "11%"
    assert row.pro.level is MarginLevel.MEDIUM


def test_margin_vat_row_shows_sell_price_and_stored_margin():
    product = ProductPrices("IP13-SN1", "iPhone 13", 900.0, 1199.5, 1000.0, "margin", 27.73, 8.0)

    row = CatalogService().price_row(product)

    assert row.regime_label == "TVA marge"
    assert row.retail.price == "1199.50 €"
    assert row.retail.margin == "28%"
    assert row.pro.price == "1000 €"
    assert row.pro.margin == "8%"
    assert row.pro.level is MarginLevel.LOW


def test_unknown_regime_and_missing_prices_fall_back():
    row = CatalogService().price_row(ProductPrices("X", "Unpriced", None, None, None, "weird"))

    assert row.regime_label == "TVA normale"
    assert row.purchase == "0 €"
    assert row.retail.price == "0 €"
    assert row.retail.margin == "0%"
    assert row.retail.level is MarginLevel.LOW


def test_margin_flag_for_serial_lists():
    catalog = CatalogService()
    assert catalog.margin_flag(None) is MarginLevel.LOW
    assert catalog.margin_flag(10.0) is MarginLevel.MEDIUM
    assert catalog.margin_flag(16.0) is MarginLevel.HIGH
    assert len(catalog.price_rows([ProductPrices("A", "a", 1.0, 2.0, 2.0)])) == 1


def test_serial_row_under_normal_vat_shows_ht_ttc_and_cash_margin():
    product = ProductPrices("IP14", "iPhone 14", 900.0, 1200.0, 1000.0, "normal", serial_number="SN-001")

    row = CatalogService().serial_row(product)

    assert row.serial_number == "SN-001"
    assert row.regime_label == "TVA normale"
    assert row.purchase == "900.00 €"
    assert row.retail.price == "1200.00 € HT / 1440.00 € TTC"
    assert row.retail.margin == "33.33%"
    assert row.retail.cash_margin == "300.00 €"
    assert row.retail.level is MarginLevel.HIGH
    assert row.pro.margin == "11.11%"
    assert row.pro.cash_margin == "100.00 €"
    assert row.pro.level is MarginLevel.MEDIUM


def test_serial_row_under_margin_vat_shows_net_cash_margin():
    product = ProductPrices("IP13", "iPhone 13", 900.0, 1200.0, 950.0, "margin", serial_number="SN-002")

    row = CatalogService().serial_row(product)

    assert row.regime_label == "TVA marge"
    assert row.retail.price == "1200.00 € TVM"
    assert row.retail.cash_margin == "250.00 €"
    assert row.retail.margin == "27.78%"
    assert row.retail.level is MarginLevel.HIGH
    assert row.pro.cash_margin == "41.67 €"
    assert row.pro.margin == "4.63%"
    assert row.pro.level is MarginLevel.LOW


def test_serial_row_without_prices():
    row = CatalogService().serial_row(ProductPrices("X", "x", None, None, 1000.0, "margin"))

    assert row.serial_number == "-"
    assert row.purchase == "-"
    assert row.retail.price == "-"
    assert row.retail.cash_margin == "-"
    assert row.pro.margin == "0.00%"
    assert row.pro.level is MarginLevel.LOW
