from datetime import date

import pytest

pd = pytest.importorskip('pandas')

from backend.services import dashboard
from core.demo_data import DEMO_PRODUCTS, DEMO_SALES, seed_demo_data


def test_metrics_on_empty_store():
    result = dashboard.fetch_dashboard_metrics()

    assert result['kpis']['total_revenue'] == 0.0
    assert result['kpis']['total_sales'] == 0
    assert result['revenue_by_day'] == []
    assert result['top_products'] == []
    assert result['low_stock'] == []


def test_metrics_on_demo_data():
    assert seed_demo_data() is True

    result = dashboard.fetch_dashboard_metrics(low_stock_threshold=60)

    kpis = result['kpis']
    assert kpis['total_revenue'] == pytest.approx(sum(sale.total for sale, _ in DEMO_SALES))
    assert kpis['total_sales'] == 5
    assert kpis['total_products'] == len(DEMO_PRODUCTS)
    assert kpis['stock_units'] == sum(p.stock for p in DEMO_PRODUCTS)

    days = [entry['day'] for entry in result['revenue_by_day']]
    assert days == [date(2023, 10, 1), date(2023, 10, 2), date(2023, 10, 3), date(2023, 10, 4)]
    assert result['revenue_by_day'][1]['total'] == pytest.approx(46.0)

    assert result['top_products'][0]['product_name'] == 'Gourmet Chocolate Bar'
    assert result['top_products'][0]['quantity'] == 5

    assert [entry['id'] for entry in result['low_stock']] == ['p3', 'p7']


def test_fetch_kpis_uses_query_results(monkeypatch):
    kpi_df = pd.DataFrame(
        [
            {
                'total_products': 4,
                'stock_units': 52,
                'inventory_purchase_value': 120.0,
                'inventory_sale_value': 320.0,
            }
        ]
    )
    monkeypatch.setattr(dashboard, 'query_df', lambda sql, params=None: kpi_df.copy())

    result = dashboard.fetch_kpis()

    assert result['total_products'] == 4
    assert result['inventory_sale_value'] == 320.0


def test_seed_is_skipped_when_catalog_not_empty(make_product):
    make_product('X')

    assert seed_demo_data() is False
