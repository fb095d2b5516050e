from datetime import date

import pytest

from app import UNLABELED_ITEM, format_inr, items_display_frame, trend_figure
from model import ItemTally, TimeBucket


@pytest.mark.parametrize(
    "amount, expected",
    [
        (0, "₹0"),
        (999, "₹999"),
        (1107, "₹1,107"),
        (1234567.891, "₹12,34,567.89"),
        (100000.5, "₹1,00,000.5"),
        (-2500.25, "-₹2,500.25"),
        (-0.001, "₹0"),
    ],
)
def test_format_inr(amount, expected):
    assert format_inr(amount) == expected


def test_trend_figure_has_range_slider_and_date_hover():
    series = [
        TimeBucket(start=date(2024, 3, 1), total_profit=60.0, net_revenue=315.0),
        TimeBucket(start=date(2024, 3, 4), total_profit=75.0, net_revenue=342.0),
    ]
    fig = trend_figure(series)

    assert fig.layout.xaxis.rangeslider.visible is True
    assert [t.name for t in fig.data] == ["Profit", "Net Revenue"]
    for trace in fig.data:
        assert "%{x|%b %d, %Y}" in trace.hovertemplate
        assert trace.name in trace.hovertemplate
        assert "variable" not in trace.hovertemplate


def test_items_display_frame_names_blank_and_missing_labels():
    items = [
        ItemTally(name="Widget", value=8),
        ItemTally(name="", value=5),
        ItemTally(name=None, value=3),
    ]
    df = items_display_frame(items)

    assert df["name"].tolist() == ["Widget", UNLABELED_ITEM, UNLABELED_ITEM]
    assert df["value"].tolist() == [8, 5, 3]
