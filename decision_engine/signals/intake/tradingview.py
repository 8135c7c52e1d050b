"""
TradingView alert adapter.

Converts the JSON body of a TradingView alert into an intake payload.
"""
from typing import Any, Dict, Mapping

from decision_engine.models.signal import SignalSource

TRADINGVIEW_CONFIDENCE = 0.8
DEFAULT_ACTION = "buy"


def parse_tradingview_alert(alert_data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Map a TradingView alert onto the inbound signal shape.

    Recognised keys: ``ticker`` or ``symbol``, ``strategy.order.action``,
    ``strategy.order.price`` or ``close``, plus ``indicator``, ``interval``
    and ``exchange`` which are kept as metadata. A missing order action
    defaults to buy; a ``strategy`` or ``order`` that is not an object is
    ignored.
    """
    strategy = alert_data.get("strategy")
    order = strategy.get("order") if isinstance(strategy, Mapping) else None
    if not isinstance(order, Mapping):
        order = {}

    action = order.get("action")
    price = order.get("price")
    if price is None:
        price = alert_data.get("close")

    return {
        "source": SignalSource.TRADINGVIEW.value,
        "symbol": alert_data.get("ticker") or alert_data.get("symbol"),
        "action": str(action).lower() if action else DEFAULT_ACTION,
        "price": price,
        "confidence": TRADINGVIEW_CONFIDENCE,
        "metadata": {
            "indicator": alert_data.get("indicator"),
            "timeframe": alert_data.get("interval"),
            "exchange": alert_data.get("exchange"),
        },
    }
