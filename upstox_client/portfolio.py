# upstox_client/portfolio.py
import logging
from typing import Any, List

import pandas as pd

logger = logging.getLogger("upstox_client.portfolio")
logger.setLevel(logging.INFO)


def _rows(body: Any) -> List[dict]:
    if isinstance(body, dict):
        data = body.get("data") or []
    else:
        data = body or []
    return [r for r in data if isinstance(r, dict)]


def _first(df: pd.DataFrame, names) -> str:
    for n in names:
        if n in df.columns:
            return n
    return ""


def holdings_frame(body: Any) -> pd.DataFrame:
    """
    Holdings payload -> DataFrame with qty, avg_price, ltp and derived
    invested / current_value / pnl where the price fields are present.
    """
    df = pd.DataFrame(_rows(body))
    if df.empty:
        return df
    qty = _first(df, ("quantity", "qty", "holding_quantity"))
    avg = _first(df, ("avg_price", "average_price", "buy_avg"))
    ltp = _first(df, ("ltp", "last_price", "close_price"))
    for src, dst in ((qty, "qty"), (avg, "avg_price"), (ltp, "ltp")):
        if src:
            df[dst] = pd.to_numeric(df[src], errors="coerce").fillna(0)
    if "qty" in df.columns and "avg_price" in df.columns:
        df["invested"] = df["qty"] * df["avg_price"]
    if "qty" in df.columns and "ltp" in df.columns:
        df["current_value"] = df["qty"] * df["ltp"]
    if "invested" in df.columns and "current_value" in df.columns:
        df["pnl"] = df["current_value"] - df["invested"]
    return df


def positions_frame(body: Any) -> pd.DataFrame:
    """Day positions payload -> DataFrame with net_qty and realized/unrealized pnl as numbers."""
    df = pd.DataFrame(_rows(body))
    if df.empty:
        return df
    net = _first(df, ("net_quantity", "net_qty", "quantity"))
    if net:
        df["net_qty"] = pd.to_numeric(df[net], errors="coerce").fillna(0)
    for c in [c for c in ("realized_profit", "unrealized_profit", "ltp", "avg_net_price") if c in df.columns]:
        df[c] = pd.to_numeric(df[c], errors="coerce")
    if "realized_profit" in df.columns or "unrealized_profit" in df.columns:
        realized = df["realized_profit"].fillna(0) if "realized_profit" in df.columns else 0
        unrealized = df["unrealized_profit"].fillna(0) if "unrealized_profit" in df.columns else 0
        df["pnl"] = realized + unrealized
    return df
