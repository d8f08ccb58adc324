# upstox_client/instruments.py
import io
import logging
from typing import Any, Dict, Optional

import pandas as pd

logger = logging.getLogger("upstox_client.instruments")
logger.setLevel(logging.INFO)

INSTRUMENT_COLUMNS = [
    "exchange", "token", "symbol", "name", "closing_price", "expiry",
    "strike_price", "tick_size", "lot_size", "instrument_type", "isin",
]
NUMERIC_COLUMNS = ["closing_price", "strike_price", "tick_size", "lot_size"]


def _empty() -> pd.DataFrame:
    return pd.DataFrame(columns=INSTRUMENT_COLUMNS)


def parse_instruments(body: Any) -> pd.DataFrame:
    """
    Instrument master comes back as CSV text (with header row) or, on some
    exchanges, as JSON rows. Column names are lower-cased; prices and lot
    sizes are coerced to numbers.
    """
    if body is None:
        return _empty()
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        if not body.strip():
            return _empty()
        df = pd.read_csv(io.StringIO(body), dtype=str)
    else:
        rows = body.get("data", []) if isinstance(body, dict) else body
        if not rows:
            return _empty()
        df = pd.DataFrame(rows)

    df.columns = [str(c).strip().lower() for c in df.columns]
    for c in [c for c in NUMERIC_COLUMNS if c in df.columns]:
        df[c] = pd.to_numeric(df[c], errors="coerce")
    if "symbol" in df.columns:
        df["symbol"] = df["symbol"].astype(str).str.strip()
    logger.debug("Parsed %d instruments", len(df))
    return df.reset_index(drop=True)


def find_instrument(df: pd.DataFrame, symbol: str, exchange: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Case-insensitive symbol lookup; returns the first matching row as a dict."""
    if df is None or df.empty or "symbol" not in df.columns:
        return None
    mask = df["symbol"].astype(str).str.upper() == symbol.upper()
    if exchange and "exchange" in df.columns:
        mask &= df["exchange"].astype(str).str.upper() == exchange.upper()
    hits = df[mask]
    if hits.empty:
        return None
    return hits.iloc[0].to_dict()
