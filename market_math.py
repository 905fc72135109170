import logging
import math
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

from models import CompanyRecord, InvestmentPoint

logger = logging.getLogger(__name__)

# ============================================================
# FIELD PARSING
# ============================================================

def parse_number(text, default=0.0):
    """
    Parse a decimal string ("4,567.89", "$12", "-3.5%") into a float.

    Thousands separators, a leading "$" and a trailing "%" are ignored; the
    value is NOT rescaled. Blank, unparseable or non-finite input returns
    `default`.
    """
    if text is None:
        return default
    if isinstance(text, (int, float)):
        value = float(text)
        return value if math.isfinite(value) else default

    cleaned = str(text).strip().replace(",", "").lstrip("$").rstrip("%").strip()
    if not cleaned:
        return default
    try:
        value = float(cleaned)
    except ValueError:
        return default
    return value if math.isfinite(value) else default


def parse_percent(text):
    """
    Parse a percentage string into a fraction: "12.3%" -> 0.123.
    Anything that does not parse is 0.
    """
    return parse_number(text, default=0.0) / 100.0


def parse_return(text):
    """Parse a return in percentage points. Blank or unparseable -> None."""
    return parse_number(text, default=None)


def normalize_weight(weight):
    """Weights are non-negative finite fractions; anything else becomes 0."""
    try:
        weight = float(weight)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(weight) or weight < 0:
        return 0.0
    return weight

# ============================================================
# JOIN: Companies <- Performance
# ============================================================

def build_return_lookup(rows):
    """
    Map Symbol -> raw "YTD Return" string from performance rows.
    Rows without a symbol or without a return are skipped.
    """
    lookup = {}
    for row in rows:
        symbol = (row.get("Symbol") or "").strip()
        ytd = (row.get("YTD Return") or "").strip()
        if symbol and ytd:
            lookup[symbol] = ytd
    return lookup


def join_company_returns(companies, returns):
    """
    Enrich company records with the YTD return found under the same symbol.

    `returns` maps symbol -> raw return string (see build_return_lookup).
    Unmatched symbols keep ytd_return=None.
    """
    enriched = []
    unmatched = 0
    for company in companies:
        raw = returns.get(company.symbol)
        ytd = parse_return(raw) if raw is not None else None
        if ytd is None:
            unmatched += 1
        enriched.append(CompanyRecord(
            name=company.name,
            symbol=company.symbol,
            weight=normalize_weight(company.weight),
            price=company.price,
            ytd_return=ytd,
        ))

    if unmatched:
        logger.info("%d of %d companies have no YTD return", unmatched, len(enriched))
    return enriched

# ============================================================
# SERIES PREPARATION
# ============================================================

def prepare_price_series(points, start_year=None):
    """
    Filter to `start_year` onwards, sort ascending by date and drop duplicate
    dates (the last row for a date wins). Binary-search lookups rely on this.
    """
    by_date = {}
    for p in points:
        if start_year is not None and p.date.year < start_year:
            continue
        by_date[p.date] = p
    return [by_date[d] for d in sorted(by_date)]


def prepare_history(entries, start_year=None):
    """Filter yearly performance rows to `start_year` onwards, sorted by year."""
    kept = [e for e in entries if start_year is None or e.year >= start_year]
    return sorted(kept, key=lambda e: e.year)

# ============================================================
# INVESTMENT GROWTH
# ============================================================

def round_half_up(value, places=2):
    """
    Round the exact binary value half-up to `places` decimals, matching how a
    fixed-point string conversion of the float would round it.
    """
    try:
        quantum = Decimal(1).scaleb(-places)
        return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError):
        return value


def calculate_investment_growth(entries, amount):
    """
    Compound `amount` through a year-ordered sequence of percentage returns.

        value_0 = amount
        value_i = round(value_{i-1} * (1 + return_i / 100), 2)

    Rounding happens at every step, so later values compound the rounded
    figures. value_0 sits on Jan 1 of the first year; value_i on Jan 1 of the
    year after entry i (the value once that year's return is realized).

    Returns n + 1 points for n entries, or [] when there are no entries.
    """
    entries = sorted(entries, key=lambda e: e.year)
    if not entries:
        return []

    value = round_half_up(float(amount))
    points = [InvestmentPoint(year=datetime(entries[0].year, 1, 1), value=value)]
    for entry in entries:
        value = round_half_up(value * (1 + entry.performance / 100.0))
        points.append(InvestmentPoint(year=datetime(entry.year + 1, 1, 1), value=value))
    return points


def accept_investment_amount(new_amount, previous):
    """
    Control rule for the initial-investment input: a non-negative finite
    number replaces the previous value; anything else is ignored.
    """
    if new_amount is None or isinstance(new_amount, bool):
        return previous
    try:
        value = float(new_amount)
    except (TypeError, ValueError):
        return previous
    if not math.isfinite(value) or value < 0:
        logger.warning("Ignoring invalid investment amount %r", new_amount)
        return previous
    return value

# ============================================================
# FORMATTING
# ============================================================

def format_currency(value):
    return f"${value:,.2f}"


def format_percent(fraction, places=2):
    """Fraction -> percentage text: 0.1234 -> '12.34%'."""
    return f"{fraction * 100:.{places}f}%"


def format_return(points):
    """Return in percentage points -> text; None -> 'N/A'."""
    if points is None:
        return "N/A"
    return f"{points:.2f}%"
