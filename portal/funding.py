"""
portal.funding: Share and funding arithmetic shown on business pages.

All inputs arrive as raw form text or backend numbers; unparseable values
count as zero rather than raising.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from portal.core.utils import format_money, parse_float, parse_int


def calculated_funding(total_shares: Any, share_value: Any) -> float:
    """``total_shares * share_value`` from raw form text; 0.0 if either is missing."""
    shares = parse_float(total_shares)
    value = parse_float(share_value)
    if shares is None or value is None:
        return 0.0
    return shares * value


def format_calculated_funding(total_shares: Any, share_value: Any) -> str:
    """The "Calculated Funding Needed" label, e.g. ``$12,500.00``; empty inputs give ``$0.00``."""
    return format_money(calculated_funding(total_shares, share_value))


def share_request_amount(requested_shares: Any, share_value: Any) -> float:
    """Cost of a share request: whole shares times the share value."""
    shares = parse_int(requested_shares)
    value = parse_float(share_value)
    if not shares or not value:
        return 0.0
    return shares * value


def minimum_investment(business: dict) -> Optional[float]:
    """Cheapest allowed request for ``business``, if it prices its shares."""
    value = parse_float(business.get("share_value"))
    if not value:
        return None
    min_shares = parse_int(business.get("minimum_shares_per_request")) or 1
    return min_shares * value


def validate_share_request(business: dict, requested_shares: Any) -> Optional[str]:
    """Return an error message if the request breaks the listing's limits."""
    shares = parse_int(requested_shares)
    if not shares:
        return "Please enter the number of shares"

    min_shares = parse_int(business.get("minimum_shares_per_request")) or 1
    if shares < min_shares:
        return f"Minimum shares required: {min_shares}"

    remaining = parse_int(business.get("remaining_shares")) or 0
    if shares > remaining:
        return f"Only {remaining} shares available"
    return None


def total_business_funding(businesses: Iterable[dict]) -> float:
    """Sum of ``total_shares * share_value`` across an entrepreneur's businesses."""
    return sum(calculated_funding(b.get("total_shares"), b.get("share_value")) for b in businesses)
