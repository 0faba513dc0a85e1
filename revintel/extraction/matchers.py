"""Pattern matchers for pulling numbers and names out of interview prose.

Each matcher handles one phrasing and returns None when it does not
apply, so the extractor can fall through to the next matcher and finally
to a documented default. This is best-effort text mining, not parsing.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Optional

from revintel.models.assessment import BudgetRange

from .registry import register_matcher

# A number with optional thousands separators, decimals and a "k" suffix
_AMOUNT = r"(\d[\d,]*(?:\.\d+)?)\s*([kK])?\b"
_NUMBER = r"(\d+(?:\.\d+)?)"
_RANGE = _NUMBER + r"\s*(?:(?:to|-)\s*" + _NUMBER + r")?"

WEEKS_PER_MONTH = 4.33

TEAM_MEMBER_LIMIT = 10
STACK_LIMIT = 20

ROLE_KEYWORDS = ("CEO", "CTO", "CFO", "VP", "Manager", "Director", "Head", "Lead")

# Capitalized words that start sentences rather than name people
_NON_NAME_WORDS = {
    "A", "After", "All", "Also", "An", "And", "Any", "As", "At", "Before", "But",
    "By", "Currently", "Each", "Every", "Finally", "First", "For", "From", "He",
    "If", "In", "It", "Most", "Next", "No", "Not", "Of", "On", "Once", "Only",
    "Or", "Our", "She", "So", "Some", "Sometimes", "Take", "Takes", "Then",
    "There", "They", "This", "Those", "Took", "Typically", "Usually", "We",
    "When", "While", "With", "Yes",
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
    "January", "February", "March", "April", "May", "June", "July", "August",
    "September", "October", "November", "December",
}

_PROPER_NOUN = re.compile(r"\b[A-Z][a-z]+\b")
_ROLE = re.compile(r"\b(?:" + "|".join(ROLE_KEYWORDS) + r")\b", re.IGNORECASE)
_COMPOUND_ROLE = re.compile(
    r"\b(?:Sales|Marketing|Business|Operations|Customer|Product)\s+"
    r"(?:Manager|Director|Lead|Head|VP)\b",
    re.IGNORECASE,
)


def to_amount(number: str, suffix: Optional[str] = None) -> float:
    value = float(number.replace(",", ""))
    if suffix and suffix.lower() == "k":
        value *= 1000
    return value


def _in_range(value: float, low: float, high: float) -> Optional[float]:
    return value if low <= value <= high else None


def _range_value(match: re.Match) -> float:
    first = float(match.group(1))
    second = match.group(2)
    if second:
        return (first + float(second)) / 2
    return first


# ---------------------------------------------------------------------------
# Team members and stack
# ---------------------------------------------------------------------------


def extract_team_members(process: str) -> list[str]:
    """Names and roles mentioned in the process description."""
    found: list[str] = []
    found.extend(w for w in _PROPER_NOUN.findall(process) if w not in _NON_NAME_WORDS)
    found.extend(_ROLE.findall(process))
    found.extend(_COMPOUND_ROLE.findall(process))

    unique: list[str] = []
    for name in found:
        if len(name) > 1 and name not in unique:
            unique.append(name)
    return unique[:TEAM_MEMBER_LIMIT]


def parse_stack(stack: str) -> list[str]:
    if not stack:
        return []
    parts = [s.strip() for s in re.split(r"[,;]", stack)]
    return [p for p in parts if p][:STACK_LIMIT]


# ---------------------------------------------------------------------------
# Average deal size
# ---------------------------------------------------------------------------

_DEAL_PER_UNIT = re.compile(
    r"\$?\s*" + _AMOUNT + r"\s*(?:per|/|a|each)\s*(?:deal|client|customer|project)",
    re.IGNORECASE,
)
_DEALS_WORTH = re.compile(r"deals?\s*(?:worth|of|at)\s*\$?\s*" + _AMOUNT, re.IGNORECASE)
_AMOUNT_AVERAGE = re.compile(r"\$?\s*" + _AMOUNT + r"\s*(?:on\s*)?average", re.IGNORECASE)
_AVERAGE_DEAL = re.compile(
    r"average\s*(?:deal|contract)\s*(?:size|value)?\s*(?:of|is|:)?\s*(?:about|around)?\s*\$\s*" + _AMOUNT,
    re.IGNORECASE,
)
_AMOUNT_TYPICAL = re.compile(r"\$?\s*" + _AMOUNT + r"\s*typical", re.IGNORECASE)
_MONETARY = re.compile(
    r"\$\s*" + _AMOUNT + r"|(\d[\d,]*(?:\.\d+)?)\s*([kK])\b|(\d[\d,]*(?:\.\d+)?)\s*(?:usd|dollars)\b",
    re.IGNORECASE,
)


def _average_amounts(pattern: re.Pattern, text: str) -> Optional[float]:
    values = [to_amount(m.group(1), m.group(2)) for m in pattern.finditer(text)]
    if not values:
        return None
    return sum(values) / len(values)


@register_matcher("avg_deal_size", "per_unit", priority=10, description="$X per deal/client/project")
def deal_size_per_unit(text: str) -> Optional[float]:
    return _average_amounts(_DEAL_PER_UNIT, text)


@register_matcher("avg_deal_size", "deals_worth", priority=20, description="deals worth $X")
def deal_size_deals_worth(text: str) -> Optional[float]:
    return _average_amounts(_DEALS_WORTH, text)


@register_matcher("avg_deal_size", "average", priority=30, description="$X average")
def deal_size_average(text: str) -> Optional[float]:
    value = _average_amounts(_AMOUNT_AVERAGE, text)
    if value is None:
        value = _average_amounts(_AVERAGE_DEAL, text)
    return value


@register_matcher("avg_deal_size", "typical", priority=40, description="$X typical")
def deal_size_typical(text: str) -> Optional[float]:
    return _average_amounts(_AMOUNT_TYPICAL, text)


@register_matcher("avg_deal_size", "any_money", priority=90, description="mean of monetary amounts")
def deal_size_any_money(text: str) -> Optional[float]:
    values: list[float] = []
    for m in _MONETARY.finditer(text):
        if m.group(1):
            values.append(to_amount(m.group(1), m.group(2)))
        elif m.group(3):
            values.append(to_amount(m.group(3), m.group(4)))
        else:
            values.append(to_amount(m.group(5)))
    if not values:
        return None
    return _in_range(sum(values) / len(values), 500, 500_000)


# ---------------------------------------------------------------------------
# Monthly deal count
# ---------------------------------------------------------------------------

_MONTHLY_DEALS = [
    re.compile(r"(\d+)\s*deals?\s*(?:per|/|a|each)\s*month", re.IGNORECASE),
    re.compile(r"(\d+)\s*(?:demos?|meetings?|calls?)\s*(?:per|/|a|each)\s*month", re.IGNORECASE),
    re.compile(r"(\d+)\s*new\s*(?:clients?|customers?)\s*(?:per|/|a|each)\s*month", re.IGNORECASE),
]
_WEEKLY_DEALS = [
    re.compile(r"(\d+)\s*deals?\s*(?:per|/|a|each)\s*week", re.IGNORECASE),
    re.compile(r"(\d+)\s*(?:demos?|meetings?)\s*(?:per|/|a|each)\s*week", re.IGNORECASE),
]


@register_matcher("monthly_deals", "monthly", priority=10, description="N deals per month")
def monthly_deals_monthly(text: str) -> Optional[int]:
    for pattern in _MONTHLY_DEALS:
        match = pattern.search(text)
        if match and 1 <= int(match.group(1)) <= 100:
            return int(match.group(1))
    return None


@register_matcher("monthly_deals", "weekly", priority=20, description="N deals per week x 4.33")
def monthly_deals_weekly(text: str) -> Optional[int]:
    for pattern in _WEEKLY_DEALS:
        match = pattern.search(text)
        if match:
            monthly = int(int(match.group(1)) * WEEKS_PER_MONTH + 0.5)
            if 1 <= monthly <= 400:
                return monthly
    return None


# ---------------------------------------------------------------------------
# Sales cycle (months)
# ---------------------------------------------------------------------------

_CYCLE_MONTHS = [
    re.compile(_RANGE + r"\s*months?\s*(?:sales\s*)?(?:cycle|to\s*close)", re.IGNORECASE),
    re.compile(r"takes?\s*" + _RANGE + r"\s*months?", re.IGNORECASE),
    re.compile(_RANGE + r"\s*months?\s*(?:sales\s*)?(?:process|cycle)", re.IGNORECASE),
]
_CYCLE_WEEKS = [
    re.compile(_RANGE + r"\s*weeks?\s*(?:sales\s*)?(?:cycle|to\s*close)", re.IGNORECASE),
    re.compile(r"takes?\s*" + _RANGE + r"\s*weeks?", re.IGNORECASE),
]


@register_matcher("sales_cycle_months", "months", priority=10, description="N (to M) months to close")
def sales_cycle_months(text: str) -> Optional[float]:
    for pattern in _CYCLE_MONTHS:
        match = pattern.search(text)
        if match:
            value = _in_range(_range_value(match), 0.25, 24)
            if value is not None:
                return value
    return None


@register_matcher("sales_cycle_months", "weeks", priority=20, description="N weeks to close / 4.33")
def sales_cycle_weeks(text: str) -> Optional[float]:
    for pattern in _CYCLE_WEEKS:
        match = pattern.search(text)
        if match:
            months = round(_range_value(match) / WEEKS_PER_MONTH, 1)
            value = _in_range(months, 0.25, 12)
            if value is not None:
                return value
    return None


# ---------------------------------------------------------------------------
# Conversion rate
# ---------------------------------------------------------------------------

_CONVERSION_PERCENT = [
    re.compile(_NUMBER + r"\s*%\s*(?:conversion|close|win)(?:\s*rate)?", re.IGNORECASE),
    re.compile(r"(?:conversion|close|win)\s*rate\s*(?:of|is|:)?\s*(?:about|around)?\s*" + _NUMBER + r"\s*%", re.IGNORECASE),
    re.compile(r"convert\w*\s*(?:at\s*)?(?:about|around)?\s*" + _NUMBER + r"\s*%", re.IGNORECASE),
    re.compile(r"win\s*" + _NUMBER + r"\s*%", re.IGNORECASE),
    re.compile(r"close\s*" + _NUMBER + r"\s*%", re.IGNORECASE),
]
_CONVERSION_DECIMAL = re.compile(
    r"(?:conversion|close|win)\s*rate\s*(?:of|is|:)?\s*(0?\.\d+)\b", re.IGNORECASE
)


def _as_fraction(rate: float) -> float:
    # Anything above 1 was written as a percentage
    return rate / 100 if rate > 1 else rate


@register_matcher("conversion_rate", "percent", priority=10, description="N% conversion/close/win rate")
def conversion_rate_percent(text: str) -> Optional[float]:
    for pattern in _CONVERSION_PERCENT:
        match = pattern.search(text)
        if match:
            return _as_fraction(float(match.group(1)))
    return None


@register_matcher("conversion_rate", "decimal", priority=20, description="conversion rate of 0.N")
def conversion_rate_decimal(text: str) -> Optional[float]:
    match = _CONVERSION_DECIMAL.search(text)
    if match:
        return _as_fraction(float(match.group(1)))
    return None


# ---------------------------------------------------------------------------
# Optional company facts
# ---------------------------------------------------------------------------

_EMPLOYEES = [
    re.compile(r"(\d[\d,]*)\s*(?:employees?|people|staff|team\s*members?)", re.IGNORECASE),
    re.compile(r"(?:team|company)\s*(?:of\s*)?(\d[\d,]*)\b", re.IGNORECASE),
    re.compile(r"(\d+)[\s-]*(?:person|people)\s*(?:team|company)", re.IGNORECASE),
]


@register_matcher("employee_count", "headcount", priority=10, description="N employees / team of N")
def employee_count(text: str) -> Optional[int]:
    for pattern in _EMPLOYEES:
        match = pattern.search(text)
        if match:
            count = int(match.group(1).replace(",", ""))
            if 1 <= count <= 10_000:
                return count
    return None


_FOUNDED_YEAR = re.compile(r"(?:founded|established|started)\s*(?:in\s*)?(\d{4})", re.IGNORECASE)
_YEARS_IN_BUSINESS = re.compile(r"(\d+)\s*years?\s*(?:old|in\s*business)", re.IGNORECASE)


@register_matcher("years_founded", "founded_year", priority=10, description="founded in YYYY")
def years_since_founding(text: str) -> Optional[int]:
    match = _FOUNDED_YEAR.search(text)
    if match:
        year = int(match.group(1))
        current_year = date.today().year
        if 1900 < year <= current_year:
            return current_year - year
    return None


@register_matcher("years_founded", "years_in_business", priority=20, description="N years in business")
def years_in_business(text: str) -> Optional[int]:
    match = _YEARS_IN_BUSINESS.search(text)
    if match and 0 <= int(match.group(1)) <= 100:
        return int(match.group(1))
    return None


_BASED_IN = re.compile(r"(?:[Bb]ased|[Ll]ocated|[Hh]eadquartered)\s+in\s+([A-Z][a-zA-Z ]+?)(?=[.,;]|$)")
_CITY_STATE = re.compile(r"\b([A-Z][a-zA-Z]+,\s*[A-Z]{2})\b")


@register_matcher("location", "based_in", priority=10, description="based in X")
def location_based_in(text: str) -> Optional[str]:
    match = _BASED_IN.search(text)
    return match.group(1).strip() if match else None


@register_matcher("location", "city_state", priority=20, description="City, ST")
def location_city_state(text: str) -> Optional[str]:
    match = _CITY_STATE.search(text)
    return match.group(1).strip() if match else None


# ---------------------------------------------------------------------------
# Budget range
# ---------------------------------------------------------------------------

BUDGET_LEVELS: dict[str, BudgetRange] = {
    "minimal": BudgetRange(0, 500),
    "low": BudgetRange(500, 2_000),
    "quick win": BudgetRange(500, 5_000),
    "moderate": BudgetRange(2_000, 10_000),
    "significant": BudgetRange(10_000, 50_000),
    "transformation": BudgetRange(25_000, 100_000),
    "enterprise": BudgetRange(50_000, 500_000),
    "unlimited": BudgetRange(100_000, 1_000_000),
}

_BUDGET_AMOUNT = re.compile(r"\$?\s*" + _AMOUNT)


@register_matcher("budget_range", "level_keyword", priority=10, description="named investment level")
def budget_from_level(text: str) -> Optional[BudgetRange]:
    lower = text.lower()
    for keyword, budget in BUDGET_LEVELS.items():
        if keyword in lower:
            return budget
    return None


@register_matcher("budget_range", "amounts", priority=20, description="$X or $X-$Y")
def budget_from_amounts(text: str) -> Optional[BudgetRange]:
    values = [to_amount(m.group(1), m.group(2)) for m in _BUDGET_AMOUNT.finditer(text)]
    if not values:
        return None
    if len(values) == 1:
        # A single figure is read as the ceiling
        return BudgetRange(min=float(int(values[0] * 0.5)), max=values[0])
    return BudgetRange(min=min(values), max=max(values))
