import re

COMPACT_UNITS = ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K"), (1, ""))


def humanize_key(key):
    """netProfit -> Net Profit, debt_to_equity -> Debt To Equity."""
    spaced = re.sub(r"(?<=[a-z0-9])([A-Z])", r" \1", key).replace("_", " ")
    return " ".join(word[:1].upper() + word[1:] for word in spaced.split())


def _compact_digits(scaled):
    digits = f"{scaled:.1f}" if scaled < 10 else f"{scaled:.0f}"
    if "." in digits:
        digits = digits.rstrip("0").rstrip(".")
    return digits


def format_compact_currency(value):
    sign = "-" if value < 0 else ""
    amount = abs(value)

    index = next(
        (i for i, (threshold, _) in enumerate(COMPACT_UNITS) if amount >= threshold),
        len(COMPACT_UNITS) - 1,
    )
    threshold, suffix = COMPACT_UNITS[index]
    digits = _compact_digits(amount / threshold)

    # 999_950 rounds to "1000K"; carry into the next unit
    if index > 0 and float(digits) >= 1000:
        threshold, suffix = COMPACT_UNITS[index - 1]
        digits = _compact_digits(amount / threshold)

    return f"{sign}${digits}{suffix}"
