"""Helpers for building PostgREST filter expressions."""


def quote_value(value: str) -> str:
    """Quote a filter value so commas, dots and parentheses are literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def ilike_substring(query: str) -> str:
    """Return a quoted ``ilike`` pattern matching ``query`` as a literal substring."""
    literal = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return quote_value(f"*{literal}*")


def name_or_brand_match(query: str, name_column: str, brand_column: str) -> str:
    """Return an ``or`` body matching the query in either column."""
    pattern = ilike_substring(query)
    return f"{name_column}.ilike.{pattern},{brand_column}.ilike.{pattern}"
