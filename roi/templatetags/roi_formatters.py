"""Custom template filters for formatting report metrics consistently."""

from django import template

register = template.Library()


@register.filter(name="metric")
def format_metric(value):
    """Format a metric the way it was entered, dropping a trailing '.0'."""
    if value is None:
        return "—"

    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@register.filter(name="percentage")
def format_percentage(value):
    """Format a 0-100 rate as '40%' or '42.5%'."""
    if value is None:
        return "—"
    return f"{format_metric(value)}%"
