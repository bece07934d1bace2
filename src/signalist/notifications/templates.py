"""Email templates rendered by literal placeholder substitution."""

import html
from datetime import date
from typing import Iterable, Mapping, Optional

from ..market.models import NewsArticle

DEFAULT_WELCOME_INTRO = (
    "Thanks for joining Signalist. You now have the tools to track markets "
    "and make smarter moves."
)

_LAYOUT = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="UTF-8"><title>Signalist</title></head>
<body style="margin:0;padding:0;background-color:#050505;font-family:Arial,Helvetica,sans-serif;">
<table width="100%" cellpadding="0" cellspacing="0" role="presentation">
<tr><td align="center" style="padding:32px 16px;">
<table width="600" cellpadding="0" cellspacing="0" role="presentation" style="background-color:#141414;border-radius:8px;">
<tr><td style="padding:32px;color:#CCDADC;font-size:16px;line-height:1.6;">
<p style="margin:0 0 24px 0;color:#FDD458;font-size:20px;font-weight:bold;">Signalist</p>
{{body}}
<p style="margin:32px 0 0 0;color:#9CA3AF;font-size:12px;">Signalist market alerts. You receive this email because you have a Signalist account.</p>
</td></tr>
</table>
</td></tr>
</table>
</body>
</html>"""


def _page(body: str) -> str:
    return _LAYOUT.replace("{{body}}", body)


WELCOME_EMAIL_TEMPLATE = _page(
    """<h1 style="margin:0 0 16px 0;color:#FFFFFF;font-size:24px;">Welcome aboard {{name}}</h1>
<p style="margin:0 0 16px 0;">{{intro}}</p>
<p style="margin:0 0 8px 0;">Here is what you can do right now:</p>
<ul style="margin:0 0 24px 0;padding-left:20px;">
<li>Set up your watchlist to follow your favorite stocks.</li>
<li>Create price and volume alerts so you never miss a move.</li>
<li>Explore the dashboard for trends and the latest market news.</li>
</ul>
<a href="{{dashboardUrl}}" style="display:inline-block;padding:12px 24px;background-color:#FDD458;color:#000000;text-decoration:none;border-radius:6px;font-weight:bold;">Go to Dashboard</a>"""
)

NEWS_SUMMARY_EMAIL_TEMPLATE = _page(
    """<h1 style="margin:0 0 8px 0;color:#FFFFFF;font-size:24px;">Market News Summary Today</h1>
<p style="margin:0 0 24px 0;color:#9CA3AF;font-size:14px;">{{date}}</p>
{{newsContent}}"""
)

INACTIVE_USER_REMINDER_EMAIL_TEMPLATE = _page(
    """<h1 style="margin:0 0 16px 0;color:#FFFFFF;font-size:24px;">We Miss You, {{name}}!</h1>
<p style="margin:0 0 16px 0;">We noticed you haven't visited Signalist in a while. The markets have been moving, and there might be some opportunities you don't want to miss!</p>
<p style="margin:0 0 24px 0;">Your watchlists and alerts are still active and ready to help you stay on top of your investments.</p>
<a href="{{dashboardUrl}}" style="display:inline-block;padding:12px 24px;background-color:#FDD458;color:#000000;text-decoration:none;border-radius:6px;font-weight:bold;">Return to Dashboard</a>
<p style="margin:24px 0 0 0;font-size:12px;"><a href="{{dashboardUrl}}" style="color:#9CA3AF;">Visit Signalist</a> &middot; <a href="{{unsubscribeUrl}}" style="color:#9CA3AF;">Unsubscribe</a></p>"""
)

_ALERT_BODY = """<h1 style="margin:0 0 16px 0;color:#FFFFFF;font-size:24px;">{{heading}}</h1>
<p style="margin:0 0 8px 0;color:#9CA3AF;font-size:14px;">{{timestamp}}</p>
<table width="100%" cellpadding="0" cellspacing="0" role="presentation" style="margin:16px 0 24px 0;background-color:#212328;border-radius:8px;">
<tr><td style="padding:20px;">
<p style="margin:0 0 4px 0;color:#FFFFFF;font-size:20px;font-weight:bold;">{{symbol}}</p>
<p style="margin:0 0 16px 0;color:#9CA3AF;">{{company}}</p>
<p style="margin:0 0 4px 0;">Current Price: <strong style="color:{{accent}};">{{currentPrice}}</strong></p>
<p style="margin:0;">{{thresholdLabel}}: <strong>{{targetPrice}}</strong></p>
</td></tr>
</table>
<p style="margin:0 0 24px 0;">{{message}}</p>
<a href="{{dashboardUrl}}" style="display:inline-block;padding:12px 24px;background-color:#FDD458;color:#000000;text-decoration:none;border-radius:6px;font-weight:bold;">View Dashboard</a>"""

STOCK_ALERT_UPPER_EMAIL_TEMPLATE = _page(
    _ALERT_BODY.replace("{{heading}}", "Price Above Reached")
    .replace("{{accent}}", "#0FEDBE")
    .replace("{{thresholdLabel}}", "Alert Threshold (above)")
    .replace(
        "{{message}}",
        "{{symbol}} has risen above your target price. "
        "This might be a good time to review your position.",
    )
)

STOCK_ALERT_LOWER_EMAIL_TEMPLATE = _page(
    _ALERT_BODY.replace("{{heading}}", "Price Below Reached")
    .replace("{{accent}}", "#FF495B")
    .replace("{{thresholdLabel}}", "Alert Threshold (below)")
    .replace(
        "{{message}}",
        "{{symbol}} has dropped below your target price. "
        "This might be a good time to buy.",
    )
)


def render_template(template: str, values: Mapping[str, object]) -> str:
    """Replace every ``{{key}}`` occurrence with its value, literally."""
    rendered = template
    for key, value in values.items():
        rendered = rendered.replace("{{" + key + "}}", "" if value is None else str(value))
    return rendered


def format_email_date(day: date) -> str:
    """Format a date for email subjects, e.g. 'Monday, October 19, 2026'."""
    return f"{day.strftime('%A, %B')} {day.day}, {day.year}"


def build_welcome_intro(
    country: Optional[str] = None,
    investment_goals: Optional[str] = None,
    risk_tolerance: Optional[str] = None,
    preferred_industry: Optional[str] = None,
) -> str:
    """Build the welcome intro paragraph from the sign-up profile."""
    if not investment_goals and not preferred_industry:
        return DEFAULT_WELCOME_INTRO

    focus = []
    if investment_goals:
        focus.append(f"<strong>{html.escape(investment_goals.lower())}</strong> goals")
    if preferred_industry:
        focus.append(f"the <strong>{html.escape(preferred_industry)}</strong> sector")

    intro = (
        "Thanks for joining Signalist! With your focus on "
        + " and ".join(focus)
        + ", you now have the tools to track the markets that matter to you"
    )
    if risk_tolerance:
        intro += f" at a {html.escape(risk_tolerance.lower())} level of risk"
    return intro + "."


def render_news_content(articles: Iterable[NewsArticle]) -> str:
    """Render news articles to the HTML fragment used in the digest."""
    blocks = []
    for article in articles:
        headline = html.escape(article.headline)
        summary = html.escape(article.summary) if article.summary else ""
        source = html.escape(article.source) if article.source else ""
        block = (
            '<div style="margin:0 0 20px 0;padding:16px;background-color:#212328;border-radius:8px;">'
            f'<p style="margin:0 0 8px 0;color:#FFFFFF;font-size:16px;font-weight:bold;">{headline}</p>'
        )
        if summary:
            block += f'<p style="margin:0 0 8px 0;">{summary}</p>'
        if source:
            block += f'<p style="margin:0 0 8px 0;color:#9CA3AF;font-size:12px;">{source}</p>'
        if article.url:
            block += (
                f'<a href="{html.escape(article.url, quote=True)}" '
                'style="color:#FDD458;">Read Full Story</a>'
            )
        blocks.append(block + "</div>")

    if not blocks:
        return '<p style="margin:0;">No market news.</p>'
    return "\n".join(blocks)
