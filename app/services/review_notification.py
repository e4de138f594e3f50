"""Rendering of the admin "new review" email.

Every value taken from the review is HTML-escaped before it is placed in the
document; the rating only ever contributes digits and star glyphs.
"""

from __future__ import annotations

import html
import re

from app.schemas.review import ReviewRecord

MAX_STARS = 5
FILLED_STAR = "★"
EMPTY_STAR = "☆"

_WHITESPACE = re.compile(r"\s+")


def escape_html(text: str) -> str:
    """Escape ``& < > " '`` so user text renders as literal characters."""
    return html.escape(text, quote=True)


def render_stars(rating: int) -> str:
    """Star indicator, e.g. ``★★★☆☆`` for 3 (clamped to 0..5)."""
    filled = max(0, min(MAX_STARS, rating))
    return FILLED_STAR * filled + EMPTY_STAR * (MAX_STARS - filled)


def build_subject(review: ReviewRecord) -> str:
    # Subjects are headers: collapse newlines so names cannot inject lines
    name = _WHITESPACE.sub(" ", review.customer_name).strip()
    return f"⭐ New {review.rating}-Star Review from {name}"


def build_review_email(review: ReviewRecord, *, admin_panel_url: str) -> str:
    """Build the HTML body sent to admins for a freshly submitted review.

    Args:
        review: Review as re-read from storage.
        admin_panel_url: Link to the moderation page.

    Returns:
        Complete HTML document.
    """
    safe_name = escape_html(review.customer_name)
    safe_text = escape_html(review.review_text)
    safe_panel_url = escape_html(admin_panel_url)
    stars = render_stars(review.rating)

    order_line = ""
    if review.order_id:
        order_line = (
            '<p style="margin: 0 0 15px; font-size: 14px; color: #6b7280;">'
            f"<strong>Order ID:</strong> {escape_html(review.order_id)}</p>"
        )

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>New Review Submitted</title>
</head>
<body style="font-family: -apple-system, 'Segoe UI', Roboto, Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); padding: 30px; border-radius: 10px 10px 0 0; text-align: center;">
    <h1 style="color: white; margin: 0; font-size: 24px;">New Review Submitted!</h1>
  </div>
  <div style="background: #f9fafb; padding: 30px; border: 1px solid #e5e7eb; border-top: none; border-radius: 0 0 10px 10px;">
    <div style="background: white; padding: 20px; border-radius: 8px;">
      <p style="margin: 0 0 15px; font-size: 16px;"><strong>Customer:</strong> {safe_name}</p>
      <p style="margin: 0 0 15px; font-size: 16px;"><strong>Rating:</strong> <span style="color: #f59e0b; font-size: 20px;">{stars}</span> ({review.rating}/{MAX_STARS})</p>
      {order_line}
      <div style="background: #f3f4f6; padding: 15px; border-radius: 6px; margin-top: 15px;">
        <p style="margin: 0 0 5px; font-weight: bold; color: #374151;">Review:</p>
        <p style="margin: 0; color: #4b5563; font-style: italic;">&quot;{safe_text}&quot;</p>
      </div>
    </div>
    <div style="margin-top: 25px; text-align: center;">
      <p style="color: #6b7280; font-size: 14px; margin: 0 0 15px;">This review is pending approval. Please log in to the admin panel to approve or reject it.</p>
      <a href="{safe_panel_url}" style="display: inline-block; background: #667eea; color: white; padding: 12px 30px; border-radius: 6px; text-decoration: none; font-weight: bold;">Go to Admin Panel</a>
    </div>
  </div>
  <p style="text-align: center; color: #9ca3af; font-size: 12px; margin-top: 20px;">This is an automated notification from Play Store Publisher.</p>
</body>
</html>
"""
