"""OpenAPI metadata and customization utilities.

Adds to the generated schema:
- Bearer (Supabase session JWT) security scheme on the notification endpoint
- Tags metadata
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

_BEARER_PATH_SUFFIXES = ("/notifications/review",)


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tags and security."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        components = schema.setdefault("components", {})
        security_schemes = components.setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "SessionBearer",
            {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
                "description": "Supabase session access token of the signed-in customer.",
            },
        )

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        desired_tags = [
            {"name": "Notifications", "description": "Admin notifications for new reviews."},
            {"name": "Captcha", "description": "reCAPTCHA v3 token verification."},
            {"name": "Health", "description": "Liveness and readiness checks."},
        ]
        for tag in desired_tags:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        # Only the notification endpoint requires a session token
        for path, methods in schema.get("paths", {}).items():
            if path.endswith(_BEARER_PATH_SUFFIXES):
                for method_obj in methods.values():
                    if isinstance(method_obj, dict):
                        method_obj["security"] = [{"SessionBearer": []}]

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
