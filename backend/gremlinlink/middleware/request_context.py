from flask import g, request

from gremlinlink.renderers import RenderContext


def client_ip():
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return request.headers.get("X-Real-IP") or request.remote_addr


def client_country():
    country = (request.headers.get("CF-IPCountry") or "").strip().upper()
    # XX means unknown
    if len(country) == 2 and country.isalpha() and country != "XX":
        return country
    return None


def request_context_middleware(app):
    """Captures the caller details that click analytics records for each request."""

    @app.before_request
    def capture_render_context():
        g.render_context = RenderContext(
            user_agent=request.headers.get("User-Agent"),
            referrer=request.headers.get("Referer"),
            ip_address=client_ip(),
            country=client_country(),
        )
