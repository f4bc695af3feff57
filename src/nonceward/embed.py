"""Put nonces where a browser will send them back: URLs and HTML forms."""

from __future__ import annotations

from html import escape
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from nonceward.service import NonceService, get_nonce_service
from nonceward.tokens import DEFAULT_ACTION, Action, Identity

__all__ = ["REFERER_FIELD", "nonce_url", "nonce_field", "referer_field"]

REFERER_FIELD = "_nonce_http_referer"


def _resolve(service: NonceService | None, name: str | None) -> tuple[NonceService, str]:
    service = service or get_nonce_service()
    return service, name or service.settings.query_arg


def nonce_url(
    url: str,
    action: Action = DEFAULT_ACTION,
    identity: Identity = None,
    name: str | None = None,
    service: NonceService | None = None,
) -> str:
    """Return *url* with the nonce set as query argument *name*.

    An existing argument of the same name is replaced; other arguments and
    the fragment are kept.
    """
    service, name = _resolve(service, name)
    token = service.generate_token(action, identity)

    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != name]
    query.append((name, token))
    return urlunsplit(parts._replace(query=urlencode(query)))


def referer_field(request_uri: str) -> str:
    """Hidden input carrying the URI the form was rendered from."""
    return (
        f'<input type="hidden" name="{REFERER_FIELD}" '
        f'value="{escape(request_uri, quote=True)}" />'
    )


def nonce_field(
    action: Action = DEFAULT_ACTION,
    identity: Identity = None,
    name: str | None = None,
    referer: str | None = None,
    service: NonceService | None = None,
) -> str:
    """Hidden input(s) for an HTML form.

    The referer field is opt-in: pass the current request URI as *referer*
    to append it. Without *referer* only the nonce input is rendered.
    """
    service, name = _resolve(service, name)
    token = service.generate_token(action, identity)
    name_attr = escape(name, quote=True)
    html = f'<input type="hidden" id="{name_attr}" name="{name_attr}" value="{token}" />'
    if referer is not None:
        html += referer_field(referer)
    return html
