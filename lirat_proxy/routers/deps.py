from fastapi import Request

from lirat_proxy.services.fetch_service import FetchService


def get_fetch_service(request: Request) -> FetchService:
    """The per-app FetchService built by create_app."""
    return request.app.state.fetch_service


def parse_force(value: str | None) -> bool:
    # Only the literal "true" forces a refresh; "1", "yes" etc. do not.
    return (value or "").strip().lower() == "true"
