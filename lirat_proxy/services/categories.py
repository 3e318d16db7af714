from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Tuple

from .errors import UnknownCategory

if TYPE_CHECKING:  # pragma: no cover
    from lirat_proxy.core.config import Settings

RATES_KEY = "rates"
HISTORY_KEY_PREFIX = "history_"
CITIES: Tuple[str, ...] = ("damascus", "aleppo", "idlib")


@dataclass(frozen=True)
class Category:
    """A proxied data kind: where it is cached, where it comes from, how to name it."""

    key: str
    url: str
    label: str

    @property
    def failure_message(self) -> str:
        return f"Failed to fetch {self.label}"


def history_key(city: str) -> str:
    return f"{HISTORY_KEY_PREFIX}{city.lower()}"


class CategoryResolver:
    def __init__(self, rates_url: str, history_urls: Dict[str, str]):
        unknown = set(history_urls) - set(CITIES)
        if unknown:
            raise ValueError(f"Unsupported history cities: {sorted(unknown)}")
        self._rates_url = rates_url
        self._history_urls = {c.lower(): u for c, u in history_urls.items()}

    @classmethod
    def from_settings(cls, settings: "Settings") -> "CategoryResolver":
        return cls(str(settings.rates_api_url), settings.history_urls())

    def rates(self) -> Category:
        return Category(key=RATES_KEY, url=self._rates_url, label="exchange rates")

    def history(self, city: str) -> Category:
        """Resolve a caller-supplied city, case-insensitively.

        The label keeps the city as supplied so error messages echo the caller.
        """
        url = self._history_urls.get(city.lower())
        if url is None:
            raise UnknownCategory(city)
        return Category(
            key=history_key(city), url=url, label=f"historical data for {city}"
        )
