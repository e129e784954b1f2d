"""Shared typed models for the link collection."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

PROVIDER_GEMINI = "gemini"
PROVIDER_OPENAI_COMPATIBLE = "openai-compatible"
SUPPORTED_PROVIDERS: frozenset[str] = frozenset({PROVIDER_GEMINI, PROVIDER_OPENAI_COMPATIBLE})

DEFAULT_MODELS: dict[str, str] = {
    PROVIDER_GEMINI: "gemini-2.5-flash",
    PROVIDER_OPENAI_COMPATIBLE: "gpt-3.5-turbo",
}


_LINK_KEYS: frozenset[str] = frozenset({"id", "title", "url", "categoryId", "description", "icon"})


class ProviderConfigError(ValueError):
    """Raised when a provider configuration cannot be used."""


@dataclass(frozen=True, slots=True)
class Category:
    """A named grouping of links. Read-only here."""

    id: str
    name: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Category:
        return cls(id=str(data["id"]), name=str(data.get("name") or ""))

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True, slots=True)
class LinkRecord:
    """One bookmark in the ordered collection."""

    id: str
    title: str
    url: str
    category_id: str = ""
    description: str | None = None
    icon: str | None = None
    # Store fields this package does not model (e.g. createdAt), written back untouched.
    extra: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def needs_description(self) -> bool:
        # Empty strings count as missing.
        return not self.description

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LinkRecord:
        """Build a record from the store's camelCase JSON shape."""
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            url=str(data.get("url") or ""),
            category_id=str(data.get("categoryId") or ""),
            description=data.get("description") or None,
            icon=data.get("icon") or None,
            extra={key: value for key, value in data.items() if key not in _LINK_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            **self.extra,
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "categoryId": self.category_id,
        }
        if self.description is not None:
            payload["description"] = self.description
        if self.icon is not None:
            payload["icon"] = self.icon
        return payload


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Static settings for the description-generation provider."""

    provider: str
    api_key: str
    model: str = ""
    base_url: str | None = None

    @property
    def resolved_model(self) -> str:
        return self.model or DEFAULT_MODELS.get(self.provider, "")

    def validate(self) -> None:
        """Raise ProviderConfigError if the config cannot reach a provider."""
        if self.provider not in SUPPORTED_PROVIDERS:
            raise ProviderConfigError(
                f"Unsupported provider {self.provider!r}; expected one of {sorted(SUPPORTED_PROVIDERS)}"
            )
        if not self.api_key:
            raise ProviderConfigError("An API key is required before generating descriptions")
        if self.provider == PROVIDER_OPENAI_COMPATIBLE and not self.base_url:
            raise ProviderConfigError("base_url is required for the openai-compatible provider")


@dataclass(frozen=True, slots=True)
class Progress:
    """Observable enrichment progress: items processed out of items targeted."""

    current: int = 0
    total: int = 0


class RunState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(slots=True)
class RunResult:
    """Outcome of one enrichment run."""

    state: RunState
    progress: Progress
    succeeded: int = 0
    failed: int = 0
    failures: list[tuple[str, str]] = field(default_factory=list)
