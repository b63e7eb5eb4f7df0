"""Route the agent's model providers through the Surgent AI gateway."""

from __future__ import annotations

import copy
from typing import Any

PROVIDERS = ("anthropic", "openai", "google", "vercel", "xai", "zai-org", "moonshotai")


def apply_provider_overrides(
    config: dict[str, Any],
    base_url: str | None,
    api_key: str | None = None,
) -> dict[str, Any]:
    """Return a copy of ``config`` with every known provider pointed at the gateway.

    Existing provider entries and options are kept; only ``apiKey`` and
    ``baseURL`` are overwritten:

        provider.anthropic.options.baseURL = <base_url>/anthropic

    Without a base URL the config comes back unchanged.
    """
    result = copy.deepcopy(config)
    if not base_url:
        return result

    base = base_url.rstrip("/")
    providers = result.get("provider") or {}
    result["provider"] = providers
    for provider_id in PROVIDERS:
        entry = dict(providers.get(provider_id) or {})
        entry["options"] = {
            **(entry.get("options") or {}),
            "apiKey": api_key,
            "baseURL": f"{base}/{provider_id}",
        }
        providers[provider_id] = entry
    return result
