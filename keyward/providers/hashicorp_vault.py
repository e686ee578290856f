"""
HashiCorp Vault KV provider over the HTTP API.

Connection settings come from ``options`` first, then the usual Vault
environment variables::

    VAULT_ADDR        (default https://127.0.0.1:8200)
    VAULT_TOKEN       required
    VAULT_NAMESPACE   optional, enterprise namespaces

Both KV engines are understood: a v2 response nests the secret under
``data.data``, v1 returns it directly under ``data``. Paths are used as-is,
so a KV v2 mount must be addressed as ``secret/data/...``.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from keyward.errors import BackendUnavailableError, SecretNotFoundError
from keyward.models import EnvEntry, KeyPath
from keyward.providers.base import (
    OP_DELETE,
    OP_DELETE_MAPPING,
    OP_READ,
    OP_READ_MAPPING,
    OP_WRITE,
    OP_WRITE_MAPPING,
    Provider,
    ProviderMeta,
)

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "https://127.0.0.1:8200"
DEFAULT_TIMEOUT = 10.0

META = ProviderMeta(
    name="hashicorp_vault",
    description="HashiCorp Vault KV (v1 and v2)",
    authentication="VAULT_ADDR and VAULT_TOKEN (VAULT_NAMESPACE optional)",
    ops=(OP_READ, OP_READ_MAPPING, OP_WRITE, OP_WRITE_MAPPING, OP_DELETE, OP_DELETE_MAPPING),
)


class HashicorpVaultProvider(Provider):
    name = "hashicorp_vault"

    def __init__(self, client: httpx.Client):
        self.client = client

    def _request(self, method: str, kp: KeyPath, json: dict | None = None) -> httpx.Response:
        url = f"/v1/{kp.path.lstrip('/')}"
        try:
            resp = self.client.request(method, url, json=json)
        except httpx.HTTPError as e:
            raise BackendUnavailableError(
                f"vault request failed: {e}", {"path": kp.path}
            ) from e
        if resp.status_code == 404:
            raise SecretNotFoundError(f"data not found at '{kp.path}'", {"path": kp.path})
        if resp.is_error:
            raise BackendUnavailableError(
                f"vault returned HTTP {resp.status_code}",
                {"path": kp.path, "status": resp.status_code},
            )
        return resp

    def _read(self, kp: KeyPath) -> dict[str, str]:
        resp = self._request("GET", kp)
        try:
            body = resp.json()
        except ValueError as e:
            raise BackendUnavailableError("malformed vault response", {"path": kp.path}) from e

        data = body.get("data") if isinstance(body, dict) else None
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            data = data["data"]
        if not isinstance(data, dict) or not data:
            raise SecretNotFoundError(f"data not found at '{kp.path}'", {"path": kp.path})
        return {k: "" if v is None else str(v) for k, v in data.items()}

    def get(self, kp: KeyPath) -> EnvEntry:
        data = self._read(kp)
        key = kp.effective_key
        if key not in data:
            return kp.missing()
        return kp.found(data[key])

    def get_mapping(self, kp: KeyPath) -> list[EnvEntry]:
        data = self._read(kp)
        return [kp.found_with_key(k, data[k]) for k in sorted(data)]

    def put(self, kp: KeyPath, value: str) -> None:
        self.put_mapping(kp, {kp.effective_key: value})

    def put_mapping(self, kp: KeyPath, values: dict[str, str]) -> None:
        self._request("POST", kp, json={"data": values})
        logger.debug("Wrote %d keys to vault path %s", len(values), kp.path)

    def delete(self, kp: KeyPath) -> None:
        self._request("DELETE", kp)

    def delete_mapping(self, kp: KeyPath) -> None:
        self._request("DELETE", kp)


def create(options: dict[str, Any]) -> HashicorpVaultProvider:
    address = options.get("address") or os.environ.get("VAULT_ADDR") or DEFAULT_ADDRESS
    token = options.get("token") or os.environ.get("VAULT_TOKEN")
    if not token:
        raise BackendUnavailableError("VAULT_TOKEN is not set")

    headers = {"X-Vault-Token": token}
    namespace = options.get("namespace") or os.environ.get("VAULT_NAMESPACE")
    if namespace:
        headers["X-Vault-Namespace"] = namespace

    client = httpx.Client(
        base_url=address.rstrip("/"),
        headers=headers,
        timeout=float(options.get("timeout", DEFAULT_TIMEOUT)),
        transport=options.get("transport"),
    )
    return HashicorpVaultProvider(client)
