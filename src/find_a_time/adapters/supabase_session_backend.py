"""Supabase-backed durable storage for the session store."""

import json
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from find_a_time.domain.errors import PersistenceError
from find_a_time.services.sessions import SessionBackend


@dataclass
class SupabaseSessionBackend(SessionBackend):
    """Stores the whole session mapping as one JSON row in a key-value table."""

    client: Client
    table: str = "kv_store"
    key: str = "db-findatime-sessions"

    def load(self) -> dict[str, object] | None:
        """Return the stored mapping, if a row exists for the key."""
        response = (
            self.client.table(self.table)
            .select("key, value_json")
            .eq("key", self.key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        value = response.data[0].get("value_json")
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError as exc:
                raise PersistenceError(f"Invalid JSON under {self.key}") from exc
        if value is None:
            return None
        if not isinstance(value, dict):
            raise PersistenceError(f"Expected an object under {self.key}")
        return value

    def save(self, payload: dict[str, object]) -> None:
        """Upsert the full mapping under the store key."""
        self.client.table(self.table).upsert(
            {
                "key": self.key,
                "value_json": payload,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).execute()
