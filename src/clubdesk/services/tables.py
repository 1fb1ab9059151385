"""Floor operations — waitlist seating, table sessions, rake entry."""

from datetime import date
from typing import Any, Optional

from clubdesk.cache import keys
from clubdesk.services.base import ClubService
from clubdesk.services.guards import require, require_positive
from clubdesk.services.mutation import MutationResult


def rake_stats(collections: list[dict[str, Any]]) -> dict[str, float]:
    """Totals shown above the rake history: entries, collected, average per table."""
    total = sum(float(c.get("totalRakeAmount") or 0) for c in collections)
    tables = {c.get("tableNumber") for c in collections}
    return {
        "totalEntries": len(collections),
        "totalCollected": round(total, 2),
        "avgPerTable": round(total / len(tables), 2) if tables else 0,
    }


class TableService(ClubService):
    def _floor_keys(self, variables: dict) -> list[tuple]:
        return [
            (keys.WAITLIST, variables["club_id"]),
            (keys.TABLES, variables["club_id"]),
        ]

    # ─── Waitlist ─────────────────────────────────────────

    async def seat_player(self, entry_id: str, table_number: int) -> MutationResult:
        seated_by = self.session_store.session.user_id

        async def fn(club_id, entry_id, table_number):
            return await self.api.waitlist.seat_player(
                club_id, entry_id, int(table_number), seated_by
            )

        return await self._mutate(
            "waitlist.seat", fn,
            guard=lambda table_number=None, **_: require_positive(
                table_number, "Please select a table"
            ),
            invalidates=self._floor_keys,
            success="Player seated successfully",
            fallback="Failed to seat player",
            entry_id=entry_id, table_number=table_number,
        )

    async def cancel_entry(self, entry_id: str) -> MutationResult:
        async def fn(club_id, entry_id):
            return await self.api.waitlist.cancel_entry(club_id, entry_id)

        return await self._mutate(
            "waitlist.cancel", fn,
            invalidates=lambda v: [(keys.WAITLIST, v["club_id"])],
            success="Waitlist entry cancelled",
            fallback="Failed to cancel waitlist entry",
            entry_id=entry_id,
        )

    # ─── Table sessions ───────────────────────────────────

    async def _session_action(self, action: str, table_id: str, success: str) -> MutationResult:
        async def fn(club_id, table_id):
            call = getattr(self.api.tables, f"{action}_session")
            return await call(club_id, table_id)

        return await self._mutate(
            f"table.{action}", fn,
            invalidates=lambda v: [
                (keys.TABLES, v["club_id"]),
                (keys.SEATED_PLAYERS, v["club_id"]),
            ],
            success=success,
            fallback=f"Failed to {action} table session",
            table_id=table_id,
        )

    async def pause_session(self, table_id: str) -> MutationResult:
        return await self._session_action("pause", table_id, "Table session paused")

    async def resume_session(self, table_id: str) -> MutationResult:
        return await self._session_action("resume", table_id, "Table session resumed")

    async def end_session(self, table_id: str) -> MutationResult:
        return await self._session_action("end", table_id, "Table session ended")

    # ─── Rake ─────────────────────────────────────────────

    async def record_rake(
        self,
        table_id: str,
        total_rake_amount: float,
        *,
        session_date: Optional[date] = None,
        chip_denomination: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> MutationResult:
        def guard(table_id=None, total_rake_amount=None, **_):
            require(table_id, "Please select a table")
            require_positive(total_rake_amount, "Please enter a valid rake amount")

        async def fn(club_id, table_id, total_rake_amount):
            payload = {
                "tableId": table_id,
                "sessionDate": (session_date or date.today()).isoformat(),
                "chipDenomination": chip_denomination,
                "totalRakeAmount": float(total_rake_amount),
                "notes": notes,
            }
            return await self.api.rake.create_collection(
                club_id, {k: v for k, v in payload.items() if v is not None}
            )

        return await self._mutate(
            "rake.record", fn,
            guard=guard,
            invalidates=lambda v: [
                (keys.RAKE_COLLECTIONS, v["club_id"]),
                (keys.RAKE_COLLECTION_STATS, v["club_id"]),
            ],
            success="Rake collection saved successfully!",
            fallback="Failed to save rake collection",
            table_id=table_id, total_rake_amount=total_rake_amount,
        )
