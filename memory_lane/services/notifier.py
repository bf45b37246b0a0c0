"""Partner notifications — "a new memory has been posted!".

Notification is a side channel: failures are logged and never affect the
request that created the memory.
"""

from __future__ import annotations

import logging

from memory_lane.domain.memory import Memory
from memory_lane.services.connection_manager import ConnectionManager
from memory_lane.store.partner_store import PartnerStore

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "A new memory has been posted!"


class PartnerNotifier:
    def __init__(self, partners: PartnerStore, connections: ConnectionManager) -> None:
        self._partners = partners
        self._connections = connections

    async def memory_created(self, memory: Memory, message: str = DEFAULT_MESSAGE) -> bool:
        """Push a memory_created event to the author's partner.  True if delivered."""
        partner_id = await self._partners.partner_id_of(memory.author_id)
        if partner_id is None:
            return False

        author = await self._partners.get_profile(memory.author_id)
        from_name = (author.display_name or author.email) if author else memory.author_id
        delivered = await self._connections.send_to(partner_id, {
            "event": "memory_created",
            "memory_id": memory.id,
            "date": memory.date,
            "title": memory.title,
            "from_name": from_name,
            "message": message,
        })
        if delivered:
            logger.info("Notified partner %s of memory %s", partner_id, memory.id)
        else:
            logger.debug("Partner %s not connected; memory %s notification skipped", partner_id, memory.id)
        return delivered > 0
