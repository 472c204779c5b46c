"""Koleksiyon olayları - başarılı yazmalardan sonra tam snapshot yayını.

Adapter her başarılı değişiklikten sonra koleksiyonun tamamını yeniden okur ve
abonelere "koleksiyon değişti" olayı gönderir. Aboneler artımlı birleştirme
yapmaz, listeyi olduğu gibi değiştirir.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional, Sequence

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    INVENTORY_REPLACED = "inventory_replaced"
    CATALOG_REPLACED = "catalog_replaced"


@dataclass
class CollectionEvent:
    event_id: str
    event_type: EventType
    payload: tuple[Any, ...]
    pharmacy_id: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.utcnow().isoformat())


class EventBus:
    """Basit senkron yayın/abone sistemi."""

    def __init__(self) -> None:
        self._handlers: dict[EventType, list[Callable[[CollectionEvent], None]]] = {}
        self._event_log: list[CollectionEvent] = []

    def subscribe(
        self, event_type: EventType, handler: Callable[[CollectionEvent], None]
    ) -> None:
        """Bir olay tipi için handler kaydeder."""
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(
        self, event_type: EventType, handler: Callable[[CollectionEvent], None]
    ) -> bool:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def publish(
        self,
        event_type: EventType,
        payload: Sequence[Any],
        pharmacy_id: Optional[str] = None,
    ) -> CollectionEvent:
        """Olayı tüm abonelere sırayla iletir.

        Bir handler hata verirse loglanır, diğer handler'lar yine çağrılır.
        """
        event = CollectionEvent(
            event_id=str(uuid.uuid4()),
            event_type=event_type,
            payload=tuple(payload),
            pharmacy_id=pharmacy_id,
        )
        self._event_log.append(event)
        logger.info(
            "Olay yayınlandı: %s (%d kayıt)", event_type.value, len(event.payload)
        )

        for handler in list(self._handlers.get(event_type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error("Olay handler hatası [%s]: %s", event_type.value, e)

        return event

    def get_event_log(self) -> list[CollectionEvent]:
        return list(self._event_log)
