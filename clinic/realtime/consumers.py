import json
import logging

from asgiref.sync import async_to_sync
from channels.generic.websocket import AsyncWebsocketConsumer
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)

GROUP = "updates"


class UpdatesConsumer(AsyncWebsocketConsumer):
    """Pushes entity store changes to connected clients."""

    async def connect(self):
        await self.channel_layer.group_add(GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(GROUP, self.channel_name)

    async def store_changed(self, event):
        # event: {"type": "store.changed", "kind": "...", "action": "...", "id": "..."}
        await self.send(json.dumps(event))


def broadcast_change(event):
    """Store subscriber: forward a ChangeEvent to the updates group."""
    layer = get_channel_layer()
    if layer is None:
        return
    async_to_sync(layer.group_send)(GROUP, {
        "type": "store.changed",
        "kind": event.kind,
        "action": event.action,
        "id": event.record_id,
    })
