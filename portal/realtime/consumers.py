import json

from channels.generic.websocket import AsyncWebsocketConsumer

from portal.services.notifications import user_group


class NotificationsConsumer(AsyncWebsocketConsumer):
    """Push a user's new notifications to their open dashboard tabs."""

    group = None

    async def connect(self):
        user = self.scope.get("user")
        if not (user and user.is_authenticated):
            await self.close(code=4401)
            return
        self.group = user_group(user.id)
        await self.channel_layer.group_add(self.group, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        if self.group:
            await self.channel_layer.group_discard(self.group, self.channel_name)

    async def notification_created(self, event):
        # event: {"type": "notification.created", "notification": {...}}
        await self.send(json.dumps({"type": "notification", "data": event["notification"]}))
