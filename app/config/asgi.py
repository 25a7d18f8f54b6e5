"""
ASGI entry point serving both HTTP and the chat WebSocket.

HTTP goes straight to Django. WebSocket connections pass through:

1. AllowedHostsOriginValidator - rejects origins outside ALLOWED_HOSTS
2. JWTAuthMiddleware - resolves the bearer token into scope["user"]
3. URLRouter - dispatches ``/ws/chat/`` to ChatConsumer

Serve ``config.asgi:application`` with any ASGI server.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

# Django must be set up before anything imports models
django_asgi_app = get_asgi_application()

from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
from channels.security.websocket import AllowedHostsOriginValidator  # noqa: E402

from chat.middleware import JWTAuthMiddleware  # noqa: E402
from chat.routing import websocket_urlpatterns  # noqa: E402

application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        "websocket": AllowedHostsOriginValidator(
            JWTAuthMiddleware(URLRouter(websocket_urlpatterns))
        ),
    }
)
