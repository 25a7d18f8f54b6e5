"""
WebSocket URL routing for the chat application.

URL Patterns:
    ws/chat/ - Single chat socket; rooms are joined with frames

Authentication:
    JWT passed as ?token=<jwt_access_token> or as the subprotocol pair
    "jwt", <token>. See chat/middleware.py.
"""

from django.urls import path

from chat import consumers

websocket_urlpatterns = [
    path("ws/chat/", consumers.ChatConsumer.as_asgi()),
]
