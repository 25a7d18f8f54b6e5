"""
Authentication - marketplace identities.

Stores users with their display name, role (guest/host) and avatar. Token
issuance happens in the external identity provider; requests carry a JWT
verified by rest_framework_simplejwt (HTTP) and chat.middleware (WebSocket).
"""
