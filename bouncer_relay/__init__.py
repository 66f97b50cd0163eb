# bouncer_relay/__init__.py
"""
Bouncer notification relay.

Forwards newly created comments and first flags from the comment platform to
an external bouncer webhook, and answers the bouncer's handshake test.
"""

__version__ = "0.3.0"

RELAY_NAME = "talk-plugin-slack-bouncer"
