"""Room services: code generation, the room registry, expiry and the
session gateway.

Nothing in this package talks to Socket.IO directly. The gateway returns
what should be delivered and to whom; the transport in
``pairplay.socketio_events`` performs the actual sends.
"""
