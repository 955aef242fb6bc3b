"""Realtime relay (Socket.IO).

One server instance carries every live event: private messages and
announcement fan-out today. Domain publishers live in ``events``.
"""
