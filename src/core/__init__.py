"""Core domain package for roomlink.

Core contains topology routing, filtering, and message mapping without any
Telegram-specific code, keeping the relay logic portable across transports.
"""
