"""Telegram adapters for roomlink."""
