"""Routing Gateway Service: authentication gate and request forwarding."""
