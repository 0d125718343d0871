"""Rallypoint notification service package.

Holds the notification fan-out pipeline used by the event and community
platform: audience resolution, record writing, push delivery and the
periodic sweep that retries pending notifications.
"""
