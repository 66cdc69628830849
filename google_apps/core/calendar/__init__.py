"""
Google Calendar Core Module
"""
from .google_client import GoogleCalendarClient, CALENDAR_SCOPES

__all__ = ['GoogleCalendarClient', 'CALENDAR_SCOPES']
