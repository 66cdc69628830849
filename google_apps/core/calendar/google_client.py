"""
Google Calendar API Client
Provides methods to interact with Google Calendar API v3
"""
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional, Union

import pytz
from googleapiclient.discovery import build

from ...utils.logger import setup_logger
from ..base import BaseGoogleAPIClient

logger = setup_logger(__name__)

CALENDAR_SCOPES = [
    'https://www.googleapis.com/auth/calendar',
    'https://www.googleapis.com/auth/calendar.readonly',
]

EventTime = Union[datetime, date]


def format_datetime_rfc3339(dt: datetime) -> str:
    """
    Format a datetime as RFC3339. Naive datetimes are taken to be UTC.
    """
    if dt.tzinfo is None:
        return dt.isoformat() + 'Z'
    return dt.isoformat()


def format_event_time(value: EventTime, time_zone: Optional[str] = None) -> Dict[str, str]:
    """
    Build an event start/end object

    Datetimes become {'dateTime': ...}; plain dates become all-day {'date': ...}.
    Without a time_zone, naive datetimes are sent as UTC.
    """
    if isinstance(value, datetime):
        if not time_zone:
            return {'dateTime': format_datetime_rfc3339(value)}
        return {'dateTime': value.isoformat(), 'timeZone': time_zone}
    return {'date': value.isoformat()}


class GoogleCalendarClient(BaseGoogleAPIClient):
    """
    Google Calendar API client

    Provides methods to interact with Google Calendar:
    - List / get / create calendars
    - List, get, create, update and delete events
    - Free/busy queries
    """

    def _build_service(self) -> Any:
        """Build Google Calendar API service"""
        return build('calendar', 'v3', http=self.http, cache_discovery=False)

    def _get_required_scopes(self) -> List[str]:
        """Get required Google Calendar scopes"""
        return CALENDAR_SCOPES

    def _get_service_name(self) -> str:
        """Get service name"""
        return "Google Calendar"

    # =========================================================================
    # Calendars
    # =========================================================================

    def list_calendars(self) -> List[Dict[str, Any]]:
        """List every calendar on the user's calendar list"""
        return self._list_all(self.service.calendarList().list, 'items')

    def get_calendar(self, calendar_id: str = 'primary') -> Dict[str, Any]:
        """Get calendar metadata"""
        return self.service.calendars().get(calendarId=calendar_id).execute()

    def create_calendar(self, summary: str, time_zone: Optional[str] = None) -> Dict[str, Any]:
        """
        Create a secondary calendar

        Args:
            summary: Calendar title
            time_zone: IANA time zone name (e.g. 'Europe/Berlin')
        """
        body = {'summary': summary}
        if time_zone:
            body['timeZone'] = time_zone

        created = self.service.calendars().insert(body=body).execute()
        logger.info("Created calendar", calendar_id=created.get('id'))
        return created

    # =========================================================================
    # Events
    # =========================================================================

    def list_events(
        self,
        calendar_id: str = 'primary',
        time_min: Optional[datetime] = None,
        time_max: Optional[datetime] = None,
        query: Optional[str] = None,
        max_results: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        List events from Google Calendar, following every page

        Recurring events are expanded into single instances. When a time
        window is given, events are ordered by start time.

        Args:
            calendar_id: Calendar ID (default: 'primary')
            time_min: Lower bound (exclusive) for an event's end time
            time_max: Upper bound (exclusive) for an event's start time
            query: Free text search terms
            max_results: Page size hint passed to the API

        Returns:
            List of event dictionaries
        """
        params: Dict[str, Any] = {
            'calendarId': calendar_id,
            'singleEvents': True,
        }
        if time_min is not None:
            params['timeMin'] = format_datetime_rfc3339(time_min)
        if time_max is not None:
            params['timeMax'] = format_datetime_rfc3339(time_max)
        if time_min is not None or time_max is not None:
            params['orderBy'] = 'startTime'
        if query:
            params['q'] = query
        if max_results:
            params['maxResults'] = max_results

        return self._list_all(self.service.events().list, 'items', **params)

    def list_day_events(
        self,
        day: date,
        calendar_id: str = 'primary',
        tz: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        List the events of a single day, midnight to midnight in `tz` (UTC if None)
        """
        zone = pytz.timezone(tz) if tz else pytz.utc
        start = zone.localize(datetime.combine(day, time.min))
        end = zone.localize(datetime.combine(day + timedelta(days=1), time.min))
        return self.list_events(calendar_id=calendar_id, time_min=start, time_max=end)

    def get_event(self, event_id: str, calendar_id: str = 'primary') -> Dict[str, Any]:
        """Get a single event"""
        return self.service.events().get(calendarId=calendar_id, eventId=event_id).execute()

    def add_calendar_event(
        self,
        summary: str,
        start: EventTime,
        end: EventTime,
        description: Optional[str] = None,
        location: Optional[str] = None,
        attendees: Optional[List[str]] = None,
        time_zone: Optional[str] = None,
        calendar_id: str = 'primary',
        send_updates: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Create a new event in Google Calendar

        Args:
            summary: Event title
            start: Start datetime, or a date for an all-day event
            end: End datetime, or a date (exclusive) for an all-day event
            description: Event description
            location: Event location
            attendees: List of attendee emails
            time_zone: IANA zone for naive datetimes
            calendar_id: Calendar ID
            send_updates: 'all', 'externalOnly' or 'none'

        Returns:
            Created event dictionary
        """
        body: Dict[str, Any] = {
            'summary': summary,
            'start': format_event_time(start, time_zone),
            'end': format_event_time(end, time_zone),
        }
        if description:
            body['description'] = description
        if location:
            body['location'] = location
        if attendees:
            body['attendees'] = [{'email': email} for email in attendees]

        params: Dict[str, Any] = {'calendarId': calendar_id, 'body': body}
        if send_updates:
            params['sendUpdates'] = send_updates

        created = self.service.events().insert(**params).execute()
        logger.info("Created calendar event", event_id=created.get('id'), calendar_id=calendar_id)
        return created

    def update_event(
        self,
        event_id: str,
        changes: Dict[str, Any],
        calendar_id: str = 'primary'
    ) -> Dict[str, Any]:
        """
        Patch an event; only the fields present in `changes` are modified
        """
        return self.service.events().patch(
            calendarId=calendar_id,
            eventId=event_id,
            body=changes
        ).execute()

    def delete_event(self, event_id: str, calendar_id: str = 'primary') -> None:
        """Delete an event"""
        self.service.events().delete(calendarId=calendar_id, eventId=event_id).execute()
        logger.info("Deleted calendar event", event_id=event_id, calendar_id=calendar_id)

    def query_free_busy(
        self,
        calendar_ids: List[str],
        time_min: datetime,
        time_max: datetime
    ) -> Dict[str, List[Dict[str, str]]]:
        """
        Busy intervals per calendar between time_min and time_max

        Returns:
            {calendar_id: [{'start': ..., 'end': ...}, ...]}
        """
        response = self.service.freebusy().query(body={
            'timeMin': format_datetime_rfc3339(time_min),
            'timeMax': format_datetime_rfc3339(time_max),
            'items': [{'id': calendar_id} for calendar_id in calendar_ids],
        }).execute()

        calendars = response.get('calendars', {})
        return {
            calendar_id: calendars.get(calendar_id, {}).get('busy', [])
            for calendar_id in calendar_ids
        }
