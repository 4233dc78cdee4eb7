# peekhour/services/event.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from peekhour.core.decorator import db_exception
from peekhour.models.event import Event
from peekhour.models.event_attendee import EventAttendee
from peekhour.schemas.event import EventCreate
from peekhour.services.department import get_department_or_404, require_permission

logger = logging.getLogger(__name__)


class EventService:
    def __init__(self, db: Session):
        self.db = db

    def _annotate(self, events: List[Event], user_id: Optional[int]) -> None:
        if not events:
            return
        ids = [e.id for e in events]

        counts = {}
        for event_id, rsvp, count in (
            self.db.query(
                EventAttendee.event_id, EventAttendee.status, func.count(EventAttendee.id)
            )
            .filter(EventAttendee.event_id.in_(ids))
            .group_by(EventAttendee.event_id, EventAttendee.status)
            .all()
        ):
            counts[(event_id, rsvp)] = count

        own = {}
        if user_id:
            own = dict(
                self.db.query(EventAttendee.event_id, EventAttendee.status)
                .filter(
                    EventAttendee.event_id.in_(ids), EventAttendee.user_id == user_id
                )
                .all()
            )

        for event in events:
            event.going_count = counts.get((event.id, "going"), 0)
            event.maybe_count = counts.get((event.id, "maybe"), 0)
            event.user_status = own.get(event.id)

    @db_exception
    def create_event(
        self, department_id: int, event_in: EventCreate, user_id: int
    ) -> Event:
        department = get_department_or_404(self.db, department_id)
        require_permission(
            self.db,
            department,
            user_id,
            "can_create_event",
            not_moderator_detail="Only admins and moderators can create events",
            denied_detail="You do not have permission to create events",
        )

        if event_in.end_time and event_in.end_time < event_in.start_time:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Event cannot end before it starts",
            )

        event = Event(
            **event_in.model_dump(), department_id=department_id, created_by=user_id
        )
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)

        logger.info(f"Event {event.id} created in department {department_id}")
        self._annotate([event], user_id)
        return event

    def get_events(
        self,
        department_id: int,
        upcoming: bool = True,
        user_id: Optional[int] = None,
    ) -> List[Event]:
        """Events of a department in chronological order.

        With ``upcoming`` only active events that have not started yet are
        listed; otherwise the full history, cancelled events included.
        """
        get_department_or_404(self.db, department_id)

        query = (
            self.db.query(Event)
            .filter(Event.department_id == department_id)
            .options(selectinload(Event.creator))
        )
        if upcoming:
            query = query.filter(
                Event.start_time > datetime.now(timezone.utc),
                Event.is_active == True,
            )

        events = query.order_by(Event.start_time.asc(), Event.id.asc()).all()
        self._annotate(events, user_id)
        return events

    def _get_active_event(self, event_id: int) -> Event:
        event = (
            self.db.query(Event)
            .filter(Event.id == event_id, Event.is_active == True)
            .first()
        )
        if not event:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Event not found or inactive",
            )
        return event

    @db_exception
    def rsvp(self, event_id: int, rsvp_status: str, user_id: int) -> dict:
        """Set the user's RSVP; ``not_going`` removes it"""
        event = self._get_active_event(event_id)

        existing = (
            self.db.query(EventAttendee)
            .filter(EventAttendee.event_id == event_id, EventAttendee.user_id == user_id)
            .first()
        )

        if rsvp_status == "going" and event.max_attendees:
            going = (
                self.db.query(EventAttendee)
                .filter(
                    EventAttendee.event_id == event_id,
                    EventAttendee.status == "going",
                    EventAttendee.user_id != user_id,
                )
                .count()
            )
            if going >= event.max_attendees:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST, detail="Event is full"
                )

        if rsvp_status == "not_going":
            if existing:
                self.db.delete(existing)
        elif existing:
            existing.status = rsvp_status
        else:
            self.db.add(
                EventAttendee(event_id=event_id, user_id=user_id, status=rsvp_status)
            )

        self.db.commit()
        return {"event_id": event_id, "status": rsvp_status}

    def get_attendees(self, event_id: int) -> List[EventAttendee]:
        self._get_active_event(event_id)

        return (
            self.db.query(EventAttendee)
            .filter(EventAttendee.event_id == event_id)
            .options(selectinload(EventAttendee.user))
            .order_by(EventAttendee.created_at.asc(), EventAttendee.id.asc())
            .all()
        )
