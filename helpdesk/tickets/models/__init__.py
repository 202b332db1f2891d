from helpdesk.tickets.models.event import TicketEvent, TicketEventType
from helpdesk.tickets.models.ticket import Ticket

__all__ = ["Ticket", "TicketEvent", "TicketEventType"]
