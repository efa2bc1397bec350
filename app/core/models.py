# Import all models here so Base.metadata knows every table before create_all
from app.api.check_in.models import TicketCheckIn
from app.api.event_staff.models import EventStaff
from app.api.profiles.models import Profile
from app.api.tickets.models import Ticket

# Re-export all models
__all__ = [
    'EventStaff',
    'Profile',
    'Ticket',
    'TicketCheckIn',
]
