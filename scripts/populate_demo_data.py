from datetime import timedelta

from sqlalchemy.orm import Session

from app.api.event_staff import crud as event_staff_crud
from app.api.event_staff import schemas as event_staff_schemas
from app.api.profiles import crud as profile_crud
from app.api.profiles import schemas as profile_schemas
from app.api.profiles.models import Profile
from app.api.tickets import crud as ticket_crud
from app.api.tickets import schemas as ticket_schemas
from app.core import models  # noqa: F401
from app.core.config import settings
from app.core.database import SessionLocal, create_db
from app.core.security import create_access_token, create_refresh_token
from app.core.utils import today

DEMO_EVENT_ID = 'demo-event'
DEMO_TICKETS = [
    ('Ada Lovelace', 'VIP', 0),
    ('Grace Hopper', 'Standard', 0),
    ('Alan Turing', None, 0),
    ('Tomorrow Guest', 'Standard', 1),
    ('Yesterday Guest', 'Standard', -1),
]


def get_or_create_profile(
    db: Session, email: str, full_name: str, role: profile_schemas.ProfileRole
) -> Profile:
    profile = db.query(Profile).filter(Profile.email == email).first()
    if not profile:
        profile = profile_crud.profile.create(
            db,
            profile_schemas.ProfileCreate(email=email, full_name=full_name, role=role),
        )
    print(f'Profile ready: {profile.id} - {profile.email} ({profile.role})')
    return profile


def assign_staff(db: Session, profile: Profile):
    if event_staff_crud.event_staff.get_assignment(db, DEMO_EVENT_ID, profile.id):
        return
    event_staff_crud.event_staff.create(
        db,
        event_staff_schemas.EventStaffCreate(
            event_id=DEMO_EVENT_ID, user_id=profile.id
        ),
    )
    print(f'Assigned {profile.email} as staff for {DEMO_EVENT_ID}')


def issue_demo_tickets(db: Session):
    print('Issuing tickets...')
    for attendee_name, tier, day_offset in DEMO_TICKETS:
        ticket = ticket_crud.ticket.issue(
            db,
            ticket_schemas.TicketIssue(
                event_id=DEMO_EVENT_ID,
                valid_for_date=today() + timedelta(days=day_offset),
                attendee_name=attendee_name,
                ticket_tier=tier,
            ),
            settings.QR_SIGNING_SECRET,
        )
        print(f'{attendee_name} ({ticket.valid_for_date}): {ticket.qr_payload}')


def print_credentials(profile: Profile):
    claims = {'user_id': profile.id, 'email': profile.email}
    print(f'\nCredentials for {profile.email}:')
    print(f'Authorization: Bearer {create_access_token(claims)}')
    print(f'X-Refresh-Token: {create_refresh_token(claims)}')


def main():
    settings.validate()
    create_db()
    db = SessionLocal()
    try:
        print('\nDatabase Connection Information:')
        print('Database Type: PostgreSQL')
        print(f'Host: {settings.DB_HOST}')
        print(f'Port: {settings.DB_PORT}')
        print(f'Database Name: {settings.DB_NAME}')
        print(f'Username: {settings.DB_USERNAME}')

        print('\nThis script will create demo data in the database:')
        print(f'1. An organizer and a staff member for {DEMO_EVENT_ID}')
        print('2. Signed tickets valid yesterday, today and tomorrow')

        confirm = input('Do you want to proceed? (y/N): ')
        if confirm.lower() != 'y':
            print('Operation cancelled')
            return

        organizer = get_or_create_profile(
            db,
            'organizer@example.com',
            'Demo Organizer',
            profile_schemas.ProfileRole.ORGANIZER,
        )
        staff = get_or_create_profile(
            db,
            'scanner@example.com',
            'Gate Scanner',
            profile_schemas.ProfileRole.STAFF,
        )
        assign_staff(db, staff)
        issue_demo_tickets(db)
        print_credentials(organizer)
        print_credentials(staff)
    finally:
        db.close()


if __name__ == '__main__':
    main()
