from volunteer_tracker.db import schemas
from volunteer_tracker.db.repositories import events as event_repo
from volunteer_tracker.db.repositories import volunteers as volunteer_repo
from volunteer_tracker.services.csv_export import export_csv


def test_export_orders_by_name_then_newest_date(db):
    zed = volunteer_repo.create_volunteer(db, schemas.VolunteerCreate(name="Zed", email="zed@example.org"))
    amy = volunteer_repo.create_volunteer(db, schemas.VolunteerCreate(name="amy"))
    volunteer_repo.create_volunteer(db, schemas.VolunteerCreate(name="No Events"))
    for volunteer_id, date, name in [
        (zed.id, "2024-01-01", "Gala, Annual"),
        (amy.id, "2023-06-01", "Clinic"),
        (amy.id, "2024-02-01", "Walk"),
    ]:
        event_repo.create_event(
            db,
            schemas.EventCreate(volunteer_id=volunteer_id, date=date, event=name, location="Main St", hours="1:15"),
        )

    lines = export_csv(db).splitlines()

    assert lines[0] == "Volunteer ID,Volunteer Name,Email,Date,Event,Location,Hours"
    assert lines[1:] == [
        f"{amy.id},amy,,2024-02-01,Walk,Main St,1:15",
        f"{amy.id},amy,,2023-06-01,Clinic,Main St,1:15",
        f'{zed.id},Zed,zed@example.org,2024-01-01,"Gala, Annual",Main St,1:15',
    ]


def test_export_empty_database_has_header_only(db):
    assert export_csv(db) == "Volunteer ID,Volunteer Name,Email,Date,Event,Location,Hours\n"
