import asyncio
import json

from beanie import PydanticObjectId

from conftest import approve, auth_header, login, register_account, register_doctor
from models.appointment import Appointment, AppointmentStatus

DATE = "2030-01-06"  # a Sunday


def booking(doctor_id, date=DATE, time="09:00", **extra):
    body = {"doctor_id": doctor_id, "date": date, "time": time}
    body.update(extra)
    return body


async def book(client, patient, doctor_id, **kwargs):
    return await client.post("/api/appointments", json=booking(doctor_id, **kwargs), headers=patient["headers"])


async def test_book_appointment(client, patient, approved_doctor):
    response = await book(client, patient, approved_doctor["id"], notes="first visit")
    assert response.status_code == 201, response.text
    body = response.json()
    assert body["status"] == "pending"
    assert body["patient_id"] == patient["id"]
    assert body["doctor_name"] == "Dr. Test"
    assert body["notes"] == "first visit"

    listed = await client.get(f"/api/appointments/patient/{patient['id']}", headers=patient["headers"])
    assert listed.status_code == 200
    assert [a["id"] for a in listed.json()] == [body["id"]]

    for_doctor = await client.get(
        f"/api/appointments/doctor/{approved_doctor['id']}", headers=approved_doctor["headers"]
    )
    assert for_doctor.json()[0]["patient_name"] == "Test Patient"


async def test_same_slot_twice_conflicts(client, patient, approved_doctor):
    first = await book(client, patient, approved_doctor["id"])
    second = await book(client, patient, approved_doctor["id"])
    assert first.status_code == 201
    assert second.status_code == 409

    doctor_oid = PydanticObjectId(approved_doctor["id"])
    assert await Appointment.find(Appointment.doctor_id == doctor_oid).count() == 1


async def test_concurrent_bookings_only_one_wins(client, patient, approved_doctor):
    other = await register_account(client, "second@tabib.iq", name="Second Patient")
    responses = await asyncio.gather(
        book(client, patient, approved_doctor["id"], time="10:00"),
        book(client, other, approved_doctor["id"], time="10:00"),
    )
    assert sorted(r.status_code for r in responses) == [201, 409]

    doctor_oid = PydanticObjectId(approved_doctor["id"])
    assert await Appointment.find(Appointment.doctor_id == doctor_oid).count() == 1


async def test_different_slots_do_not_conflict(client, patient, approved_doctor):
    assert (await book(client, patient, approved_doctor["id"], time="09:00")).status_code == 201
    assert (await book(client, patient, approved_doctor["id"], time="09:30")).status_code == 201
    assert (await book(client, patient, approved_doctor["id"], date="2030-01-07")).status_code == 201


async def test_cancelled_slot_can_be_rebooked(client, patient, approved_doctor):
    first = (await book(client, patient, approved_doctor["id"])).json()
    cancelled = await client.put(
        f"/api/appointments/{first['id']}/status",
        json={"status": "cancelled"},
        headers=patient["headers"],
    )
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"

    again = await book(client, patient, approved_doctor["id"])
    assert again.status_code == 201
    # the new booking holds the slot again
    third = await book(client, patient, approved_doctor["id"])
    assert third.status_code == 409


async def test_completed_appointment_keeps_slot(client, patient, approved_doctor):
    appointment = (await book(client, patient, approved_doctor["id"])).json()
    for status in ("confirmed", "completed"):
        response = await client.put(
            f"/api/appointments/{appointment['id']}/status",
            json={"status": status, "prescription": "rest"},
            headers=approved_doctor["headers"],
        )
        assert response.status_code == 200
    assert response.json()["prescription"] == "rest"

    assert (await book(client, patient, approved_doctor["id"])).status_code == 409


async def test_invalid_transitions_are_rejected(client, patient, approved_doctor):
    appointment = (await book(client, patient, approved_doctor["id"])).json()
    url = f"/api/appointments/{appointment['id']}/status"

    response = await client.put(url, json={"status": "completed"}, headers=approved_doctor["headers"])
    assert response.status_code == 400

    await client.put(url, json={"status": "cancelled"}, headers=approved_doctor["headers"])
    response = await client.put(url, json={"status": "confirmed"}, headers=approved_doctor["headers"])
    assert response.status_code == 400

    stored = await Appointment.get(PydanticObjectId(appointment["id"]))
    assert stored.status == AppointmentStatus.CANCELLED


async def test_patient_cannot_confirm(client, patient, approved_doctor):
    appointment = (await book(client, patient, approved_doctor["id"])).json()
    response = await client.put(
        f"/api/appointments/{appointment['id']}/status",
        json={"status": "confirmed"},
        headers=patient["headers"],
    )
    assert response.status_code == 403


async def test_unknown_status_is_bad_request(client, patient, approved_doctor):
    appointment = (await book(client, patient, approved_doctor["id"])).json()
    response = await client.put(
        f"/api/appointments/{appointment['id']}/status",
        json={"status": "archived"},
        headers=approved_doctor["headers"],
    )
    assert response.status_code == 400


async def test_unapproved_doctor_cannot_be_booked(client, patient):
    response = await register_doctor(client, "pending@tabib.iq")
    doctor_id = response.json()["doctor"]["id"]
    assert (await book(client, patient, doctor_id)).status_code == 404


async def test_booking_requires_auth(client, approved_doctor):
    response = await client.post("/api/appointments", json=booking(approved_doctor["id"]))
    assert response.status_code == 401


async def test_doctor_cannot_book(client, approved_doctor):
    response = await client.post(
        "/api/appointments", json=booking(approved_doctor["id"]), headers=approved_doctor["headers"]
    )
    assert response.status_code == 403


async def test_patient_books_only_for_themselves(client, patient, approved_doctor):
    other = await register_account(client, "other@tabib.iq")
    response = await book(client, patient, approved_doctor["id"], patient_id=other["id"])
    assert response.status_code == 403


async def test_admin_books_for_patient(client, admin, patient, approved_doctor):
    response = await client.post(
        "/api/appointments",
        json=booking(approved_doctor["id"], patient_id=patient["id"]),
        headers=admin["headers"],
    )
    assert response.status_code == 201
    assert response.json()["patient_id"] == patient["id"]


async def test_malformed_booking_is_bad_request(client, patient, approved_doctor):
    assert (await book(client, patient, approved_doctor["id"], date="06/01/2030")).status_code == 400
    assert (await book(client, patient, approved_doctor["id"], time="9am")).status_code == 400
    assert (await book(client, patient, "not-an-id")).status_code == 400


async def test_work_times_limit_bookable_slots(client, admin, patient):
    work_times = [{"day": "Sunday", "start_time": "09:00", "end_time": "10:30"}]
    response = await register_doctor(client, "scheduled@tabib.iq", work_times=json.dumps(work_times))
    doctor_id = response.json()["doctor"]["id"]
    await approve(client, admin, doctor_id)

    assert (await book(client, patient, doctor_id, time="09:30")).status_code == 201
    assert (await book(client, patient, doctor_id, time="10:30")).status_code == 400
    assert (await book(client, patient, doctor_id, date="2030-01-07")).status_code == 400


async def test_other_patients_cannot_see_appointments(client, patient, approved_doctor):
    appointment = (await book(client, patient, approved_doctor["id"])).json()
    other = await register_account(client, "nosy@tabib.iq")

    response = await client.get(f"/api/appointments/{appointment['id']}", headers=other["headers"])
    assert response.status_code == 403
    response = await client.get(f"/api/appointments/patient/{patient['id']}", headers=other["headers"])
    assert response.status_code == 403


async def test_delete_appointment(client, patient, approved_doctor, admin):
    appointment = (await book(client, patient, approved_doctor["id"])).json()
    url = f"/api/appointments/{appointment['id']}"

    assert (await client.delete(url, headers=approved_doctor["headers"])).status_code == 403
    assert (await client.delete(url, headers=patient["headers"])).status_code == 200
    assert (await client.get(url, headers=admin["headers"])).status_code == 404


async def test_patient_list_sorted_by_date_and_time(client, patient, approved_doctor):
    await book(client, patient, approved_doctor["id"], date="2030-02-01", time="08:00")
    await book(client, patient, approved_doctor["id"], date="2030-01-06", time="11:00")
    await book(client, patient, approved_doctor["id"], date="2030-01-06", time="09:00")

    tokens = await login(client, patient["email"])
    response = await client.get(
        f"/api/appointments/patient/{patient['id']}", headers=auth_header(tokens["access_token"])
    )
    assert [(a["date"], a["time"]) for a in response.json()] == [
        ("2030-01-06", "09:00"),
        ("2030-01-06", "11:00"),
        ("2030-02-01", "08:00"),
    ]


async def test_unpadded_date_and_time_hit_the_same_slot(client, patient, approved_doctor):
    other = await register_account(client, "unpadded@tabib.iq", name="Unpadded Patient")
    first = await book(client, patient, approved_doctor["id"], date="2030-01-06", time="09:00")
    assert first.status_code == 201

    second = await book(client, other, approved_doctor["id"], date="2030-1-6", time="9:00")
    assert second.status_code == 409

    doctor_oid = PydanticObjectId(approved_doctor["id"])
    assert await Appointment.find(Appointment.doctor_id == doctor_oid).count() == 1


async def test_booking_stores_zero_padded_slot(client, patient, approved_doctor):
    response = await book(client, patient, approved_doctor["id"], date="2030-2-3", time="8:30")
    assert response.status_code == 201
    assert (response.json()["date"], response.json()["time"]) == ("2030-02-03", "08:30")
