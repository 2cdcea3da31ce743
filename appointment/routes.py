from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from beanie.operators import In
from pymongo.errors import DuplicateKeyError
from typing import List
import logging

from auth.auth_handler import get_current_user, require_roles
from models.user import User, UserRole
from models.appointment import Appointment, AppointmentStatus
from models.doctor_profile import DoctorProfile, ReviewStatus
from models.notification import NotificationType
from notification.service import notify
from schemas.appointment import AppointmentCreate, AppointmentResponse, AppointmentStatusUpdate
from utils.email_utils import mail_enabled, send_appointment_update_email
from utils.object_ids import to_object_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments")


async def with_names(appointments: List[Appointment]) -> List[AppointmentResponse]:
    ids = {a.patient_id for a in appointments} | {a.doctor_id for a in appointments}
    users = await User.find(In(User.id, list(ids))).to_list() if ids else []
    names = {user.id: user.name for user in users}
    responses = []
    for appointment in appointments:
        response = AppointmentResponse.model_validate(appointment)
        response.patient_name = names.get(appointment.patient_id)
        response.doctor_name = names.get(appointment.doctor_id)
        responses.append(response)
    return responses


async def load_appointment(appointment_id: str) -> Appointment:
    appointment = await Appointment.get(to_object_id(appointment_id, "appointment ID"))
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment


def check_participant(appointment: Appointment, user: User):
    if user.role == UserRole.ADMIN:
        return
    if user.id not in (appointment.patient_id, appointment.doctor_id):
        raise HTTPException(status_code=403, detail="Not authorized to access this appointment")


@router.post("", response_model=AppointmentResponse, status_code=201)
async def book_appointment(
    booking: AppointmentCreate,
    current_user: User = Depends(require_roles(UserRole.PATIENT, UserRole.ADMIN)),
):
    if current_user.role == UserRole.ADMIN:
        if not booking.patient_id:
            raise HTTPException(status_code=400, detail="patient_id is required")
        patient = await User.get(to_object_id(booking.patient_id, "patient ID"))
        if patient is None or patient.role != UserRole.PATIENT:
            raise HTTPException(status_code=404, detail="Patient not found")
    else:
        if booking.patient_id and booking.patient_id != str(current_user.id):
            raise HTTPException(status_code=403, detail="Patients can only book for themselves")
        patient = current_user

    doctor = await User.get(to_object_id(booking.doctor_id, "doctor ID"))
    if doctor is None or doctor.role != UserRole.DOCTOR or not doctor.is_active:
        raise HTTPException(status_code=404, detail="Doctor not found")
    profile = await DoctorProfile.find_one(DoctorProfile.user_id == doctor.id)
    if profile is None or profile.status != ReviewStatus.APPROVED:
        raise HTTPException(status_code=404, detail="Doctor not found")
    if not profile.is_available or not profile.offers_slot(booking.date, booking.time):
        raise HTTPException(status_code=400, detail="Time slot not available")

    appointment = Appointment(
        patient_id=patient.id,
        doctor_id=doctor.id,
        date=booking.date,
        time=booking.time,
        type=booking.type,
        notes=booking.notes,
        symptoms=booking.symptoms,
    )
    try:
        # The unique slot index decides between concurrent bookings
        await appointment.insert()
    except DuplicateKeyError:
        logger.info(f"Slot {booking.date} {booking.time} already taken for doctor {doctor.id}")
        raise HTTPException(status_code=409, detail="Appointment time not available")

    await notify(
        doctor.id,
        "New appointment",
        f"You have a new appointment with {patient.name} on {appointment.date} at {appointment.time}",
        NotificationType.APPOINTMENT,
        doctor_id=doctor.id,
    )
    await notify(
        patient.id,
        "Appointment booked",
        f"Your appointment with {doctor.name} on {appointment.date} at {appointment.time} was booked",
        NotificationType.APPOINTMENT,
        doctor_id=doctor.id,
    )
    logger.info(f"Appointment {appointment.id} booked for patient {patient.id} with doctor {doctor.id}")

    response = AppointmentResponse.model_validate(appointment)
    response.patient_name = patient.name
    response.doctor_name = doctor.name
    return response


@router.get("/patient/{patient_id}", response_model=List[AppointmentResponse])
async def get_patient_appointments(patient_id: str, current_user: User = Depends(get_current_user)):
    patient_oid = to_object_id(patient_id, "patient ID")
    if current_user.role != UserRole.ADMIN and current_user.id != patient_oid:
        raise HTTPException(status_code=403, detail="Not authorized to view these appointments")
    appointments = (
        await Appointment.find(Appointment.patient_id == patient_oid)
        .sort(+Appointment.date, +Appointment.time)
        .to_list()
    )
    return await with_names(appointments)


@router.get("/doctor/{doctor_id}", response_model=List[AppointmentResponse])
async def get_doctor_appointments(doctor_id: str, current_user: User = Depends(get_current_user)):
    doctor_oid = to_object_id(doctor_id, "doctor ID")
    if current_user.role != UserRole.ADMIN and current_user.id != doctor_oid:
        raise HTTPException(status_code=403, detail="Not authorized to view these appointments")
    appointments = (
        await Appointment.find(Appointment.doctor_id == doctor_oid)
        .sort(+Appointment.date, +Appointment.time)
        .to_list()
    )
    return await with_names(appointments)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(appointment_id: str, current_user: User = Depends(get_current_user)):
    appointment = await load_appointment(appointment_id)
    check_participant(appointment, current_user)
    return (await with_names([appointment]))[0]


@router.put("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: str,
    update: AppointmentStatusUpdate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
):
    appointment = await load_appointment(appointment_id)
    check_participant(appointment, current_user)

    if (
        current_user.role == UserRole.PATIENT
        and update.status != AppointmentStatus.CANCELLED
    ):
        raise HTTPException(status_code=403, detail="Patients can only cancel appointments")
    if not appointment.can_transition_to(update.status):
        raise HTTPException(
            status_code=400,
            detail=f"Cannot change appointment from {appointment.status.value} to {update.status.value}",
        )

    await appointment.set_status(update.status, update.prescription)
    logger.info(f"Appointment {appointment.id} is now {update.status.value}")

    patient = await User.get(appointment.patient_id)
    doctor = await User.get(appointment.doctor_id)
    subject = f"Appointment {update.status.value}"
    if patient is not None:
        await notify(
            patient.id,
            subject,
            f"Your appointment on {appointment.date} at {appointment.time} is {update.status.value}",
            NotificationType.APPOINTMENT,
            doctor_id=appointment.doctor_id,
        )
    if current_user.id == appointment.patient_id and doctor is not None:
        await notify(
            doctor.id,
            subject,
            f"{current_user.name} cancelled the appointment on {appointment.date} at {appointment.time}",
            NotificationType.APPOINTMENT,
            doctor_id=doctor.id,
        )

    if mail_enabled() and patient is not None and doctor is not None:
        for recipient in (patient.email, doctor.email):
            background_tasks.add_task(
                send_appointment_update_email, recipient, subject, appointment, doctor.name, patient.name
            )

    return (await with_names([appointment]))[0]


@router.delete("/{appointment_id}")
async def delete_appointment(appointment_id: str, current_user: User = Depends(get_current_user)):
    appointment = await load_appointment(appointment_id)
    if current_user.role != UserRole.ADMIN and current_user.id != appointment.patient_id:
        raise HTTPException(status_code=403, detail="Not authorized to delete this appointment")
    await appointment.delete()
    logger.info(f"Appointment {appointment_id} deleted")
    return {"msg": "Appointment deleted successfully"}
