from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.constants import UNKNOWN_CHILD_NAME
from ..core.enums import Gender


@dataclass(frozen=True)
class Guardian:
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Guardian":
        data = data or {}
        return cls(
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            phone=data.get("phone", ""),
            email=data.get("email", ""),
            address=data.get("address", ""),
        )

    def to_dict(self) -> dict:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
        }


@dataclass(frozen=True)
class ParentInfo:
    parent1: Guardian = field(default_factory=Guardian)
    parent2: Optional[Guardian] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ParentInfo":
        data = data or {}
        parent2 = data.get("parent2")
        return cls(
            parent1=Guardian.from_dict(data.get("parent1")),
            parent2=Guardian.from_dict(parent2) if parent2 else None,
        )

    def to_dict(self) -> dict:
        out = {"parent1": self.parent1.to_dict()}
        if self.parent2 is not None:
            out["parent2"] = self.parent2.to_dict()
        return out


@dataclass(frozen=True)
class EmergencyContact:
    name: str
    relationship: str = ""
    phone: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "EmergencyContact":
        return cls(name=data.get("name", ""), relationship=data.get("relationship", ""), phone=data.get("phone", ""))

    def to_dict(self) -> dict:
        return {"name": self.name, "relationship": self.relationship, "phone": self.phone}


# Same shape as an emergency contact: name, relationship, phone.
AuthorizedPickup = EmergencyContact


@dataclass(frozen=True)
class MedicalInfo:
    allergies: tuple[str, ...] = ()
    medications: tuple[str, ...] = ()
    emergency_contacts: tuple[EmergencyContact, ...] = ()
    doctor_name: str = ""
    doctor_phone: str = ""
    notes: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "MedicalInfo":
        data = data or {}
        return cls(
            allergies=tuple(data.get("allergies") or ()),
            medications=tuple(data.get("medications") or ()),
            emergency_contacts=tuple(EmergencyContact.from_dict(c) for c in data.get("emergencyContacts") or ()),
            doctor_name=data.get("doctorName", ""),
            doctor_phone=data.get("doctorPhone", ""),
            notes=data.get("notes", ""),
        )

    def to_dict(self) -> dict:
        return {
            "allergies": list(self.allergies),
            "medications": list(self.medications),
            "emergencyContacts": [c.to_dict() for c in self.emergency_contacts],
            "doctorName": self.doctor_name,
            "doctorPhone": self.doctor_phone,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class Child:
    """Domain entity: a child enrolled at the childcare."""

    child_id: str
    first_name: str
    last_name: str
    birth_date: Optional[date]
    gender: Gender
    photo: Optional[str] = None
    parent_info: ParentInfo = field(default_factory=ParentInfo)
    medical_info: MedicalInfo = field(default_factory=MedicalInfo)
    authorized_pickups: tuple[AuthorizedPickup, ...] = ()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> dict:
        return {
            "id": self.child_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "birthDate": self.birth_date.isoformat() if self.birth_date else None,
            "gender": self.gender.value,
            "photo": self.photo,
            "parentInfo": self.parent_info.to_dict(),
            "medicalInfo": self.medical_info.to_dict(),
            "authorizedPickups": [p.to_dict() for p in self.authorized_pickups],
        }


def child_name(children_by_id: dict[str, Child], child_id: str, default: str = UNKNOWN_CHILD_NAME) -> str:
    child = children_by_id.get(child_id)
    return child.full_name if child else default
