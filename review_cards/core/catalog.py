# review_cards/core/catalog.py
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


BASE_LANGUAGES: List[str] = ["English", "Gujarati", "Hindi"]

LANGUAGES: List[str] = [
    "English",
    "Gujarati",
    "Hindi",
    "English + Hindi",
    "English + Gujarati",
    "Hindi + Gujarati",
]

TONES: List[str] = ["Friendly", "Professional", "Casual", "Grateful"]

USE_CASES: List[str] = ["Customer review", "Student feedback", "Patient experience"]

# Aspects a reviewer would plausibly mention, per business category.
CATEGORY_CONTEXTS: Dict[str, str] = {
    "Food & Beverage": "food quality, taste, presentation, ambiance, service speed, staff friendliness, "
                       "cleanliness, value for money, seating comfort",
    "Health & Medical": "doctor expertise, consultation quality, staff care, facility cleanliness, waiting time, "
                        "treatment effectiveness, equipment quality, follow-up care, billing transparency",
    "Education": "teaching methodology, faculty knowledge, infrastructure, learning environment, "
                 "student support, practical training, placement assistance",
    "Services": "service quality, staff professionalism, timeliness, problem resolution, value for money, "
                "customer support, follow-up service",
    "Retail & Shopping": "product variety, quality, pricing, staff assistance, store layout, billing process, "
                         "return policy, customer service",
    "Hotels & Travel": "room comfort, cleanliness, service quality, location convenience, amenities, "
                       "staff behavior, value for money",
    "Entertainment & Recreation": "experience quality, facilities, crowd management, safety, value for money, "
                                  "staff support, cleanliness",
    "Professional Businesses": "expertise level, professionalism, service delivery, communication, timeliness, "
                               "problem-solving, client handling",
}

DEFAULT_CONTEXT = "service quality, staff behavior, overall experience, value for money"

CATEGORIES: List[str] = list(CATEGORY_CONTEXTS)


class ServicePreset(BaseModel):
    """Pre-filled card data for a known business."""
    key: str
    match: List[str] = Field(..., description="All words must appear in the business name")
    business_name: str
    category: str
    type: str
    location: str = ""
    context: str
    services: List[str]


PRESETS: List[ServicePreset] = [
    ServicePreset(
        key="smit-hospital",
        match=["smit", "hospital"],
        business_name="Smit Hospital",
        category="Health & Medical",
        type="Gynecological Hospital",
        location="Varachha, Surat",
        context="gynecological care, maternity services, doctor expertise, staff compassion, facility cleanliness, "
                "consultation quality, delivery experience, prenatal care, medical equipment, patient comfort, "
                "treatment effectiveness",
        services=[
            "Doctor Expertise", "Gynecological Care", "Maternity Services", "Delivery Experience",
            "Prenatal Care", "Consultation Quality", "Nursing Staff", "Staff Compassion",
            "Cleanliness", "Facility Quality", "Medical Equipment", "Sonography Systems",
            "Patient Comfort", "Modern Infrastructure",
            "Waiting Time", "Treatment Effectiveness", "Emergency Handling", "Billing Transparency",
            "Follow-up Care", "Appointment Scheduling",
            "IVF Services", "Infertility Treatment", "Laparoscopic Procedures", "High-Risk Pregnancy Care",
            "Cesarean Delivery", "Normal Delivery", "Painless Delivery",
            "Garbh Sanskar Program", "Menopause Guidance", "Adolescent Counseling", "Physiotherapy",
            "Family Planning Services",
            "Patient Privacy", "Family Support", "Discharge Process", "Pain Management",
            "Infection Control", "Homely Environment",
        ],
    ),
]


def preset_for(business_name: str) -> Optional[ServicePreset]:
    name = (business_name or "").lower()
    for p in PRESETS:
        if all(word in name for word in p.match):
            return p
    return None


def business_context(category: str, business_name: str) -> str:
    preset = preset_for(business_name)
    if preset is not None:
        return preset.context
    return CATEGORY_CONTEXTS.get(category, DEFAULT_CONTEXT)


class Options(BaseModel):
    languages: List[str]
    tones: List[str]
    use_cases: List[str]
    categories: List[str]
    presets: List[ServicePreset]


def options() -> Options:
    return Options(
        languages=LANGUAGES,
        tones=TONES,
        use_cases=USE_CASES,
        categories=CATEGORIES,
        presets=PRESETS,
    )
