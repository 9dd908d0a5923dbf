"""Certificate models - the versioned livability document and its stored record."""

from enum import Enum
from typing import Literal, Optional, Any
from pydantic import BaseModel, Field


CERTIFICATE_VERSION = "1.0.0"

SignalState = Literal["positive", "neutral", "sensitive", "negative"]
ChecklistCategory = Literal["light", "noise", "structure", "legal", "neighbourhood", "lifestyle"]
Severity = Literal["low", "medium", "high"]


class CertificateTier(str, Enum):
    NORMAL = "normal"
    PRO = "pro"


class CertificateStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    ERROR = "error"


class CertificateMeta(BaseModel):
    id: str = Field("", description="Backfilled with the record ID after insert")
    tier: CertificateTier
    version: str = CERTIFICATE_VERSION
    generated_at: str


class ExperienceBarometer(BaseModel):
    state: str
    trajectory: str
    one_sentence: str


class ExperienceCapital(BaseModel):
    generating: list[str] = Field(default_factory=list, description="What the space gives you")
    preserving: list[str] = Field(default_factory=list, description="What keeps it stable")
    draining: list[str] = Field(default_factory=list, description="What costs energy or comfort")


class Signal(BaseModel):
    name: str
    state: SignalState
    short_explanation: str


class ChecklistItem(BaseModel):
    item: str
    category: ChecklistCategory


class PropertyIdentity(BaseModel):
    title: str
    city: str = ""
    property_type: str = "Residential"
    sqft: Optional[float] = None
    beds: Optional[float] = None
    baths: Optional[float] = None


class LocationContext(BaseModel):
    walkability: str
    daily_convenience: str
    traffic_exposure: str
    neighbourhood_energy: str


class RealfeelEnvironment(BaseModel):
    natural_light_summary: str
    noise_summary: str
    lifestyle_summary: str


class VisitStrategy(BaseModel):
    best_visit_time: Literal["evening", "afternoon"]
    why: str


class SilenceAndDrift(BaseModel):
    missing_elements: list[str]
    hidden_risks: list[str]
    overlooked_opportunities: list[str]


class StrategicRisk(BaseModel):
    risk: str
    severity: Severity
    mitigation: str


class StrategicRisks(BaseModel):
    risks: list[StrategicRisk]


class PropertyCertificate(BaseModel):
    """Normal-tier certificate for an ingested property."""
    meta: CertificateMeta
    property_identity: PropertyIdentity
    experience_barometer: ExperienceBarometer
    experience_capital: ExperienceCapital
    signals: list[Signal]
    location_context: LocationContext
    realfeel_environment: RealfeelEnvironment
    verification_checklist: list[ChecklistItem]
    editorial_summary: str


class ProPropertyCertificate(PropertyCertificate):
    """Pro tier adds visit planning and risk sections."""
    visit_strategy: VisitStrategy
    silence_and_drift: SilenceAndDrift
    strategic_risks: StrategicRisks


PRO_SECTIONS = ("visit_strategy", "silence_and_drift", "strategic_risks")


# Space-based certificate shape

class SpaceIdentity(BaseModel):
    title: str
    city: str
    property_type: str
    area_m2: float
    floor: str


class PeerGravity(BaseModel):
    comparable_segment: str
    perceived_position: str
    explanation: str


class ExperienceTension(BaseModel):
    compensations: list[str]
    dependencies: list[str]


class Evidence(BaseModel):
    photo_observations: list[str]
    listing_observations: list[str]


class SpaceCertificate(BaseModel):
    meta: CertificateMeta
    property_identity: SpaceIdentity
    experience_barometer: ExperienceBarometer
    experience_capital: ExperienceCapital
    signals: list[Signal] = Field(..., max_length=6)
    editorial_summary: str


class ProSpaceCertificate(SpaceCertificate):
    silence_and_drift: SilenceAndDrift
    peer_gravity: PeerGravity
    experience_tension: ExperienceTension
    strategic_risks: StrategicRisks
    evidence: Evidence


class CertificateRecord(BaseModel):
    """Row in the certificates table."""
    id: Optional[str] = None
    property_id: Optional[str] = None
    space_id: Optional[str] = None
    tier: CertificateTier = CertificateTier.NORMAL
    status: CertificateStatus = CertificateStatus.PENDING
    version: str = CERTIFICATE_VERSION
    certificate_json: Optional[dict[str, Any]] = None
    source_inputs_json: Optional[dict[str, Any]] = None
    error_message: Optional[str] = None
    created_at: Optional[str] = None
    completed_at: Optional[str] = None


def is_pro_certificate(certificate: dict) -> bool:
    return certificate.get("meta", {}).get("tier") == CertificateTier.PRO.value
