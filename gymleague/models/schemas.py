"""
Pydantic models for league records and API request/response validation.

Every record type has a fixed field set; unknown fields are rejected so that
ad hoc keys never reach a collection snapshot or the remote backend.
"""

import enum
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict


class Role(str, enum.Enum):
    """User role enum."""

    ADMIN = "admin"
    GYM_ADMIN = "gym_admin"
    COACH = "coach"
    GYMNAST = "gymnast"
    HOST = "host"


class MembershipStatus(str, enum.Enum):
    """Gymnast membership status enum."""

    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class EventStatus(str, enum.Enum):
    """Event status enum. Transitions between values are not restricted."""

    DRAFT = "draft"
    OPEN = "open"
    CLOSED = "closed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RegistrationStatus(str, enum.Enum):
    """Event registration status enum."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    WAITLISTED = "waitlisted"


class PaymentStatus(str, enum.Enum):
    """Registration payment status enum."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


class ChallengeDifficulty(str, enum.Enum):
    """Challenge difficulty tier."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class NotificationType(str, enum.Enum):
    """Notification type tag."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Record(BaseModel):
    """Base class for collection records."""

    model_config = ConfigDict(extra="forbid", use_enum_values=True, validate_assignment=True)

    id: str


# ---------------------------------------------------------------------------
# Embedded relation projections (joined by the remote backend)
# ---------------------------------------------------------------------------


class GymSummary(BaseModel):
    """Gym columns embedded into events and member profiles."""

    model_config = ConfigDict(extra="forbid")

    id: Optional[str] = None
    name: str
    city: Optional[str] = None


class ProfileSummary(BaseModel):
    """User profile columns embedded into events and gymnasts."""

    model_config = ConfigDict(extra="forbid")

    id: Optional[str] = None
    first_name: str
    last_name: str
    email: Optional[str] = None
    date_of_birth: Optional[str] = None


# ---------------------------------------------------------------------------
# Collection records
# ---------------------------------------------------------------------------


class Gym(Record):
    """Gym record."""

    name: str
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    contact_email: str = ""
    contact_phone: Optional[str] = None
    website: Optional[str] = None
    is_approved: bool = False
    admin_id: Optional[str] = None
    created_at: str
    updated_at: str


class UserProfile(Record):
    """User profile record (a league member)."""

    email: str
    first_name: str
    last_name: str
    role: Role = Role.GYMNAST
    gym_id: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[str] = None
    is_active: bool = True
    created_at: str
    updated_at: str


class Member(UserProfile):
    """User profile as listed in member management, with its gym embedded."""

    gym: Optional[GymSummary] = None


class Gymnast(Record):
    """Gymnast record extending a user profile."""

    user_id: str
    gym_id: str
    level: str
    is_team_member: bool = False
    team_name: Optional[str] = None
    approved_by_coach: bool = False
    approved_by_coach_at: Optional[str] = None
    approved_by_coach_id: Optional[str] = None
    membership_status: MembershipStatus = MembershipStatus.PENDING
    total_points: int = 0
    parent_email: Optional[str] = None
    parent_phone: Optional[str] = None
    emergency_contact: Optional[str] = None
    medical_notes: Optional[str] = None
    created_at: str
    updated_at: str
    user: Optional[ProfileSummary] = None


class Event(Record):
    """Competition event record."""

    title: str
    description: Optional[str] = None
    event_date: str
    event_time: Optional[str] = None
    location: str
    host_gym_id: str
    registration_deadline: str
    max_participants: Optional[int] = None
    entry_fee: float = 0
    ticket_price: float = 0
    status: EventStatus = EventStatus.DRAFT
    levels_allowed: List[str] = Field(default_factory=list)
    age_groups: List[str] = Field(default_factory=list)
    created_by: str
    created_at: str
    updated_at: str
    host_gym: Optional[GymSummary] = None
    creator: Optional[ProfileSummary] = None


class Registration(Record):
    """A gymnast's entry into an event, with both embedded when fetched."""

    event_id: str
    gymnast_id: str
    status: RegistrationStatus = RegistrationStatus.PENDING
    registered_at: str
    approved_at: Optional[str] = None
    approved_by: Optional[str] = None
    rejection_reason: Optional[str] = None
    payment_status: PaymentStatus = PaymentStatus.PENDING
    notes: Optional[str] = None
    created_at: str
    updated_at: str
    event: Optional[Event] = None
    gymnast: Optional[Gymnast] = None


class Challenge(Record):
    """Skill challenge reference record."""

    title: str
    description: str
    points: int = 0
    difficulty: ChallengeDifficulty = ChallengeDifficulty.BEGINNER
    category: Optional[str] = None
    time_limit_days: Optional[int] = None
    is_active: bool = True
    created_by: str
    created_at: str
    updated_at: str


class Notification(Record):
    """In-app notification record."""

    user_id: Optional[str] = None
    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    is_read: bool = False
    action_url: Optional[str] = None
    created_at: str


# ---------------------------------------------------------------------------
# API request/response models
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Request to log in with email and password."""

    email: str
    password: str


class SignupRequest(BaseModel):
    """Request to create an account."""

    email: str
    password: str
    first_name: str
    last_name: str


class AuthResponse(BaseModel):
    """Response from login/signup."""

    access_token: Optional[str] = None
    token_type: str = "bearer"
    is_demo: bool
    profile: Optional[UserProfile] = None


class CollectionResponse(BaseModel):
    """Listing of one collection plus the accessor's error state."""

    items: List[dict]
    error: Optional[str] = None


class GymStatsResponse(BaseModel):
    """Gym approval counts."""

    total: int
    approved: int
    pending: int


class AwardPointsRequest(BaseModel):
    """Request to add points to a gymnast's counter."""

    points: int


class SetRoleRequest(BaseModel):
    """Request to change a member's role."""

    role: Role


class UnreadCountResponse(BaseModel):
    """Unread notification count."""

    count: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    storage_mode: str
    message: str
