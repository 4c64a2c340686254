from __future__ import annotations

from enum import Enum


class SessionStatus(str, Enum):
    """Lifecycle status of a session/event."""

    SCHEDULED = "scheduled"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CheckinMethod(str, Enum):
    """How the caller is trying to check in."""

    QR = "qr"
    GEO = "geo"
    EVENT_CODE = "event_code"
    KIOSK = "kiosk"


class PolicyMode(str, Enum):
    DISABLED = "disabled"
    PUBLIC_WITH_CODE = "public_with_code"
    AUTHENTICATED = "authenticated"


class EligibleSet(str, Enum):
    """Who a policy lets through when the session belongs to a group."""

    ALL_MEMBERS = "all_members"
    ANYONE = "anyone"


class PolicyScope(str, Enum):
    SESSION = "session"
    GROUP = "group"
    ORG = "org"


class PolicySource(str, Enum):
    """Where the effective policy came from (diagnostics only)."""

    SESSION = "session"
    GROUP = "group"
    GROUP_LEGACY = "group_legacy"
    ORG = "org"
    DEFAULT = "default"


class ScopeType(str, Enum):
    """Attendance scope kinds declared on an event."""

    ORG = "org"
    GROUP = "group"
    COHORT = "cohort"
    PERSON = "person"


class OverrideScope(str, Enum):
    SESSION = "session"
    GROUP = "group"


class OverrideAccess(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


class IdentifierType(str, Enum):
    """How a public (anonymous) caller identifies themselves."""

    PHONE = "phone"
    EMAIL = "email"
    CHECKIN_CODE = "checkin_code"
    EXTERNAL_ID = "external_id"


class DenialReason(str, Enum):
    """Machine-readable outcome codes returned with every eligibility result."""

    ELIGIBLE = "eligible"
    SESSION_NOT_FOUND = "session_not_found"
    METHOD_DISABLED = "method_disabled"
    SESSION_CANCELLED = "session_cancelled"
    NOT_YET_OPEN = "not_yet_open"
    WINDOW_CLOSED = "window_closed"
    POLICY_DISABLED = "policy_disabled"
    LOCATION_REQUIRED = "location_required"
    LOCATION_NOT_CONFIGURED = "location_not_configured"
    OUT_OF_RANGE = "out_of_range"
    INVALID_EVENT_CODE = "invalid_event_code"
    INVALID_QR_TOKEN = "invalid_qr_token"
    CODE_REQUIRED = "code_required"
    LOGIN_REQUIRED = "login_required"
    IDENTITY_UNLINKED = "identity_unlinked"
    UNRESOLVED_IDENTITY = "unresolved_identity"
    NOT_IN_EVENT_SCOPE = "not_in_event_scope"
    NOT_ASSIGNED_TO_SESSION = "not_assigned_to_session"
    NOT_GROUP_MEMBER = "not_group_member"
    ACCESS_DENIED_BY_OVERRIDE = "access_denied_by_override"
    ALREADY_CHECKED_IN = "already_checked_in"


class Stage(str, Enum):
    """Evaluation stages, in the order the engine walks them."""

    SESSION_LOOKUP = "session_lookup"
    METHOD_GATE = "method_gate"
    STATUS_GATE = "status_gate"
    TIME_WINDOW_GATE = "time_window_gate"
    POLICY_RESOLVE = "policy_resolve"
    POLICY_DISABLED_GATE = "policy_disabled_gate"
    GEOFENCE_GATE = "geofence_gate"
    CODE_GATE = "code_gate"
    IDENTITY_RESOLVE = "identity_resolve"
    SCOPE_MATCH = "scope_match"
    ASSIGNMENT_MATCH = "assignment_match"
    GROUP_MEMBERSHIP_GATE = "group_membership_gate"
    OVERRIDE_GATE = "override_gate"
    DUPLICATE_GATE = "duplicate_gate"
