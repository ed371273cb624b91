"""
schema.catalog - Canonical client fields, their groups, and the header
synonyms used to infer a column mapping.

FIELDS is declared in inference priority order: when a header matches
more than one field, the earliest unclaimed field in this tuple wins.
Names come first, then identity keys, then policy fields (plan type
before the more generic plan), then demographics, notes, and finally the
combined "name" column.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field


@dataclass(frozen=True)
class FieldSpec:
    key: str                     # mapping key, e.g. "effectiveDate"
    attr: str                    # ClientRecord / Client attribute
    label: str                   # template + export column header
    group: str
    kind: str = "text"           # text | date | phone | email | status | name
    patterns: tuple[str, ...] = ()
    exclude: str | None = None
    desc: str = ""
    _compiled: tuple = field(default=(), init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(
            self, "_compiled", tuple(re.compile(p) for p in self.patterns),
        )

    def matches(self, normalized_header: str) -> bool:
        if not normalized_header:
            return False
        if self.exclude and re.search(self.exclude, normalized_header):
            return False
        return any(rx.search(normalized_header) for rx in self._compiled)


# ── Groups ─────────────────────────────────────────────────────────────
REQUIRED = "required"
CONTACT  = "contact"
POLICY   = "policy"
PERSONAL = "personal"
OTHER    = "other"
COMBINED = "combined"

GROUP_ORDER = (REQUIRED, CONTACT, POLICY, PERSONAL, OTHER)

# ── Field catalog (inference priority order) ──────────────────────────
FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("firstName", "first_name", "First Name", REQUIRED, "name",
              (r"firstname", r"^fname$", r"first", r"given"),
              desc="Client's first name"),
    FieldSpec("lastName", "last_name", "Last Name", REQUIRED, "name",
              (r"lastname", r"^lname$", r"last", r"surname"),
              exclude=r"first",
              desc="Client's last name"),
    FieldSpec("email", "email", "Email", CONTACT, "email",
              (r"email", r"mail"),
              exclude=r"mailing",
              desc="Email address (used for duplicate matching if no phone)"),
    FieldSpec("phone", "phone", "Phone", CONTACT, "phone",
              (r"phone", r"mobile", r"cell", r"tel"),
              desc="Primary phone number (used for duplicate matching)"),
    FieldSpec("effectiveDate", "effective_date", "Effective Date", POLICY, "date",
              (r"effective", r"effdate", r"startdate", r"policystart"),
              desc="Policy start date (MM/DD/YYYY)"),
    FieldSpec("dob", "dob", "DOB", PERSONAL, "date",
              (r"dob", r"birth", r"dateofbirth"),
              desc="Date of birth (MM/DD/YYYY)"),
    FieldSpec("carrier", "carrier", "Carrier", POLICY, "carrier",
              (r"carrier", r"insurance", r"insurer", r"company"),
              desc="Insurance carrier name"),
    FieldSpec("planType", "plan_type", "Plan Type", POLICY, "text",
              (r"plantype", r"type"),
              desc="e.g. Medicare Advantage, Supplement"),
    FieldSpec("plan", "plan", "Plan", POLICY, "text",
              (r"plan",),
              desc="Specific plan name"),
    FieldSpec("status", "status", "Status", POLICY, "status",
              (r"status",),
              desc="active, inactive, lost or churned"),
    FieldSpec("address", "address", "Address", PERSONAL, "text",
              (r"address", r"street"),
              exclude=r"email",
              desc="Street address"),
    FieldSpec("city", "city", "City", PERSONAL, "text",
              (r"city",),
              desc="City name"),
    FieldSpec("state", "state", "State", PERSONAL, "text",
              (r"state",),
              exclude=r"estate",
              desc="State abbreviation (e.g. KY)"),
    FieldSpec("zip", "zip", "ZIP", PERSONAL, "text",
              (r"zip", r"postal"),
              desc="5-digit ZIP"),
    FieldSpec("notes", "notes", "Notes", OTHER, "text",
              (r"note", r"comment", r"memo"),
              desc="Any additional notes about the client"),
    # Pseudo-field: a single combined name column, split into first/last
    # only when neither dedicated name column is mapped.
    FieldSpec("fullName", "", "Name", COMBINED, "name",
              (r"^(full|client|customer|contact)?name$",),
              desc="Combined first and last name"),
)

FIELDS_BY_KEY: dict[str, FieldSpec] = {f.key: f for f in FIELDS}

# Fields that end up on a client record (excludes the combined pseudo-field)
RECORD_FIELDS: tuple[FieldSpec, ...] = tuple(f for f in FIELDS if f.attr)

NAME_KEYS     = ("firstName", "lastName")
IDENTITY_KEYS = ("phone", "email")
CRITICAL_KEYS = ("phone", "effectiveDate")

# Fields that may be filled from an out-of-band default
OPTIONAL_KEYS = frozenset(
    f.key for f in RECORD_FIELDS
    if f.group in (POLICY, PERSONAL, OTHER)
)

# ── Status enumeration ────────────────────────────────────────────────
STATUS_VALUES = ("active", "inactive", "lost", "churned")
DEFAULT_STATUS = "active"

# ── Carriers recognised for name canonicalisation ─────────────────────
KNOWN_CARRIERS = (
    "Humana", "UnitedHealthcare", "Aetna", "Cigna", "Anthem",
    "Blue Cross Blue Shield", "Kaiser Permanente", "Molina Healthcare",
    "WellCare", "Centene", "CVS Health/Aetna", "Devoted Health",
    "Clover Health", "Oscar Health", "Bright Health", "Alignment Healthcare",
)


def get_field(key: str) -> FieldSpec | None:
    return FIELDS_BY_KEY.get(key)


def fields_by_group() -> dict[str, list[dict]]:
    """Catalog grouped for display, e.g. by a mapping form."""
    out: dict[str, list[dict]] = {g: [] for g in GROUP_ORDER}
    for f in RECORD_FIELDS:
        out[f.group].append({
            "key": f.key,
            "label": f.label,
            "desc": f.desc,
            "required": f.group == REQUIRED,
            "critical": f.key in CRITICAL_KEYS,
        })
    return out
