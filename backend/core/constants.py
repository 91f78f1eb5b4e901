"""
Core constants - **Single Source of Truth** for project-wide magic numbers.

Any business rule that references a numeric or string constant should
import it from here instead of hardcoding.  ``settings.COMPLAINTS`` may
override each key; these are the defaults.
"""

# ── Complaint identifiers ───────────────────────────────────────────
# "CMP-" followed by random characters.  The alphabet drops glyphs that
# are easy to confuse when copied by hand (0/O, 1/I/L).
COMPLAINT_ID_PREFIX: str = "CMP"
COMPLAINT_ID_LENGTH: int = 8
COMPLAINT_ID_ALPHABET: str = "23456789ABCDEFGHJKMNPQRSTUVWXYZ"

# ── Intake validation ───────────────────────────────────────────────
DESCRIPTION_MIN_LENGTH: int = 20

# Evidence uploads: a single image under the "public/" prefix.
ATTACHMENT_ALLOWED_EXTENSIONS: tuple[str, ...] = ("jpg", "jpeg")
ATTACHMENT_MAX_BYTES: int = 5 * 1024 * 1024
ATTACHMENT_PREFIX: str = "public"

# ── Tracking ────────────────────────────────────────────────────────
# Session key holding {complaint_id: candidate passcode hash}.
TRACKING_SESSION_KEY: str = "tracking_unlocks"

COMPLAINT_DEFAULTS: dict = {
    "ID_PREFIX": COMPLAINT_ID_PREFIX,
    "DESCRIPTION_MIN_LENGTH": DESCRIPTION_MIN_LENGTH,
    "ATTACHMENT_ALLOWED_EXTENSIONS": ATTACHMENT_ALLOWED_EXTENSIONS,
    "ATTACHMENT_MAX_BYTES": ATTACHMENT_MAX_BYTES,
    "ATTACHMENT_PREFIX": ATTACHMENT_PREFIX,
    "STRICT_TRANSITIONS": False,
    "TRACKING_SESSION_KEY": TRACKING_SESSION_KEY,
}
