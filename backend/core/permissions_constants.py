"""
Permissions Constants - **Single Source of Truth**

Every role name and staff action referenced in code (services, views,
the ``create_staff`` command, tests) MUST use one of the constants
defined here.

Organisation
------------
- ``Roles``   - the fixed set of staff roles carried on ``User.role`` and
  in the ``role`` claim of issued JWTs.
- ``Actions`` - the operations a staff member can attempt on a complaint.
- ``ROLE_GRANTS`` - which actions each role may perform at all.
- ``ASSIGNMENT_BOUND_ROLES`` - roles whose grants only apply to
  complaints assigned to them.

The grant table is consumed exclusively by ``core.domain.access.can``.
"""


# ════════════════════════════════════════════════════════════════════
#  Roles
# ════════════════════════════════════════════════════════════════════

class Roles:
    """Staff role identifiers (stored verbatim on ``User.role``)."""

    ADMIN = "admin"
    ACTION_TAKER = "action_taker"
    COMMITTEE = "committee"
    DEVELOPER = "developer"

    ALL = (ADMIN, ACTION_TAKER, COMMITTEE, DEVELOPER)


# ════════════════════════════════════════════════════════════════════
#  Actions
# ════════════════════════════════════════════════════════════════════

class Actions:
    """Staff operations on complaints."""

    READ = "read"
    """List / retrieve complaints and their audit trail."""

    ASSIGN = "assign"
    """Set or clear ``assigned_to``."""

    MUTATE_STATUS = "mutate_status"
    """Change the complaint ``status`` field."""

    PUBLISH_UPDATE = "publish_update"
    """Append a complainant-visible public update."""

    ANNOTATE = "annotate"
    """Read and add staff-only internal notes."""

    EXPORT = "export"
    """Download the scoped complaint list as CSV / XLSX / PDF."""

    ALL = (READ, ASSIGN, MUTATE_STATUS, PUBLISH_UPDATE, ANNOTATE, EXPORT)


# ════════════════════════════════════════════════════════════════════
#  Grant table
# ════════════════════════════════════════════════════════════════════

ROLE_GRANTS: dict[str, frozenset[str]] = {
    Roles.ADMIN: frozenset(Actions.ALL),
    Roles.DEVELOPER: frozenset(Actions.ALL),
    Roles.COMMITTEE: frozenset(Actions.ALL),
    Roles.ACTION_TAKER: frozenset({
        Actions.READ,
        Actions.MUTATE_STATUS,
        Actions.PUBLISH_UPDATE,
        Actions.ANNOTATE,
    }),
}

#: Roles whose grants apply only to complaints where ``assigned_to == self``.
ASSIGNMENT_BOUND_ROLES: frozenset[str] = frozenset({Roles.ACTION_TAKER})

#: Roles allowed to read the staff roster (assignee picker, export lookups).
ROSTER_ROLES: frozenset[str] = frozenset({
    Roles.ADMIN,
    Roles.COMMITTEE,
    Roles.DEVELOPER,
})
