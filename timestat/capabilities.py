"""
Capabilities consulted by the time-spent report
"""

from dataclasses import dataclass

from role_management.services import has_capability

VIEW = 'timestat:view'
VIEW_PARTICIPANTS = 'course:viewparticipants'
ACCESS_ALL_GROUPS = 'site:accessallgroups'
VIEW_FULL_NAMES = 'site:viewfullnames'
VIEW_SITE_REPORTS = 'report:viewsite'


@dataclass(frozen=True)
class ReportCapabilities:
    view: bool = False
    view_participants: bool = False
    access_all_groups: bool = False
    view_full_names: bool = False
    view_site_reports: bool = False

    @classmethod
    def for_user(cls, user, course=None):
        """Evaluate every report capability once for a request"""
        return cls(
            view=has_capability(user, VIEW, course),
            view_participants=has_capability(user, VIEW_PARTICIPANTS, course),
            access_all_groups=has_capability(user, ACCESS_ALL_GROUPS, course),
            view_full_names=has_capability(user, VIEW_FULL_NAMES, course),
            # Site reports are granted site-wide only
            view_site_reports=has_capability(user, VIEW_SITE_REPORTS),
        )

    @classmethod
    def unrestricted(cls):
        return cls(True, True, True, True, True)
