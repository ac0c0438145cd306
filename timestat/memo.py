class SessionMemo:
    """
    Last group chosen per course, kept in the user's session.

    Writes are last-writer-wins; the value is a UI convenience only.
    """

    SESSION_KEY = 'timestat_current_group'

    def __init__(self, mapping):
        self._mapping = mapping

    def get(self, course_id):
        groups = self._mapping.get(self.SESSION_KEY) or {}
        # Session serialisation turns integer keys into strings
        return groups.get(str(course_id))

    def set(self, course_id, group_id):
        groups = dict(self._mapping.get(self.SESSION_KEY) or {})
        groups[str(course_id)] = group_id
        self._mapping[self.SESSION_KEY] = groups
