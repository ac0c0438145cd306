from django import forms

from .filters import LOG_FORMAT_HTML, SECONDS_PER_DAY


class ReportSelectorForm(forms.Form):
    """GET form driving the time-spent report; choices come from SelectorOptions"""
    chooselog = forms.CharField(widget=forms.HiddenInput, initial='1')
    showusers = forms.CharField(widget=forms.HiddenInput, required=False)
    showcourses = forms.CharField(widget=forms.HiddenInput, required=False)
    id = forms.TypedChoiceField(label='Course', coerce=int)
    group = forms.TypedChoiceField(label='Group', coerce=int, required=False, empty_value=0)
    user = forms.TypedChoiceField(label='Participants', coerce=int, required=False, empty_value=0)
    modid = forms.ChoiceField(label='Activities', required=False)
    modaction = forms.ChoiceField(label='Actions', required=False)
    date = forms.TypedChoiceField(label='From', coerce=int, required=False, empty_value=0)
    dateto = forms.TypedChoiceField(label='To', coerce=int, required=False, empty_value=0)
    logformat = forms.ChoiceField(label='Format', initial=LOG_FORMAT_HTML)

    def __init__(self, options, filter_set, *args, **kwargs):
        kwargs.setdefault('initial', {
            'chooselog': '1',
            'showusers': '1' if options.show_users else '0',
            'showcourses': '1' if options.show_courses else '0',
            'id': filter_set.course_id,
            'group': filter_set.group_id,
            'user': filter_set.user_id,
            'modid': options.selected_activity,
            'modaction': filter_set.action,
            'date': filter_set.date_from,
            'dateto': filter_set.date_to or 0,
            'logformat': filter_set.log_format,
        })
        super().__init__(*args, **kwargs)

        self.fields['id'].choices = options.courses
        if options.show_groups:
            self.fields['group'].choices = [(0, 'All groups')] + options.groups
        else:
            del self.fields['group']

        users = list(options.users)
        if options.show_users and not options.self_only:
            users.insert(0, (0, 'All participants'))
        self.fields['user'].choices = users

        self.fields['modid'].choices = [('', 'All activities')] + options.activities
        self.fields['modaction'].choices = [('', 'All actions')] + options.actions
        self.fields['date'].choices = options.dates
        # A "To" day is included whole, so its value is the end of that day
        self.fields['dateto'].choices = [(0, 'End of day')] + [
            (value + SECONDS_PER_DAY, label) for value, label in options.dates if value
        ]
        self.fields['logformat'].choices = options.log_formats
