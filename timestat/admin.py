from django.contrib import admin

from .models import TimeSpent


@admin.register(TimeSpent)
class TimeSpentAdmin(admin.ModelAdmin):
    list_display = ('log', 'user', 'course', 'action', 'seconds_spent')
    list_select_related = ('log__user', 'log__course')
    search_fields = ('log__user__username', 'log__action')
    raw_id_fields = ('log',)

    def user(self, obj):
        return obj.log.user
    user.short_description = 'User'

    def course(self, obj):
        return obj.log.course
    course.short_description = 'Course'

    def action(self, obj):
        return obj.log.action
