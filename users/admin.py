from django.contrib import admin
from .models import UserTimezone


@admin.register(UserTimezone)
class UserTimezoneAdmin(admin.ModelAdmin):
    list_display = ('user', 'timezone', 'last_updated')
    search_fields = ('user__username', 'timezone')
    readonly_fields = ('last_updated',)
