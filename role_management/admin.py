from django.contrib import admin
from .models import Role, RoleCapability, UserRole


class RoleCapabilityInline(admin.TabularInline):
    model = RoleCapability
    extra = 1
    fields = ('capability', 'allowed')


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ('name', 'label', 'is_active')
    list_filter = ('name', 'is_active')
    inlines = [RoleCapabilityInline]


@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):
    list_display = ('user', 'role', 'course', 'valid_until')
    list_filter = ('role',)
    search_fields = ('user__username', 'course__short_name')
    raw_id_fields = ('user',)
