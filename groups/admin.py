from django.contrib import admin
from .models import CourseGroup, GroupMembership


class GroupMembershipInline(admin.TabularInline):
    model = GroupMembership
    extra = 1
    fields = ('user',)
    raw_id_fields = ('user',)


@admin.register(CourseGroup)
class CourseGroupAdmin(admin.ModelAdmin):
    list_display = ('name', 'course', 'id_number', 'is_active')
    list_filter = ('is_active', 'course')
    search_fields = ('name', 'id_number', 'course__short_name')
    inlines = [GroupMembershipInline]
