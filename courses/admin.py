from django.contrib import admin
from .models import Course, CourseSection, CourseModule, CourseEnrollment


class CourseSectionInline(admin.TabularInline):
    model = CourseSection
    extra = 0


class CourseModuleInline(admin.TabularInline):
    model = CourseModule
    extra = 0
    fields = ('section_number', 'position', 'module_name', 'name', 'visible', 'has_view')


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ('short_name', 'full_name', 'group_mode', 'is_site', 'start_date')
    list_filter = ('group_mode', 'is_site')
    search_fields = ('short_name', 'full_name')
    inlines = [CourseSectionInline, CourseModuleInline]


@admin.register(CourseEnrollment)
class CourseEnrollmentAdmin(admin.ModelAdmin):
    list_display = ('user', 'course', 'is_active', 'enrolled_at')
    list_filter = ('is_active', 'course')
    search_fields = ('user__username', 'course__short_name')
    raw_id_fields = ('user',)
