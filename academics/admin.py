from django.contrib import admin
from .models import Course, CourseGroup, Enrollment, Program, ProgramCourse, Term, WeeklySlot


@admin.register(Term)
class TermAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "start_date", "end_date", "is_active", "allows_change_requests")
    list_filter = ("is_active", "allows_change_requests")


@admin.register(Program)
class ProgramAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "faculty", "is_active")
    list_filter = ("is_active", "faculty")
    search_fields = ("code", "name")


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    search_fields = ("code", "name")
    list_display = ("code", "name", "credits", "is_active")


admin.site.register(ProgramCourse)


class WeeklySlotInline(admin.TabularInline):
    model = WeeklySlot
    extra = 0


@admin.register(CourseGroup)
class CourseGroupAdmin(admin.ModelAdmin):
    list_display = ("course", "group_label", "term", "capacity", "current_enrollment_count", "is_active")
    list_filter = ("term", "is_active")
    search_fields = ("course__code", "group_label")
    inlines = [WeeklySlotInline]


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ("student", "group", "term", "status", "grade")
    list_filter = ("status", "term")
    raw_id_fields = ("student", "group")
