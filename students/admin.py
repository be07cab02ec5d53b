from django.contrib import admin
from .models import Student

@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ("id", "code", "first_name", "last_name", "program", "current_semester")
    list_filter = ("program",)
    search_fields = ("code", "first_name", "last_name")
    raw_id_fields = ("user",)
