from django.urls import path
from . import views

app_name = "academics"

urlpatterns = [
    path("schedule/", views.schedule, name="schedule"),
    path("risk/", views.risk, name="risk"),
    path("risk/<int:student_id>/", views.risk, name="student_risk"),
    path("statistics/", views.statistics, name="statistics"),
]
