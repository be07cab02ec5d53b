from django.urls import path
from . import views

app_name = "change_requests"

urlpatterns = [
    path("", views.collection, name="collection"),
    path("validate/", views.validate, name="validate"),
    path("<int:request_id>/", views.detail, name="detail"),
    path("<int:request_id>/approve/", views.approve, name="approve"),
    path("<int:request_id>/reject/", views.reject, name="reject"),
]
