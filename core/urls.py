"""URL configuration for the development project."""

from django.urls import include, path

from . import views

demo_patterns = [
    path("", views.page, name="dashboard"),
    path("assets/", views.page, name="assets_list"),
    path("assets/new/", views.page, name="assets_new"),
    path("assets/<int:pk>/", views.page, name="assets_show"),
    path("assets/<int:pk>/edit/", views.page, name="assets_edit"),
    path("users/", views.page, name="users_list"),
]

urlpatterns = [
    path("demo/", include((demo_patterns, "demo"))),
]
