from django.urls import include, path

from core import views_health

urlpatterns = [
    path("healthz", views_health.healthz, name="healthz"),
    path("readyz", views_health.readyz, name="readyz"),
    path("api/election/", include("core.urls")),
]
