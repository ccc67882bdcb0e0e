# config/urls.py

from django.contrib import admin
from django.urls import path, include

from . import views

# -------------------------------------------------------------------
# URL CONFIGURATION
# -------------------------------------------------------------------

urlpatterns = [
    # ----------------------------------------------------------------
    # Health & diagnostics
    # ----------------------------------------------------------------
    path("health/", views.health_check_view, name="health_check"),

    # ----------------------------------------------------------------
    # Wizard data (configuration, branches, timings)
    # ----------------------------------------------------------------
    path("api/translate-name/", views.translate_name_view, name="translate_name"),
    path("api/", include(("core.urls", "core"), namespace="core")),

    # ----------------------------------------------------------------
    # Application namespaces
    # ----------------------------------------------------------------
    path("registration/", include(("admissions.urls", "admissions"), namespace="admissions")),
    path("billing/", include(("billing.urls", "billing"), namespace="billing")),
    path("students/", include(("students.urls", "students"), namespace="students")),
    path("setup-admin/", include(("users.urls", "users"), namespace="users")),

    # ----------------------------------------------------------------
    # Private artifacts (signed links)
    # ----------------------------------------------------------------
    path("artifacts/<str:token>/", views.artifact_download_view, name="artifact_download"),

    # ----------------------------------------------------------------
    # Admin
    # ----------------------------------------------------------------
    path("admin/", admin.site.urls),
]

# -------------------------------------------------------------------
# Error handlers
# -------------------------------------------------------------------

handler400 = "config.views.handler400"
handler403 = "config.views.handler403"
handler404 = "config.views.handler404"
handler500 = "config.views.handler500"
