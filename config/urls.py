from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/auth/", include("Accounts.urls")),
    path("api/", include("Field.urls")),
    path("api/", include("slots.urls")),
]
