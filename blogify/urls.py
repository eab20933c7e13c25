from django.contrib import admin
from django.urls import include, path

from publishing import views

urlpatterns = [
    path("", views.index, name="index"),
    path("admin/", admin.site.urls),
    path("api/", include("publishing.urls")),
]
