from django.contrib import admin
from django.http import HttpResponse
from django.urls import path

from forum.api import api


def index(request):
    return HttpResponse("backend server is running")


urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", api.urls),
    path("", index, name="index"),
]
