# openid_settings/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path("options/", views.options, name="options"),
    path("<slug:slug>/", views.page, name="page"),
]
