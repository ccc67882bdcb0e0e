# users/urls.py
from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    path('', views.setup_admin_view, name='setup_admin'),
]
