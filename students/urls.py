# students/urls.py
from django.urls import path
from . import views

app_name = 'students'

urlpatterns = [
    path('membership/', views.membership_view, name='membership'),
    path('membership/renew/', views.renew_membership_view, name='renew_membership'),
]
