# core/urls.py
from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    path('config/', views.configuration_view, name='configuration'),
    path('branches/', views.branch_list_view, name='branch_list'),
    path('branches/<int:branch_id>/eligibility/', views.branch_eligibility_view, name='branch_eligibility'),
    path('timings/', views.available_timings_view, name='available_timings'),
]
