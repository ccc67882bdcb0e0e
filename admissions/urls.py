# admissions/urls.py
from django.urls import path
from . import views

app_name = 'admissions'

urlpatterns = [
    path('start/', views.start_view, name='start'),
    path('steps/<str:step>/', views.step_view, name='step'),
    path('back/', views.back_view, name='back'),
    path('draft/', views.draft_view, name='draft'),
    path('discard/', views.discard_view, name='discard'),
    path('billing-preview/', views.billing_preview_view, name='billing_preview'),
    path('submit/', views.submit_view, name='submit'),
]
