# billing/urls.py
from django.urls import path
from . import views

app_name = 'billing'

urlpatterns = [
    path('<int:billing_id>/', views.billing_detail_view, name='billing_detail'),
    path('<int:billing_id>/payments/', views.record_payment_view, name='record_payment'),
]
