"""
URLs pour les paiements Paystack
"""
from django.urls import path
from . import views

app_name = 'payments'

urlpatterns = [
    path('initiate/', views.initiate_payment, name='initiate'),
    path('verify/', views.verify_payment, name='verify'),
    path('paystack/webhook/', views.paystack_webhook, name='paystack-webhook'),
]
