"""project URL Configuration

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/stable/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include

# Pas de route /media/ : les fichiers vendus ne sont servis que par fulfillment
urlpatterns = [
    path('admin/', admin.site.urls),
    path('accounts/', include('accounts.urls', namespace='accounts')),
    path('orders/', include('orders.urls', namespace='orders')),
    path('payments/', include('payments.urls', namespace='payments')),
    path('settlements/', include('payments.settlement_urls', namespace='settlements')),
    path('downloads/', include('fulfillment.urls', namespace='fulfillment')),
]
