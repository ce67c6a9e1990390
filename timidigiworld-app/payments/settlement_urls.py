from django.urls import path
from . import views

app_name = 'settlements'

urlpatterns = [
    path('process/', views.process_settlement, name='process'),
]
