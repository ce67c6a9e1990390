from django.urls import path
from . import views

app_name = 'accounts'
urlpatterns = [
    path('payout-profile/', views.payout_profile, name='payout-profile'),
]
