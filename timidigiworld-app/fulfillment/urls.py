from django.urls import path
from . import views

app_name = 'fulfillment'

urlpatterns = [
    path('issue/', views.issue_download, name='issue'),
    path('redeem/<str:token>/', views.redeem_download, name='redeem'),
]
