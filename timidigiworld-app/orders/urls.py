from django.urls import path
from . import views

app_name = 'orders'
urlpatterns = [
     path('<int:order_id>/status/', views.update_order_status, name='update-status'),
     path('notifications/', views.notifications, name='notifications'),
     path('notifications/<int:notification_id>/read/', views.mark_notification_read,
          name='notification-read'),
]
