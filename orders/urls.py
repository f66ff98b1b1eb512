from django.urls import path
from .views import myOrders, orderDetail, orders

urlpatterns = [
    path('', orders, name="orders"),
    path('my/', myOrders, name='myOrders'),
    path('<int:orderID>/', orderDetail, name='orderDetail'),
]
