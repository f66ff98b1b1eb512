from django.urls import path

from .views import applyPromoCode, promoCodeDetail, promoCodes

urlpatterns = [
    path('', promoCodes, name='promoCodes'),
    path('apply/', applyPromoCode, name='applyPromoCode'),
    path('<int:id>/', promoCodeDetail, name='promoCodeDetail'),
]
