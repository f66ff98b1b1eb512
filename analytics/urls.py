from django.urls import path

from .views import promoCodeStats, promoCodeUsageHistory, promoCodesAnalytics, usersAnalytics

urlpatterns = [
    path('promo-codes/', promoCodesAnalytics, name='promoCodesAnalytics'),
    path('promo-codes/<int:id>/stats/', promoCodeStats, name='promoCodeStats'),
    path('users/', usersAnalytics, name='usersAnalytics'),
    path('promo-code-usages/', promoCodeUsageHistory, name='promoCodeUsageHistory'),
]
