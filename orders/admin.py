from django.contrib import admin
from .models import Order

@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'amount', 'promo_code', 'discount_amount', 'created_at')
    list_filter = ('created_at',)
    search_fields = ('user__email',)
