from django.contrib import admin
from .models import PromoCode, PromoCodeUsage

@admin.register(PromoCode)
class PromoCodeAdmin(admin.ModelAdmin):
    list_display = ('code', 'discount_percent', 'used_count', 'total_limit', 'per_user_limit', 'is_active', 'ends_at')
    list_filter = ('is_active',)
    search_fields = ('code',)
    readonly_fields = ('used_count',)


@admin.register(PromoCodeUsage)
class PromoCodeUsageAdmin(admin.ModelAdmin):
    list_display = ('promo_code', 'user', 'order', 'discount_amount', 'created_at')
    search_fields = ('promo_code__code', 'user__email')
