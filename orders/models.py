from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Order(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='orders')
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    promo_code = models.ForeignKey(
        'promo_codes.PromoCode',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders',
    )
    discount_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['user', '-created_at'], name='orders_orde_user_id_7f6d2c_idx'),
        ]

    @property
    def final_amount(self):
        return self.amount - (self.discount_amount or 0)

    def __str__(self):
        return f"Order {self.id} - {self.amount}"
