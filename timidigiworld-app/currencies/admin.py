from django.contrib import admin
from .models import CurrencyRate


@admin.register(CurrencyRate)
class CurrencyRateAdmin(admin.ModelAdmin):
    list_display = ('target_currency', 'rate', 'date_update')
    list_editable = ('rate',)
    search_fields = ('target_currency',)
    readonly_fields = ('date_update',)
