from django.contrib import admin
from .models import Profile, BankAccount


class BankAccountInline(admin.StackedInline):
    model = BankAccount
    extra = 0
    readonly_fields = ('account_name', 'subaccount_code', 'recipient_code', 'verified_at', 'date', 'date_update')


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    inlines = [BankAccountInline, ]
    list_display = ('id', 'user', 'display_name', 'email', 'mobile_number', "status")
    list_filter = ("status",)
    list_display_links = ("id", 'user', )
    list_per_page = 10
    search_fields = ("id", 'user__username', 'email')


@admin.register(BankAccount)
class BankAccountAdmin(admin.ModelAdmin):
    list_display = ('id', 'vendor_profile', 'bank_name', 'masked_account_number', 'account_name',
                    'subaccount_code', 'verified_at')
    list_filter = ('bank_name', )
    search_fields = ('vendor_profile__user__username', 'account_name', 'bank_name')
    readonly_fields = ('account_name', 'subaccount_code', 'recipient_code', 'verified_at', 'date', 'date_update')
    list_per_page = 20
