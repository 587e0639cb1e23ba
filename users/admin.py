from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User

@admin.register(User)
class CustomUserAdmin(UserAdmin):
    list_display = ('username', 'email', 'role', 'kyc_status', 'aml_status', 'is_staff')
    list_filter = ('role', 'kyc_status', 'aml_status', 'is_staff', 'is_superuser', 'is_active')
    readonly_fields = ('kyc_reviewed_at',)
    search_fields = ('username', 'email', 'first_name', 'last_name')
    fieldsets = UserAdmin.fieldsets + (
        ('Marketplace', {'fields': ('role', 'phone', 'kyc_status', 'aml_status')}),
        ('KYC review', {'fields': ('kyc_rejection_reason', 'kyc_reviewed_at')}),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Marketplace', {'fields': ('email', 'role', 'phone')}),
    )
