from django.contrib import admin
from .models import Investment


@admin.register(Investment)
class InvestmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'project', 'investor', 'amount', 'status', 'payment_method', 'payment_reference', 'created_at')
    list_filter = ('status', 'payment_method')
    search_fields = ('payment_reference', 'investor__username', 'investor__email', 'project__title')
    readonly_fields = ('status', 'payment_reference', 'amount', 'created_at', 'updated_at')
