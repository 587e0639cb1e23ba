from django.contrib import admin
from .models import Contract


@admin.register(Contract)
class ContractAdmin(admin.ModelAdmin):
    list_display = ('id', 'investment', 'contract_type', 'status', 'investor_signed_at', 'entrepreneur_signed_at', 'admin_signed_at', 'created_at')
    list_filter = ('status', 'contract_type')
    search_fields = ('investment__project__title', 'investment__investor__email')
    readonly_fields = ('investment', 'contract_type', 'terms_json', 'contract_pdf_url', 'status', 'created_at', 'updated_at')
