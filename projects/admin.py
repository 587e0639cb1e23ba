from django.contrib import admin
from .models import Project, FundingLedgerEntry


class FundingLedgerEntryInline(admin.TabularInline):
    model = FundingLedgerEntry
    extra = 0
    can_delete = False
    readonly_fields = ('investment', 'amount', 'source', 'applied_by', 'created_at')


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ('title', 'owner', 'status', 'contract_type', 'target_amount', 'raised_amount', 'deadline')
    list_filter = ('status', 'contract_type', 'risk_level', 'country')
    search_fields = ('title', 'description', 'owner__username', 'owner__email')
    readonly_fields = ('raised_amount',)
    inlines = [FundingLedgerEntryInline]


@admin.register(FundingLedgerEntry)
class FundingLedgerEntryAdmin(admin.ModelAdmin):
    list_display = ('project', 'investment', 'amount', 'source', 'applied_by', 'created_at')
    list_filter = ('source',)
    readonly_fields = ('project', 'investment', 'amount', 'source', 'applied_by', 'created_at')
