from django.contrib import admin
from .models import DomainActivity

@admin.register(DomainActivity)
class DomainActivityAdmin(admin.ModelAdmin):
    list_display = ('verb', 'target_type', 'target_id', 'actor', 'created_at')
    list_filter = ('verb', 'target_type', 'created_at')
    search_fields = ('target_id', 'actor__username')
    readonly_fields = ('actor', 'verb', 'target_type', 'target_id', 'metadata', 'created_at')
