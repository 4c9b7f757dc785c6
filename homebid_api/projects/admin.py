from django.contrib import admin
from .models import Project, Bid


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'homeowner', 'category', 'status', 'deposit_percentage', 'created_at')
    list_filter = ('status', 'category')
    search_fields = ('title', 'homeowner__email')


@admin.register(Bid)
class BidAdmin(admin.ModelAdmin):
    list_display = ('id', 'project', 'contractor', 'amount', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('project__title', 'contractor__company_name')
    readonly_fields = ('status',)
