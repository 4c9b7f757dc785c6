from django.contrib import admin
from .models import CustomUser, Contractor


@admin.register(CustomUser)
class CustomUserAdmin(admin.ModelAdmin):
    list_display = ('id', 'email', 'first_name', 'last_name', 'user_type', 'is_active', 'created_at')
    list_filter = ('user_type', 'is_active')
    search_fields = ('email', 'first_name', 'last_name')


@admin.register(Contractor)
class ContractorAdmin(admin.ModelAdmin):
    list_display = ('id', 'company_name', 'user', 'experience', 'rating', 'review_count', 'insurance')
    list_filter = ('insurance',)
    search_fields = ('company_name', 'user__email')
