from django.contrib import admin
from .models import RentedField


@admin.register(RentedField)
class RentedFieldAdmin(admin.ModelAdmin):
    list_display = ['field', 'renter', 'start_date', 'end_date', 'price', 'status']
    list_filter = ['status', 'start_date']
    search_fields = ['field__name', 'renter__email']
    raw_id_fields = ['renter', 'field']
