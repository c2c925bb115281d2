from django.contrib import admin
from .models import Loan, LoanTransaction, UpadEntry


class LoanTransactionInline(admin.TabularInline):
    model = LoanTransaction
    extra = 0
    fields = ("year", "month", "amount", "mode")


@admin.register(UpadEntry)
class UpadEntryAdmin(admin.ModelAdmin):
    list_display = ("employee", "month", "year", "amount", "note")
    list_filter = ("year", "month")


@admin.register(Loan)
class LoanAdmin(admin.ModelAdmin):
    list_display = ("employee", "principal", "default_installment", "start_month", "start_year", "status")
    list_filter = ("status",)
    inlines = [LoanTransactionInline]
