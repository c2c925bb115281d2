from django.urls import path
from .views import EmployeeSalaryAPIView, SalarySheetAPIView, SalaryReportPDFAPIView, SalaryReportExcelAPIView


urlpatterns = [
    path('employee/<int:employee_id>/', EmployeeSalaryAPIView.as_view(), name='employee-salary'),
    path('reports/', SalarySheetAPIView.as_view(), name='salary-sheet'),
    path('reports/salaries.pdf', SalaryReportPDFAPIView.as_view(), name='salary_report_pdf'),
    path('reports/salaries.xlsx', SalaryReportExcelAPIView.as_view(), name='salary_report_excel'),
]
