import logging

from django.http import HttpResponse
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.api.permissions import resource_permission

from .aggregator import SalesReport
from .filters import ReportFilters
from .writers import ExcelReportWriter, PdfReportWriter

logger = logging.getLogger(__name__)

CanViewReports = resource_permission("reports", "view")
CanExportReports = resource_permission("reports", "export")


def _report(request) -> SalesReport:
    return SalesReport(ReportFilters.from_query(request.query_params))


@api_view(["GET"])
@permission_classes([CanViewReports])
def summary(request):
    return Response(_report(request).summary())


@api_view(["GET"])
@permission_classes([CanViewReports])
def sales_rows(request):
    return Response(_report(request).rows())


def _export(request, writer):
    report = _report(request)
    payload = report.render(writer)
    logger.info("Report export %s by user %s (%d bytes)", writer.filename, request.user.pk, len(payload))
    response = HttpResponse(payload, content_type=writer.content_type)
    response["Content-Disposition"] = f'attachment; filename="{writer.filename}"'
    return response


@api_view(["GET"])
@permission_classes([CanExportReports])
def export_excel(request):
    return _export(request, ExcelReportWriter())


@api_view(["GET"])
@permission_classes([CanExportReports])
def export_pdf(request):
    return _export(request, PdfReportWriter())
